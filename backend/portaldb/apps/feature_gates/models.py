# backend/portaldb/apps/feature_gates/models.py

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    Text,
)

from portaldb.apps.accounts.models import PlatformRole
from portaldb.database import Base
from portaldb.user_id import prefixed


class FeatureKey(str, enum.Enum):
    ACTIVITY_HUB = "ACTIVITY_HUB"
    CHALLENGES = "CHALLENGES"
    INCUBATOR = "INCUBATOR"
    PASSION_WORLD = "PASSION_WORLD"


class FeatureGateScope(str, enum.Enum):
    """Evaluated in declaration order; the first scope with an active rule wins."""

    USER = "USER"
    CHAPTER = "CHAPTER"
    ROLE = "ROLE"
    GLOBAL = "GLOBAL"


class FeatureGateRule(Base):
    """
    Scoped on/off directive for a feature, optionally time boxed.

    A rule is active while now is inside [starts_at, ends_at]; a null bound
    is open ended.
    """

    __tablename__ = "feature_gate_rules"
    __table_args__ = (
        Index("ix_feature_gate_rules_key_scope", "feature_key", "scope"),
        Index("ix_feature_gate_rules_key_user", "feature_key", "user_id"),
        Index("ix_feature_gate_rules_key_chapter", "feature_key", "chapter_id"),
    )

    id = Column(String(36), primary_key=True, default=prefixed("FGR"))
    feature_key = Column(
        Enum(FeatureKey, name="feature_key_enum", native_enum=False),
        nullable=False,
    )
    scope = Column(
        Enum(FeatureGateScope, name="feature_gate_scope_enum", native_enum=False),
        nullable=False,
    )
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    chapter_id = Column(String(36), ForeignKey("chapters.id", ondelete="CASCADE"), nullable=True)
    role = Column(Enum(PlatformRole, name="platform_role_enum", native_enum=False), nullable=True)

    enabled = Column(Boolean, nullable=False, default=True)
    starts_at = Column(DateTime(timezone=True), nullable=True)
    ends_at = Column(DateTime(timezone=True), nullable=True)
    note = Column(Text, nullable=True)

    created_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )
