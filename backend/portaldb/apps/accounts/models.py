# backend/portaldb/apps/accounts/models.py

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from portaldb.database import Base
from portaldb.user_id import prefixed


# ---------------------------------------------------------------------------
# ENUMS
# ---------------------------------------------------------------------------


class PlatformRole(str, enum.Enum):
    """Roles a portal user can hold. A user may hold several at once."""

    ADMIN = "ADMIN"
    CHAPTER_LEAD = "CHAPTER_LEAD"
    INSTRUCTOR = "INSTRUCTOR"
    MENTOR = "MENTOR"
    STAFF = "STAFF"
    PARENT = "PARENT"
    STUDENT = "STUDENT"


class AwardTier(str, enum.Enum):
    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"


# ---------------------------------------------------------------------------
# CHAPTER
# ---------------------------------------------------------------------------


class Chapter(Base):
    __tablename__ = "chapters"

    id = Column(String(36), primary_key=True, default=prefixed("CHP"))
    name = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)

    users = relationship("User", back_populates="chapter")

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Chapter id={self.id} name={self.name!r}>"


# ---------------------------------------------------------------------------
# USERS
# ---------------------------------------------------------------------------


class User(Base):
    """
    Portal account.

    `primary_role` drives dashboards and navigation emphasis; the full role
    set lives in `UserRole` rows.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=prefixed("USR"))
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)

    chapter_id = Column(
        String(36),
        ForeignKey("chapters.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    primary_role = Column(
        Enum(PlatformRole, name="platform_role_enum", native_enum=False),
        nullable=False,
        default=PlatformRole.STUDENT,
    )
    award_tier = Column(
        Enum(AwardTier, name="award_tier_enum", native_enum=False),
        nullable=True,
    )

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    chapter = relationship("Chapter", back_populates="users")
    roles = relationship(
        "UserRole",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def role_values(self) -> list[str]:
        return [entry.role.value for entry in self.roles]

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User id={self.id} email={self.email!r}>"


class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    id = Column(String(36), primary_key=True, default=prefixed("URL"))
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role = Column(
        Enum(PlatformRole, name="platform_role_enum", native_enum=False),
        nullable=False,
    )

    user = relationship("User", back_populates="roles")
