# backend/portaldb/apps/training/models.py

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
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from ...database import Base
from ...user_id import prefixed


# ---------------------------------------------------------------------------
# ENUMS
# ---------------------------------------------------------------------------


class CourseLevel(str, enum.Enum):
    LEVEL_101 = "LEVEL_101"
    LEVEL_201 = "LEVEL_201"
    LEVEL_301 = "LEVEL_301"
    LEVEL_401 = "LEVEL_401"

    @property
    def rank(self) -> int:
        return int(self.value.replace("LEVEL_", ""))

    @property
    def label(self) -> str:
        return self.value.replace("LEVEL_", "")


class TrainingStatus(str, enum.Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETE = "COMPLETE"


class InterviewGateStatus(str, enum.Enum):
    REQUIRED = "REQUIRED"
    PASSED = "PASSED"
    FAILED = "FAILED"
    HOLD = "HOLD"
    WAIVED = "WAIVED"


class ApprovalStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ClassOfferingStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Offerings in these states count as "already published" for the first-publish gate.
PUBLISHED_OFFERING_STATUSES = (
    ClassOfferingStatus.PUBLISHED,
    ClassOfferingStatus.IN_PROGRESS,
    ClassOfferingStatus.COMPLETED,
)


# ---------------------------------------------------------------------------
# TRAINING ACADEMY
# ---------------------------------------------------------------------------


class TrainingModule(Base):
    """Global instructor academy catalogue, admin managed."""

    __tablename__ = "training_modules"

    id = Column(String(36), primary_key=True, default=prefixed("TMD"))
    title = Column(String(255), nullable=False)
    required = Column(Boolean, nullable=False, default=False, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)

    assignments = relationship("TrainingAssignment", back_populates="module", cascade="all, delete-orphan")


class TrainingAssignment(Base):
    __tablename__ = "training_assignments"
    __table_args__ = (
        UniqueConstraint("user_id", "module_id", name="uq_training_assignments_user_module"),
    )

    id = Column(String(36), primary_key=True, default=prefixed("TAS"))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    module_id = Column(
        String(36),
        ForeignKey("training_modules.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status = Column(
        Enum(TrainingStatus, name="training_status_enum", native_enum=False),
        nullable=False,
        default=TrainingStatus.NOT_STARTED,
    )
    completed_at = Column(DateTime(timezone=True), nullable=True)

    module = relationship("TrainingModule", back_populates="assignments")


class InstructorInterviewGate(Base):
    """At most one readiness interview gate per instructor."""

    __tablename__ = "instructor_interview_gates"

    id = Column(String(36), primary_key=True, default=prefixed("IVG"))
    instructor_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    status = Column(
        Enum(InterviewGateStatus, name="interview_gate_status_enum", native_enum=False),
        nullable=False,
        default=InterviewGateStatus.REQUIRED,
    )
    outcome = Column(String(32), nullable=True)
    reviewed_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)


# ---------------------------------------------------------------------------
# TEACHING GRANTS
# ---------------------------------------------------------------------------


class InstructorTeachingPermission(Base):
    """Explicit, per-level teaching grant."""

    __tablename__ = "instructor_teaching_permissions"
    __table_args__ = (
        UniqueConstraint("instructor_id", "level", name="uq_teaching_permissions_instructor_level"),
    )

    id = Column(String(36), primary_key=True, default=prefixed("ITP"))
    instructor_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    level = Column(Enum(CourseLevel, name="course_level_enum", native_enum=False), nullable=False)
    granted_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reason = Column(Text, nullable=True)
    granted_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)


class InstructorApproval(Base):
    """
    Legacy approval record. Superseded by InstructorTeachingPermission but
    still honoured as a fallback grant source.
    """

    __tablename__ = "instructor_approvals"

    id = Column(String(36), primary_key=True, default=prefixed("IAP"))
    instructor_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        Enum(ApprovalStatus, name="approval_status_enum", native_enum=False),
        nullable=False,
        default=ApprovalStatus.PENDING,
    )
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)

    levels = relationship(
        "InstructorApprovalLevel",
        back_populates="approval",
        cascade="all, delete-orphan",
    )


class InstructorApprovalLevel(Base):
    __tablename__ = "instructor_approval_levels"

    id = Column(String(36), primary_key=True, default=prefixed("IAL"))
    approval_id = Column(
        String(36),
        ForeignKey("instructor_approvals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    level = Column(Enum(CourseLevel, name="course_level_enum", native_enum=False), nullable=False)

    approval = relationship("InstructorApproval", back_populates="levels")


# ---------------------------------------------------------------------------
# CLASSES
# ---------------------------------------------------------------------------


class ClassTemplate(Base):
    __tablename__ = "class_templates"

    id = Column(String(36), primary_key=True, default=prefixed("CTP"))
    title = Column(String(255), nullable=False)
    difficulty_level = Column(
        Enum(CourseLevel, name="course_level_enum", native_enum=False),
        nullable=False,
        default=CourseLevel.LEVEL_101,
    )


class ClassOffering(Base):
    __tablename__ = "class_offerings"
    __table_args__ = (
        Index("ix_class_offerings_instructor_status", "instructor_id", "status"),
    )

    id = Column(String(36), primary_key=True, default=prefixed("COF"))
    template_id = Column(String(36), ForeignKey("class_templates.id", ondelete="CASCADE"), nullable=False)
    instructor_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    status = Column(
        Enum(ClassOfferingStatus, name="class_offering_status_enum", native_enum=False),
        nullable=False,
        default=ClassOfferingStatus.DRAFT,
    )
    # Legacy offerings published before the readiness gate existed.
    grandfathered_training_exemption = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)

    template = relationship("ClassTemplate")
