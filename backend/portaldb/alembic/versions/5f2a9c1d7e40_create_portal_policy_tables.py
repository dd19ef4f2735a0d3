"""create portal policy tables

Revision ID: 5f2a9c1d7e40
Revises:
Create Date: 2026-10-19 09:12:44.018233

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5f2a9c1d7e40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLES = ("ADMIN", "CHAPTER_LEAD", "INSTRUCTOR", "MENTOR", "STAFF", "PARENT", "STUDENT")
LEVELS = ("LEVEL_101", "LEVEL_201", "LEVEL_301", "LEVEL_401")


def _enum(name: str, *values: str) -> sa.Enum:
    return sa.Enum(*values, name=name, native_enum=False)


def upgrade() -> None:
    op.create_table(
        "chapters",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("chapter_id", sa.String(length=36), nullable=True),
        sa.Column("primary_role", _enum("platform_role_enum", *ROLES), nullable=False),
        sa.Column("award_tier", _enum("award_tier_enum", "BRONZE", "SILVER", "GOLD"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["chapter_id"], ["chapters.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_chapter_id"), "users", ["chapter_id"], unique=False)

    op.create_table(
        "user_roles",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("role", _enum("platform_role_enum", *ROLES), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )
    op.create_index(op.f("ix_user_roles_user_id"), "user_roles", ["user_id"], unique=False)

    op.create_table(
        "training_modules",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("required", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_training_modules_required"), "training_modules", ["required"], unique=False)

    op.create_table(
        "training_assignments",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("module_id", sa.String(length=36), nullable=False),
        sa.Column(
            "status",
            _enum("training_status_enum", "NOT_STARTED", "IN_PROGRESS", "COMPLETE"),
            nullable=False,
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["module_id"], ["training_modules.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "module_id", name="uq_training_assignments_user_module"),
    )
    op.create_index(op.f("ix_training_assignments_user_id"), "training_assignments", ["user_id"], unique=False)
    op.create_index(op.f("ix_training_assignments_module_id"), "training_assignments", ["module_id"], unique=False)

    op.create_table(
        "instructor_interview_gates",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("instructor_id", sa.String(length=36), nullable=False),
        sa.Column(
            "status",
            _enum("interview_gate_status_enum", "REQUIRED", "PASSED", "FAILED", "HOLD", "WAIVED"),
            nullable=False,
        ),
        sa.Column("outcome", sa.String(length=32), nullable=True),
        sa.Column("reviewed_by_id", sa.String(length=36), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["instructor_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reviewed_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("instructor_id"),
    )

    op.create_table(
        "instructor_teaching_permissions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("instructor_id", sa.String(length=36), nullable=False),
        sa.Column("level", _enum("course_level_enum", *LEVELS), nullable=False),
        sa.Column("granted_by_id", sa.String(length=36), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("granted_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["granted_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["instructor_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("instructor_id", "level", name="uq_teaching_permissions_instructor_level"),
    )
    op.create_index(
        op.f("ix_instructor_teaching_permissions_instructor_id"),
        "instructor_teaching_permissions",
        ["instructor_id"],
        unique=False,
    )

    op.create_table(
        "instructor_approvals",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("instructor_id", sa.String(length=36), nullable=False),
        sa.Column("status", _enum("approval_status_enum", "PENDING", "APPROVED", "REJECTED"), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["instructor_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_instructor_approvals_instructor_id"), "instructor_approvals", ["instructor_id"], unique=False)

    op.create_table(
        "instructor_approval_levels",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("approval_id", sa.String(length=36), nullable=False),
        sa.Column("level", _enum("course_level_enum", *LEVELS), nullable=False),
        sa.ForeignKeyConstraint(["approval_id"], ["instructor_approvals.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_instructor_approval_levels_approval_id"),
        "instructor_approval_levels",
        ["approval_id"],
        unique=False,
    )

    op.create_table(
        "class_templates",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("difficulty_level", _enum("course_level_enum", *LEVELS), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "class_offerings",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("template_id", sa.String(length=36), nullable=False),
        sa.Column("instructor_id", sa.String(length=36), nullable=False),
        sa.Column(
            "status",
            _enum("class_offering_status_enum", "DRAFT", "PUBLISHED", "IN_PROGRESS", "COMPLETED", "CANCELLED"),
            nullable=False,
        ),
        sa.Column("grandfathered_training_exemption", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["instructor_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["template_id"], ["class_templates.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_class_offerings_instructor_status",
        "class_offerings",
        ["instructor_id", "status"],
        unique=False,
    )

    op.create_table(
        "feature_gate_rules",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column(
            "feature_key",
            _enum("feature_key_enum", "ACTIVITY_HUB", "CHALLENGES", "INCUBATOR", "PASSION_WORLD"),
            nullable=False,
        ),
        sa.Column("scope", _enum("feature_gate_scope_enum", "USER", "CHAPTER", "ROLE", "GLOBAL"), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column("chapter_id", sa.String(length=36), nullable=True),
        sa.Column("role", _enum("platform_role_enum", *ROLES), nullable=True),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_by_id", sa.String(length=36), nullable=True),
        sa.Column("updated_by_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["chapter_id"], ["chapters.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["updated_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_feature_gate_rules_key_scope", "feature_gate_rules", ["feature_key", "scope"], unique=False)
    op.create_index("ix_feature_gate_rules_key_user", "feature_gate_rules", ["feature_key", "user_id"], unique=False)
    op.create_index("ix_feature_gate_rules_key_chapter", "feature_gate_rules", ["feature_key", "chapter_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_feature_gate_rules_key_chapter", table_name="feature_gate_rules")
    op.drop_index("ix_feature_gate_rules_key_user", table_name="feature_gate_rules")
    op.drop_index("ix_feature_gate_rules_key_scope", table_name="feature_gate_rules")
    op.drop_table("feature_gate_rules")
    op.drop_index("ix_class_offerings_instructor_status", table_name="class_offerings")
    op.drop_table("class_offerings")
    op.drop_table("class_templates")
    op.drop_index(op.f("ix_instructor_approval_levels_approval_id"), table_name="instructor_approval_levels")
    op.drop_table("instructor_approval_levels")
    op.drop_index(op.f("ix_instructor_approvals_instructor_id"), table_name="instructor_approvals")
    op.drop_table("instructor_approvals")
    op.drop_index(
        op.f("ix_instructor_teaching_permissions_instructor_id"),
        table_name="instructor_teaching_permissions",
    )
    op.drop_table("instructor_teaching_permissions")
    op.drop_table("instructor_interview_gates")
    op.drop_index(op.f("ix_training_assignments_module_id"), table_name="training_assignments")
    op.drop_index(op.f("ix_training_assignments_user_id"), table_name="training_assignments")
    op.drop_table("training_assignments")
    op.drop_index(op.f("ix_training_modules_required"), table_name="training_modules")
    op.drop_table("training_modules")
    op.drop_index(op.f("ix_user_roles_user_id"), table_name="user_roles")
    op.drop_table("user_roles")
    op.drop_index(op.f("ix_users_chapter_id"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
    op.drop_table("chapters")
