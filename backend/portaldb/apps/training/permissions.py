from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from portaldb.apps.accounts import models as account_models
from portaldb.apps.accounts.authorization import has_any_role, require_any_role
from portaldb.apps.events.revalidation import revalidate_paths
from portaldb.errors import Forbidden, InvalidRequest, NotFound

from . import grants
from . import models

logger = logging.getLogger(__name__)

REVIEWER_ROLES = (account_models.PlatformRole.ADMIN, account_models.PlatformRole.CHAPTER_LEAD)

# Each level requires the one below it, from any grant source.
LEVEL_PREREQUISITE = {
    models.CourseLevel.LEVEL_101: None,
    models.CourseLevel.LEVEL_201: models.CourseLevel.LEVEL_101,
    models.CourseLevel.LEVEL_301: models.CourseLevel.LEVEL_201,
    models.CourseLevel.LEVEL_401: models.CourseLevel.LEVEL_301,
}

PERMISSION_SURFACES = (
    "/admin/instructor-readiness",
    "/chapter-lead/instructor-readiness",
    "/instructor/certifications",
)

_LEGACY_SYNC_NOTE = "Auto-synced from native teaching permission."


def _assert_reviewer_can_manage(
    db: Session,
    reviewer: account_models.User,
    instructor_id: str,
) -> account_models.User:
    instructor = db.query(account_models.User).filter(account_models.User.id == instructor_id).first()
    if instructor is None:
        raise NotFound("Instructor not found")

    if has_any_role(reviewer, [account_models.PlatformRole.ADMIN]):
        return instructor

    if reviewer.chapter_id is None or reviewer.chapter_id != instructor.chapter_id:
        raise Forbidden("Chapter Leads can only review instructors in their own chapter.")
    return instructor


def ensure_sequential_permission(db: Session, instructor_id: str, level: models.CourseLevel) -> None:
    prerequisite = LEVEL_PREREQUISITE[level]
    if prerequisite is None:
        return
    if not grants.has_grant(db, instructor_id, prerequisite):
        raise InvalidRequest(f"Cannot grant {level.label} before {prerequisite.label}.")


def _sync_legacy_approval(db: Session, instructor_id: str, level: models.CourseLevel) -> None:
    # Older pages still read the approval tables.
    approval = (
        db.query(models.InstructorApproval)
        .filter(models.InstructorApproval.instructor_id == instructor_id)
        .order_by(models.InstructorApproval.created_at.asc())
        .first()
    )
    if approval is None:
        approval = models.InstructorApproval(instructor_id=instructor_id)
        db.add(approval)
    approval.status = models.ApprovalStatus.APPROVED
    approval.notes = _LEGACY_SYNC_NOTE
    db.flush()

    existing_level = (
        db.query(models.InstructorApprovalLevel)
        .filter(
            models.InstructorApprovalLevel.approval_id == approval.id,
            models.InstructorApprovalLevel.level == level,
        )
        .first()
    )
    if existing_level is None:
        db.add(models.InstructorApprovalLevel(approval_id=approval.id, level=level))
        db.flush()


def grant_teaching_permission(
    db: Session,
    *,
    actor: account_models.User,
    instructor_id: str,
    level: models.CourseLevel,
    reason: Optional[str] = None,
) -> models.InstructorTeachingPermission:
    """
    Grant (or refresh) an explicit teaching permission.

    Admins may grant anywhere; chapter leads only inside their own chapter.
    Levels must be granted in order: 201 needs 101, and so on.
    """
    require_any_role(actor, REVIEWER_ROLES)
    try:
        level = models.CourseLevel(level)
    except ValueError as exc:
        raise InvalidRequest("Invalid course level") from exc

    _assert_reviewer_can_manage(db, actor, instructor_id)
    ensure_sequential_permission(db, instructor_id, level)

    reason = (reason or "").strip() or None
    permission = (
        db.query(models.InstructorTeachingPermission)
        .filter(
            models.InstructorTeachingPermission.instructor_id == instructor_id,
            models.InstructorTeachingPermission.level == level,
        )
        .first()
    )
    if permission is None:
        permission = models.InstructorTeachingPermission(instructor_id=instructor_id, level=level)
        db.add(permission)
    permission.granted_by_id = actor.id
    permission.reason = reason
    permission.granted_at = datetime.utcnow()
    db.flush()

    _sync_legacy_approval(db, instructor_id, level)
    db.commit()
    db.refresh(permission)

    logger.info(
        "Teaching permission granted",
        extra={"instructor_id": instructor_id, "level": level.value, "granted_by": actor.id},
    )
    revalidate_paths(PERMISSION_SURFACES, actor_user_id=actor.id, reason="teaching_permission")
    return permission
