from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portaldb.apps.accounts import models as account_models
from portaldb.database import get_db
from portaldb.errors import PortalError, PublishBlocked, to_http_exception
from portaldb.security import get_current_active_user, require_roles

from . import permissions, readiness, schemas

router = APIRouter(prefix="/training", tags=["training"])


@router.get("/readiness/me", response_model=schemas.InstructorReadiness)
def my_readiness(
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(require_roles("INSTRUCTOR", "ADMIN", "CHAPTER_LEAD")),
):
    return readiness.get_instructor_readiness(db, current_user.id)


@router.get("/readiness/{instructor_id}", response_model=schemas.InstructorReadiness)
def instructor_readiness(
    instructor_id: str,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(require_roles("ADMIN", "CHAPTER_LEAD")),
):
    return readiness.get_instructor_readiness(db, instructor_id)


@router.post("/offerings/publish-check", response_model=schemas.PublishCheckResult)
def publish_check(
    payload: schemas.PublishCheckRequest,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(require_roles("INSTRUCTOR", "ADMIN", "CHAPTER_LEAD")),
):
    """
    Dry-run the publish gate for the current instructor.

    A blocked publish is reported in the body; a missing template is a 404.
    """
    try:
        readiness.assert_can_publish_offering(
            db,
            current_user.id,
            payload.template_id,
            payload.offering_id,
        )
    except PublishBlocked as exc:
        return schemas.PublishCheckResult(allowed=False, detail=str(exc), code=exc.code)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return schemas.PublishCheckResult(allowed=True)


@router.post("/teaching-permissions", response_model=schemas.TeachingPermissionRead)
def grant_permission(
    payload: schemas.TeachingPermissionGrant,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(get_current_active_user),
):
    try:
        return permissions.grant_teaching_permission(
            db,
            actor=current_user,
            instructor_id=payload.instructor_id,
            level=payload.level,
            reason=payload.reason,
        )
    except PortalError as exc:
        raise to_http_exception(exc) from exc
