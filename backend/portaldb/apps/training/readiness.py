"""
Instructor readiness gate.

Decides whether an instructor may publish their FIRST class offering:

- required training modules complete, and
- readiness interview passed or waived (when the interview gate is enforced).

The gate only ever blocks a first publish. Once any offering is published,
in progress or completed it stops applying, and switching the native gate
off (ENABLE_NATIVE_INSTRUCTOR_GATE=false) bypasses it entirely.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session

from portaldb.errors import NotFound, PublishBlocked
from portaldb.settings import GateSettings, resolve_settings

from . import grants
from . import models
from . import schemas

logger = logging.getLogger(__name__)

INSTRUCTOR_TOOLS_HREF = "/instructor/training-progress"
INSTRUCTOR_PUBLISH_HREF = "/instructor/class-settings"

TRAINING_INCOMPLETE = "TRAINING_INCOMPLETE"
INTERVIEW_REQUIRED = "INTERVIEW_REQUIRED"

READINESS_INCOMPLETE = "READINESS_INCOMPLETE"
LEVEL_NOT_APPROVED = "LEVEL_NOT_APPROVED"

ENTRY_LEVEL = models.CourseLevel.LEVEL_101

_INTERVIEW_CLEARED = {models.InterviewGateStatus.PASSED, models.InterviewGateStatus.WAIVED}
_INTERVIEW_FOLLOW_UP = {models.InterviewGateStatus.FAILED, models.InterviewGateStatus.HOLD}


@dataclass
class _ReadinessFacts:
    required_module_ids: List[str]
    assignments: List[models.TrainingAssignment]
    interview_gate: Optional[models.InstructorInterviewGate]
    teaching_permission_levels: List[models.CourseLevel]
    approved_levels: List[models.CourseLevel]
    offerings: List[models.ClassOffering]


def level_rank(level: models.CourseLevel) -> int:
    try:
        return models.CourseLevel(level).rank
    except ValueError:
        return 999


def _load_facts(db: Session, instructor_id: str) -> _ReadinessFacts:
    # Six independent reads; none depends on another's result.
    required_module_ids = [
        row[0]
        for row in db.query(models.TrainingModule.id)
        .filter(models.TrainingModule.required.is_(True))
        .all()
    ]
    assignments = (
        db.query(models.TrainingAssignment)
        .filter(models.TrainingAssignment.user_id == instructor_id)
        .all()
    )
    interview_gate = (
        db.query(models.InstructorInterviewGate)
        .filter(models.InstructorInterviewGate.instructor_id == instructor_id)
        .first()
    )
    teaching_permission_levels = grants.EXPLICIT_PERMISSIONS.levels(db, instructor_id)
    approved_levels = grants.LEGACY_APPROVALS.levels(db, instructor_id)
    offerings = (
        db.query(models.ClassOffering)
        .filter(
            models.ClassOffering.instructor_id == instructor_id,
            models.ClassOffering.status.in_(models.PUBLISHED_OFFERING_STATUSES),
        )
        .all()
    )
    return _ReadinessFacts(
        required_module_ids=required_module_ids,
        assignments=assignments,
        interview_gate=interview_gate,
        teaching_permission_levels=teaching_permission_levels,
        approved_levels=approved_levels,
        offerings=offerings,
    )


def _missing_requirements(
    *,
    training_complete: bool,
    remaining_modules: int,
    interview_required: bool,
    interview_passed: bool,
    interview_status: models.InterviewGateStatus,
) -> List[schemas.MissingRequirement]:
    # Order matters: next_action always surfaces the first entry.
    missing: List[schemas.MissingRequirement] = []
    if not training_complete:
        missing.append(
            schemas.MissingRequirement(
                code=TRAINING_INCOMPLETE,
                title="Complete required training modules",
                detail=f"Finish {remaining_modules} remaining required module(s).",
                href=INSTRUCTOR_TOOLS_HREF,
            )
        )
    if interview_required and not interview_passed:
        if interview_status in _INTERVIEW_FOLLOW_UP:
            detail = "Interview outcome requires follow-up before first class publish."
        else:
            detail = "Schedule and complete your readiness interview."
        missing.append(
            schemas.MissingRequirement(
                code=INTERVIEW_REQUIRED,
                title="Pass readiness interview",
                detail=detail,
                href=INSTRUCTOR_TOOLS_HREF,
            )
        )
    return missing


def get_instructor_readiness(
    db: Session,
    instructor_id: str,
    *,
    settings: Optional[GateSettings] = None,
) -> schemas.InstructorReadiness:
    """
    Compute readiness from current data.

    Unknown instructors are not an error; they simply come back with no
    training, no interview and no offerings.
    """
    settings = resolve_settings(settings)
    feature_enabled = settings.native_instructor_gate_enabled
    interview_required = settings.interview_gate_enforced

    facts = _load_facts(db, instructor_id)

    required_ids = set(facts.required_module_ids)
    completed_required_modules = sum(
        1
        for assignment in facts.assignments
        if assignment.module_id in required_ids
        and assignment.status == models.TrainingStatus.COMPLETE
    )
    required_count = len(required_ids)
    training_complete = required_count == 0 or completed_required_modules >= required_count

    interview_status = (
        facts.interview_gate.status if facts.interview_gate else models.InterviewGateStatus.REQUIRED
    )
    interview_outcome = facts.interview_gate.outcome if facts.interview_gate else None
    interview_passed = not interview_required or interview_status in _INTERVIEW_CLEARED

    has_published_offering = len(facts.offerings) > 0
    grandfathered_offering_count = sum(
        1 for offering in facts.offerings if offering.grandfathered_training_exemption
    )
    is_first_publish = not has_published_offering

    can_publish_first_offering = (
        not feature_enabled or not is_first_publish or (training_complete and interview_passed)
    )

    missing = _missing_requirements(
        training_complete=training_complete,
        remaining_modules=max(required_count - completed_required_modules, 0),
        interview_required=interview_required,
        interview_passed=interview_passed,
        interview_status=interview_status,
    )

    if missing:
        first = missing[0]
        next_action = schemas.NextAction(title=first.title, detail=first.detail, href=first.href)
    else:
        next_action = schemas.NextAction(
            title="Readiness complete for first publish",
            detail="You can publish your first class offering.",
            href=INSTRUCTOR_PUBLISH_HREF,
        )

    return schemas.InstructorReadiness(
        instructor_id=instructor_id,
        feature_enabled=feature_enabled,
        required_modules_count=required_count,
        completed_required_modules=completed_required_modules,
        training_complete=training_complete,
        interview_status=interview_status,
        interview_outcome=interview_outcome,
        interview_passed=interview_passed,
        approved_levels=facts.approved_levels,
        teaching_permission_levels=facts.teaching_permission_levels,
        has_published_offering=has_published_offering,
        grandfathered_offering_count=grandfathered_offering_count,
        can_publish_first_offering=can_publish_first_offering,
        missing_requirements=missing,
        next_action=next_action,
    )


def can_teach_level(db: Session, instructor_id: str, level: models.CourseLevel) -> bool:
    """True when either an explicit permission or a legacy approval covers `level`."""
    return grants.has_grant(db, instructor_id, models.CourseLevel(level))


def can_publish_first_offering(
    db: Session,
    instructor_id: str,
    *,
    settings: Optional[GateSettings] = None,
) -> bool:
    return get_instructor_readiness(db, instructor_id, settings=settings).can_publish_first_offering


def get_next_required_action(
    db: Session,
    instructor_id: str,
    *,
    settings: Optional[GateSettings] = None,
) -> schemas.NextAction:
    return get_instructor_readiness(db, instructor_id, settings=settings).next_action


def assert_can_publish_offering(
    db: Session,
    instructor_id: str,
    template_id: str,
    offering_id: Optional[str] = None,
    *,
    settings: Optional[GateSettings] = None,
) -> None:
    """
    Raise PublishBlocked when the instructor may not publish this offering.

    Read-only. Callers abort the publish on failure. Unlike feature gates
    this never fails open: an unknown template raises NotFound.
    """
    settings = resolve_settings(settings)
    if not settings.native_instructor_gate_enabled:
        return

    template = db.query(models.ClassTemplate).filter(models.ClassTemplate.id == template_id).first()
    if template is None:
        raise NotFound("Class template not found")

    if offering_id:
        offering = db.query(models.ClassOffering).filter(models.ClassOffering.id == offering_id).first()
        if offering is not None and offering.grandfathered_training_exemption:
            return

    readiness = get_instructor_readiness(db, instructor_id, settings=settings)
    if not readiness.can_publish_first_offering:
        logger.info(
            "Offering publish blocked by readiness gate",
            extra={
                "instructor_id": instructor_id,
                "template_id": template_id,
                "missing": [item.code for item in readiness.missing_requirements],
            },
        )
        raise PublishBlocked(
            "Publishing blocked. Complete required training modules and pass interview readiness first.",
            code=READINESS_INCOMPLETE,
        )

    template_level = models.CourseLevel(template.difficulty_level)
    if level_rank(template_level) > ENTRY_LEVEL.rank and not can_teach_level(db, instructor_id, template_level):
        logger.info(
            "Offering publish blocked by teaching level",
            extra={"instructor_id": instructor_id, "level": template_level.value},
        )
        raise PublishBlocked(
            f"Publishing blocked. You are not approved to teach {template_level.label} classes yet.",
            code=LEVEL_NOT_APPROVED,
        )
