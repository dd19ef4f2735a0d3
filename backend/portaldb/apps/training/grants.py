"""
Teaching-level grant sources.

An instructor may teach a level when ANY source grants it. Sources are
consulted in `GRANT_SOURCES` order: explicit permissions first, the legacy
approval tables as fallback. Retiring the legacy tables means dropping
`LegacyApprovalSource` from that tuple.
"""

from __future__ import annotations

from typing import List, Protocol, Tuple

from sqlalchemy.orm import Session

from . import models


class TeachingGrantSource(Protocol):
    name: str

    def has_level(self, db: Session, instructor_id: str, level: models.CourseLevel) -> bool:
        ...

    def levels(self, db: Session, instructor_id: str) -> List[models.CourseLevel]:
        ...


def _dedupe(levels) -> List[models.CourseLevel]:
    seen: List[models.CourseLevel] = []
    for level in levels:
        if level not in seen:
            seen.append(level)
    return seen


class ExplicitPermissionSource:
    name = "teaching_permission"

    def has_level(self, db: Session, instructor_id: str, level: models.CourseLevel) -> bool:
        permission = (
            db.query(models.InstructorTeachingPermission.id)
            .filter(
                models.InstructorTeachingPermission.instructor_id == instructor_id,
                models.InstructorTeachingPermission.level == level,
            )
            .first()
        )
        return permission is not None

    def levels(self, db: Session, instructor_id: str) -> List[models.CourseLevel]:
        rows = (
            db.query(models.InstructorTeachingPermission.level)
            .filter(models.InstructorTeachingPermission.instructor_id == instructor_id)
            .all()
        )
        return _dedupe(row[0] for row in rows)


class LegacyApprovalSource:
    name = "legacy_approval"

    def has_level(self, db: Session, instructor_id: str, level: models.CourseLevel) -> bool:
        approval_level = (
            db.query(models.InstructorApprovalLevel.id)
            .join(models.InstructorApproval)
            .filter(
                models.InstructorApproval.instructor_id == instructor_id,
                models.InstructorApprovalLevel.level == level,
            )
            .first()
        )
        return approval_level is not None

    def levels(self, db: Session, instructor_id: str) -> List[models.CourseLevel]:
        rows = (
            db.query(models.InstructorApprovalLevel.level)
            .join(models.InstructorApproval)
            .filter(models.InstructorApproval.instructor_id == instructor_id)
            .all()
        )
        return _dedupe(row[0] for row in rows)


EXPLICIT_PERMISSIONS = ExplicitPermissionSource()
LEGACY_APPROVALS = LegacyApprovalSource()

GRANT_SOURCES: Tuple[TeachingGrantSource, ...] = (EXPLICIT_PERMISSIONS, LEGACY_APPROVALS)


def has_grant(
    db: Session,
    instructor_id: str,
    level: models.CourseLevel,
    sources: Tuple[TeachingGrantSource, ...] = GRANT_SOURCES,
) -> bool:
    return any(source.has_level(db, instructor_id, level) for source in sources)
