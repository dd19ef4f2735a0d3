from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import CourseLevel, InterviewGateStatus


class NextAction(BaseModel):
    title: str
    detail: str
    href: str


class MissingRequirement(BaseModel):
    code: str
    title: str
    detail: str
    href: str


class InstructorReadiness(BaseModel):
    """Derived first-publish readiness. Computed per request, never stored."""

    instructor_id: str
    feature_enabled: bool
    required_modules_count: int
    completed_required_modules: int
    training_complete: bool
    interview_status: InterviewGateStatus
    interview_outcome: Optional[str] = None
    interview_passed: bool
    approved_levels: List[CourseLevel] = Field(default_factory=list)
    teaching_permission_levels: List[CourseLevel] = Field(default_factory=list)
    has_published_offering: bool
    grandfathered_offering_count: int
    can_publish_first_offering: bool
    missing_requirements: List[MissingRequirement] = Field(default_factory=list)
    next_action: NextAction


class PublishCheckRequest(BaseModel):
    template_id: str
    offering_id: Optional[str] = None


class PublishCheckResult(BaseModel):
    allowed: bool
    detail: Optional[str] = None
    code: Optional[str] = None


class TeachingPermissionGrant(BaseModel):
    instructor_id: str
    level: CourseLevel
    reason: Optional[str] = None


class TeachingPermissionRead(BaseModel):
    id: str
    instructor_id: str
    level: CourseLevel
    granted_by_id: Optional[str] = None
    reason: Optional[str] = None
    granted_at: datetime

    model_config = ConfigDict(from_attributes=True)
