from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from portaldb.apps.accounts.models import PlatformRole

from .models import FeatureGateScope, FeatureKey


class FeatureGateRuleRead(BaseModel):
    id: str
    feature_key: FeatureKey
    scope: FeatureGateScope
    user_id: Optional[str] = None
    chapter_id: Optional[str] = None
    role: Optional[PlatformRole] = None
    enabled: bool
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    note: Optional[str] = None
    created_by_id: Optional[str] = None
    updated_by_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ChapterRuleUpsert(BaseModel):
    feature_key: str
    chapter_id: str
    enabled: bool = True
    note: Optional[str] = None


class GlobalRuleUpsert(BaseModel):
    feature_key: str
    enabled: bool = True
    note: Optional[str] = None


class FeatureEnabledRead(BaseModel):
    feature_key: str
    enabled: bool
