from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from portaldb.apps.accounts import models as account_models
from portaldb.security import get_current_active_user

from .resolve import resolve_nav_model
from .schemas import NavInput, NavViewModel

router = APIRouter(prefix="/navigation", tags=["navigation"])


@router.get("", response_model=NavViewModel)
def navigation_for_me(
    pathname: str = Query("/"),
    max_core_items: Optional[int] = Query(None),
    current_user: account_models.User = Depends(get_current_active_user),
):
    return resolve_nav_model(
        NavInput(
            pathname=pathname,
            roles=current_user.role_values,
            primary_role=current_user.primary_role.value if current_user.primary_role else None,
            award_tier=current_user.award_tier.value if current_user.award_tier else None,
            max_core_items=max_core_items,
        )
    )
