from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from portaldb.apps.accounts import models as account_models
from portaldb.database import get_db
from portaldb.errors import PortalError, to_http_exception
from portaldb.security import get_current_active_user

from . import schemas, services

router = APIRouter(prefix="/feature-gates", tags=["feature_gates"])


@router.get("/rules", response_model=List[schemas.FeatureGateRuleRead])
def list_rules(
    feature_key: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(get_current_active_user),
):
    try:
        return services.list_feature_gate_rules(db, actor=current_user, feature_key=feature_key)
    except PortalError as exc:
        raise to_http_exception(exc) from exc


@router.put("/rules/chapter", response_model=schemas.FeatureGateRuleRead)
def upsert_chapter_rule(
    payload: schemas.ChapterRuleUpsert,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(get_current_active_user),
):
    try:
        return services.set_chapter_feature_gate_rule(
            db,
            actor=current_user,
            feature_key=payload.feature_key,
            chapter_id=payload.chapter_id,
            enabled=payload.enabled,
            note=payload.note,
        )
    except PortalError as exc:
        raise to_http_exception(exc) from exc


@router.put("/rules/global", response_model=schemas.FeatureGateRuleRead)
def upsert_global_rule(
    payload: schemas.GlobalRuleUpsert,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(get_current_active_user),
):
    try:
        return services.set_global_feature_gate_rule(
            db,
            actor=current_user,
            feature_key=payload.feature_key,
            enabled=payload.enabled,
            note=payload.note,
        )
    except PortalError as exc:
        raise to_http_exception(exc) from exc


@router.delete("/rules/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rule(
    rule_id: str,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(get_current_active_user),
):
    try:
        services.delete_feature_gate_rule(db, actor=current_user, rule_id=rule_id)
    except PortalError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{feature_key}/enabled", response_model=schemas.FeatureEnabledRead)
def feature_enabled_for_me(
    feature_key: str,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(get_current_active_user),
):
    context = services.FeatureUserContext(
        user_id=current_user.id,
        chapter_id=current_user.chapter_id,
        roles=current_user.role_values,
        primary_role=current_user.primary_role.value if current_user.primary_role else None,
    )
    return schemas.FeatureEnabledRead(
        feature_key=feature_key,
        enabled=services.is_feature_enabled_for_user(db, feature_key, context),
    )
