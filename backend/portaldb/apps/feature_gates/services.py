"""
Feature gate resolution and admin mutations.

Resolution order for a known feature key:

    USER rule for the user
    -> CHAPTER rule for the user's chapter
    -> ROLE rule matching any of the user's roles
    -> GLOBAL rule
    -> enabled

Only rules whose [starts_at, ends_at] window contains "now" are considered,
and within a scope the most recently updated rule wins. Unknown feature keys
and an unmigrated rule table both resolve to enabled, so a missing
configuration never hides a feature.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Set

from sqlalchemy import and_, or_
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import Session

from portaldb.apps.accounts import models as account_models
from portaldb.apps.accounts.authorization import normalize_role_set, require_any_role
from portaldb.apps.events.revalidation import revalidate_paths
from portaldb.errors import InvalidRequest, NotFound, SetupRequired

from . import models

logger = logging.getLogger(__name__)

ADMIN_ROLES = (account_models.PlatformRole.ADMIN,)

FEATURE_GATE_SURFACES = (
    "/activities",
    "/challenges",
    "/incubator",
    "/world",
    "/admin/rollout-comms",
)

MAX_LISTED_RULES = 300

_SETUP_MESSAGE = (
    "Feature gates are not enabled in this database yet. "
    "Run `alembic upgrade head` and try again."
)


@dataclass
class FeatureUserContext:
    """
    Who is asking. When chapter / roles / primary role are supplied they are
    trusted as-is; otherwise they are looked up from `user_id`.
    """

    user_id: Optional[str] = None
    chapter_id: Optional[str] = None
    roles: List[str] = field(default_factory=list)
    primary_role: Optional[str] = None

    @property
    def has_resolved_fields(self) -> bool:
        return bool(self.chapter_id is not None or self.roles or self.primary_role)


@dataclass
class _ResolvedContext:
    user_id: Optional[str]
    chapter_id: Optional[str]
    roles: Set[account_models.PlatformRole]


def parse_feature_key(value) -> Optional[models.FeatureKey]:
    if isinstance(value, models.FeatureKey):
        return value
    try:
        return models.FeatureKey(str(value or "").strip())
    except ValueError:
        return None


def is_missing_feature_gate_table_error(exc: BaseException) -> bool:
    if not isinstance(exc, (ProgrammingError, OperationalError)):
        return False
    message = str(getattr(exc, "orig", exc)).lower()
    if models.FeatureGateRule.__tablename__ not in message:
        return False
    # postgres: relation "feature_gate_rules" does not exist / sqlite: no such table
    return "no such table" in message or ("relation" in message and "does not exist" in message)


def _active_window(now: datetime):
    return and_(
        or_(models.FeatureGateRule.starts_at.is_(None), models.FeatureGateRule.starts_at <= now),
        or_(models.FeatureGateRule.ends_at.is_(None), models.FeatureGateRule.ends_at >= now),
    )


def _newest_first():
    return (models.FeatureGateRule.updated_at.desc(), models.FeatureGateRule.created_at.desc())


def _resolve_context(db: Session, context: FeatureUserContext) -> _ResolvedContext:
    if not context.user_id or context.has_resolved_fields:
        return _ResolvedContext(
            user_id=context.user_id,
            chapter_id=context.chapter_id,
            roles=normalize_role_set(context.roles, context.primary_role),
        )

    user = db.query(account_models.User).filter(account_models.User.id == context.user_id).first()
    if user is None:
        return _ResolvedContext(user_id=context.user_id, chapter_id=None, roles=set())
    return _ResolvedContext(
        user_id=context.user_id,
        chapter_id=user.chapter_id,
        roles=normalize_role_set(user.roles, user.primary_role),
    )


def _scope_criteria(scope: models.FeatureGateScope, context: _ResolvedContext) -> Optional[list]:
    """Filter clauses targeting `context` within `scope`, or None to skip the scope."""
    if scope is models.FeatureGateScope.USER:
        if not context.user_id:
            return None
        return [models.FeatureGateRule.user_id == context.user_id]
    if scope is models.FeatureGateScope.CHAPTER:
        if not context.chapter_id:
            return None
        return [models.FeatureGateRule.chapter_id == context.chapter_id]
    if scope is models.FeatureGateScope.ROLE:
        if not context.roles:
            return None
        return [models.FeatureGateRule.role.in_(sorted(context.roles, key=lambda role: role.value))]
    if scope is models.FeatureGateScope.GLOBAL:
        return []
    raise AssertionError(f"Unhandled feature gate scope: {scope!r}")


def _winning_rule(
    db: Session,
    feature_key: models.FeatureKey,
    context: _ResolvedContext,
    now: datetime,
) -> Optional[models.FeatureGateRule]:
    for scope in models.FeatureGateScope:
        criteria = _scope_criteria(scope, context)
        if criteria is None:
            continue
        rule = (
            db.query(models.FeatureGateRule)
            .filter(
                _active_window(now),
                models.FeatureGateRule.feature_key == feature_key,
                models.FeatureGateRule.scope == scope,
                *criteria,
            )
            .order_by(*_newest_first())
            .first()
        )
        if rule is not None:
            return rule
    return None


def is_feature_enabled_for_user(
    db: Session,
    feature_key: str,
    context: FeatureUserContext,
    *,
    now: Optional[datetime] = None,
) -> bool:
    key = parse_feature_key(feature_key)
    if key is None:
        return True

    now = now or datetime.utcnow()
    try:
        resolved = _resolve_context(db, context)
        rule = _winning_rule(db, key, resolved, now)
    except (ProgrammingError, OperationalError) as exc:
        if not is_missing_feature_gate_table_error(exc):
            raise
        db.rollback()
        logger.warning(
            "Feature gate table missing; treating feature as enabled",
            extra={"feature_key": key.value, "user_id": context.user_id},
        )
        return True

    if rule is None:
        return True
    return bool(rule.enabled)


# ---------------------------------------------------------------------------
# ADMIN
# ---------------------------------------------------------------------------


def list_feature_gate_rules(
    db: Session,
    *,
    actor: account_models.User,
    feature_key: Optional[str] = None,
) -> List[models.FeatureGateRule]:
    require_any_role(actor, ADMIN_ROLES)

    key = parse_feature_key(feature_key) if feature_key else None
    try:
        query = db.query(models.FeatureGateRule)
        if key is not None:
            query = query.filter(models.FeatureGateRule.feature_key == key)
        return (
            query.order_by(
                models.FeatureGateRule.feature_key.asc(),
                models.FeatureGateRule.scope.asc(),
                models.FeatureGateRule.updated_at.desc(),
            )
            .limit(MAX_LISTED_RULES)
            .all()
        )
    except (ProgrammingError, OperationalError) as exc:
        if not is_missing_feature_gate_table_error(exc):
            raise
        db.rollback()
        logger.warning("Feature gate table missing; listing no rules")
        return []


def _require_feature_key(value) -> models.FeatureKey:
    key = parse_feature_key(value)
    if key is None:
        raise InvalidRequest("Invalid feature key.")
    return key


def _clean_note(note: Optional[str]) -> Optional[str]:
    return (note or "").strip() or None


def _upsert_scoped_rule(
    db: Session,
    *,
    actor: account_models.User,
    feature_key: models.FeatureKey,
    scope: models.FeatureGateScope,
    enabled: bool,
    note: Optional[str],
    targets: dict,
) -> models.FeatureGateRule:
    """Update the newest rule for this exact scope + target, or create one."""
    criteria: Iterable = [getattr(models.FeatureGateRule, column) == value for column, value in targets.items()]
    try:
        existing = (
            db.query(models.FeatureGateRule)
            .filter(
                models.FeatureGateRule.feature_key == feature_key,
                models.FeatureGateRule.scope == scope,
                *criteria,
            )
            .order_by(*_newest_first())
            .first()
        )
        if existing is not None:
            rule = existing
        else:
            rule = models.FeatureGateRule(
                feature_key=feature_key,
                scope=scope,
                created_by_id=actor.id,
                **targets,
            )
            db.add(rule)
        rule.enabled = enabled
        rule.note = note
        rule.updated_by_id = actor.id
        rule.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(rule)
    except (ProgrammingError, OperationalError) as exc:
        db.rollback()
        if is_missing_feature_gate_table_error(exc):
            raise SetupRequired(_SETUP_MESSAGE) from exc
        raise

    logger.info(
        "Feature gate rule saved",
        extra={
            "rule_id": rule.id,
            "feature_key": feature_key.value,
            "scope": scope.value,
            "enabled": enabled,
            "actor_user_id": actor.id,
        },
    )
    revalidate_paths(FEATURE_GATE_SURFACES, actor_user_id=actor.id, reason="feature_gate")
    return rule


def set_chapter_feature_gate_rule(
    db: Session,
    *,
    actor: account_models.User,
    feature_key: str,
    chapter_id: str,
    enabled: bool = True,
    note: Optional[str] = None,
) -> models.FeatureGateRule:
    require_any_role(actor, ADMIN_ROLES)
    key = _require_feature_key(feature_key)
    chapter_id = (chapter_id or "").strip()
    if not chapter_id:
        raise InvalidRequest("Chapter is required.")

    return _upsert_scoped_rule(
        db,
        actor=actor,
        feature_key=key,
        scope=models.FeatureGateScope.CHAPTER,
        enabled=enabled,
        note=_clean_note(note),
        targets={"chapter_id": chapter_id},
    )


def set_global_feature_gate_rule(
    db: Session,
    *,
    actor: account_models.User,
    feature_key: str,
    enabled: bool = True,
    note: Optional[str] = None,
) -> models.FeatureGateRule:
    require_any_role(actor, ADMIN_ROLES)
    key = _require_feature_key(feature_key)

    return _upsert_scoped_rule(
        db,
        actor=actor,
        feature_key=key,
        scope=models.FeatureGateScope.GLOBAL,
        enabled=enabled,
        note=_clean_note(note),
        targets={},
    )


def delete_feature_gate_rule(
    db: Session,
    *,
    actor: account_models.User,
    rule_id: str,
) -> None:
    require_any_role(actor, ADMIN_ROLES)
    rule_id = (rule_id or "").strip()
    if not rule_id:
        raise InvalidRequest("Missing rule id.")

    try:
        rule = db.query(models.FeatureGateRule).filter(models.FeatureGateRule.id == rule_id).first()
        if rule is None:
            raise NotFound("Feature gate rule not found.")
        db.delete(rule)
        db.commit()
    except (ProgrammingError, OperationalError) as exc:
        db.rollback()
        if is_missing_feature_gate_table_error(exc):
            raise SetupRequired(_SETUP_MESSAGE) from exc
        raise

    logger.info(
        "Feature gate rule deleted",
        extra={"rule_id": rule_id, "actor_user_id": actor.id},
    )
    revalidate_paths(FEATURE_GATE_SURFACES, actor_user_id=actor.id, reason="feature_gate")
