from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from portaldb.apps.accounts import models as account_models
from portaldb.apps.events.broker import broker
from portaldb.apps.events.revalidation import REVALIDATE_EVENT_TYPE
from portaldb.apps.feature_gates import models as gate_models
from portaldb.apps.feature_gates import services
from portaldb.apps.feature_gates.services import FeatureUserContext
from portaldb.errors import Forbidden, InvalidRequest, NotFound, SetupRequired

Role = account_models.PlatformRole
Scope = gate_models.FeatureGateScope
Key = gate_models.FeatureKey

NOW = datetime(2026, 3, 1, 12, 0, 0)


def _create_chapter(db, name: str = "North") -> account_models.Chapter:
    chapter = account_models.Chapter(name=name)
    db.add(chapter)
    db.commit()
    db.refresh(chapter)
    return chapter


def _create_user(db, email: str, role=Role.STUDENT, chapter_id=None, extra_roles=()) -> account_models.User:
    user = account_models.User(
        email=email,
        name=email.split("@")[0],
        primary_role=role,
        chapter_id=chapter_id,
        is_active=True,
    )
    for value in (role, *extra_roles):
        user.roles.append(account_models.UserRole(role=value))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _rule(db, scope, enabled, *, key=Key.PASSION_WORLD, updated_at=None, **fields) -> gate_models.FeatureGateRule:
    stamp = updated_at or NOW - timedelta(days=1)
    rule = gate_models.FeatureGateRule(
        feature_key=key,
        scope=scope,
        enabled=enabled,
        created_at=stamp,
        updated_at=stamp,
        **fields,
    )
    db.add(rule)
    db.commit()
    db.refresh(rule)
    return rule


def _enabled(db, user, key=Key.PASSION_WORLD.value) -> bool:
    return services.is_feature_enabled_for_user(db, key, FeatureUserContext(user_id=user.id), now=NOW)


# ---------------------------------------------------------------------------
# RESOLUTION
# ---------------------------------------------------------------------------


def test_no_rules_means_enabled(db_session):
    assert services.is_feature_enabled_for_user(db_session, "PASSION_WORLD", FeatureUserContext(user_id="u1")) is True


def test_unknown_feature_key_is_always_enabled(db_session):
    _rule(db_session, Scope.GLOBAL, False)

    assert services.is_feature_enabled_for_user(db_session, "NOT_A_FEATURE", FeatureUserContext(user_id="u1")) is True


def test_global_rule_applies_to_everyone(db_session):
    user = _create_user(db_session, "student@example.com")
    _rule(db_session, Scope.GLOBAL, False)

    assert _enabled(db_session, user) is False


def test_user_rule_overrides_global_in_both_directions(db_session):
    blocked = _create_user(db_session, "blocked@example.com")
    allowed = _create_user(db_session, "allowed@example.com")

    _rule(db_session, Scope.GLOBAL, True)
    _rule(db_session, Scope.USER, False, user_id=blocked.id)
    assert _enabled(db_session, blocked) is False
    assert _enabled(db_session, allowed) is True

    _rule(db_session, Scope.GLOBAL, False, key=Key.CHALLENGES)
    _rule(db_session, Scope.USER, True, key=Key.CHALLENGES, user_id=allowed.id)
    assert _enabled(db_session, allowed, Key.CHALLENGES.value) is True
    assert _enabled(db_session, blocked, Key.CHALLENGES.value) is False


def test_chapter_rule_beats_role_rule(db_session):
    chapter = _create_chapter(db_session)
    mentor = _create_user(db_session, "mentor@example.com", Role.MENTOR, chapter_id=chapter.id)
    _rule(db_session, Scope.ROLE, False, role=Role.MENTOR)
    _rule(db_session, Scope.CHAPTER, True, chapter_id=chapter.id)

    assert _enabled(db_session, mentor) is True


def test_role_rule_matches_any_held_role(db_session):
    user = _create_user(db_session, "multi@example.com", Role.STUDENT, extra_roles=(Role.MENTOR,))
    other = _create_user(db_session, "plain@example.com", Role.STUDENT)
    _rule(db_session, Scope.ROLE, False, role=Role.MENTOR)

    assert _enabled(db_session, user) is False
    assert _enabled(db_session, other) is True


def test_supplied_context_skips_user_lookup(db_session):
    _rule(db_session, Scope.ROLE, False, role=Role.INSTRUCTOR)
    context = FeatureUserContext(user_id="USR-unknown", roles=["instructor", "not-a-role"])

    assert services.is_feature_enabled_for_user(db_session, "PASSION_WORLD", context, now=NOW) is False


def test_expired_rule_is_ignored_even_when_newest(db_session):
    user = _create_user(db_session, "student@example.com")
    _rule(db_session, Scope.GLOBAL, True, updated_at=NOW - timedelta(days=10))
    _rule(
        db_session,
        Scope.GLOBAL,
        False,
        updated_at=NOW - timedelta(hours=1),
        ends_at=NOW - timedelta(minutes=5),
    )

    assert _enabled(db_session, user) is True


def test_rule_not_yet_started_is_ignored(db_session):
    user = _create_user(db_session, "student@example.com")
    _rule(db_session, Scope.USER, False, user_id=user.id, starts_at=NOW + timedelta(days=1))

    assert _enabled(db_session, user) is True


def test_rule_inside_window_applies(db_session):
    user = _create_user(db_session, "student@example.com")
    _rule(
        db_session,
        Scope.USER,
        False,
        user_id=user.id,
        starts_at=NOW - timedelta(days=1),
        ends_at=NOW + timedelta(days=1),
    )

    assert _enabled(db_session, user) is False


def test_newest_rule_wins_within_scope(db_session):
    user = _create_user(db_session, "student@example.com")
    _rule(db_session, Scope.GLOBAL, True, updated_at=NOW - timedelta(days=2))
    _rule(db_session, Scope.GLOBAL, False, updated_at=NOW - timedelta(days=1))

    assert _enabled(db_session, user) is False


def test_missing_table_on_read_fails_open(db_session_without_gate_rules):
    user = _create_user(db_session_without_gate_rules, "student@example.com")

    assert _enabled(db_session_without_gate_rules, user) is True


# ---------------------------------------------------------------------------
# ADMIN MUTATIONS
# ---------------------------------------------------------------------------


def _admin(db):
    return _create_user(db, "admin@example.com", Role.ADMIN)


def test_non_admin_cannot_mutate(db_session):
    lead = _create_user(db_session, "lead@example.com", Role.CHAPTER_LEAD)

    with pytest.raises(Forbidden):
        services.set_global_feature_gate_rule(db_session, actor=lead, feature_key="CHALLENGES", enabled=False)
    with pytest.raises(Forbidden):
        services.set_chapter_feature_gate_rule(
            db_session, actor=lead, feature_key="CHALLENGES", chapter_id="CHP-1", enabled=False
        )
    with pytest.raises(Forbidden):
        services.delete_feature_gate_rule(db_session, actor=lead, rule_id="FGR-1")

    assert db_session.query(gate_models.FeatureGateRule).count() == 0


def test_inactive_admin_is_rejected(db_session):
    admin = _admin(db_session)
    admin.is_active = False
    db_session.commit()

    with pytest.raises(Forbidden):
        services.set_global_feature_gate_rule(db_session, actor=admin, feature_key="CHALLENGES")


def test_global_rule_upserts_in_place(db_session):
    admin = _admin(db_session)

    first = services.set_global_feature_gate_rule(db_session, actor=admin, feature_key="CHALLENGES", enabled=False)
    second = services.set_global_feature_gate_rule(
        db_session, actor=admin, feature_key="CHALLENGES", enabled=True, note="  back on  "
    )

    assert first.id == second.id
    assert second.enabled is True
    assert second.note == "back on"
    assert second.updated_by_id == admin.id
    assert db_session.query(gate_models.FeatureGateRule).count() == 1


def test_chapter_rules_are_kept_per_chapter(db_session):
    admin = _admin(db_session)
    north = _create_chapter(db_session, "North")
    south = _create_chapter(db_session, "South")

    services.set_chapter_feature_gate_rule(db_session, actor=admin, feature_key="INCUBATOR", chapter_id=north.id)
    services.set_chapter_feature_gate_rule(db_session, actor=admin, feature_key="INCUBATOR", chapter_id=south.id)
    services.set_chapter_feature_gate_rule(
        db_session, actor=admin, feature_key="INCUBATOR", chapter_id=north.id, enabled=False
    )

    rules = db_session.query(gate_models.FeatureGateRule).all()
    assert len(rules) == 2
    by_chapter = {rule.chapter_id: rule.enabled for rule in rules}
    assert by_chapter == {north.id: False, south.id: True}


def test_mutation_input_validation(db_session):
    admin = _admin(db_session)

    with pytest.raises(InvalidRequest, match="Invalid feature key."):
        services.set_global_feature_gate_rule(db_session, actor=admin, feature_key="NOPE")
    with pytest.raises(InvalidRequest, match="Chapter is required."):
        services.set_chapter_feature_gate_rule(db_session, actor=admin, feature_key="CHALLENGES", chapter_id="  ")
    with pytest.raises(InvalidRequest, match="Missing rule id."):
        services.delete_feature_gate_rule(db_session, actor=admin, rule_id="")


def test_delete_rule(db_session):
    admin = _admin(db_session)
    rule = services.set_global_feature_gate_rule(db_session, actor=admin, feature_key="ACTIVITY_HUB", enabled=False)

    services.delete_feature_gate_rule(db_session, actor=admin, rule_id=rule.id)

    assert db_session.query(gate_models.FeatureGateRule).count() == 0
    with pytest.raises(NotFound):
        services.delete_feature_gate_rule(db_session, actor=admin, rule_id=rule.id)


def test_mutations_request_revalidation(db_session):
    admin = _admin(db_session)
    q = broker.subscribe()
    try:
        rule = services.set_global_feature_gate_rule(db_session, actor=admin, feature_key="PASSION_WORLD")
        services.delete_feature_gate_rule(db_session, actor=admin, rule_id=rule.id)
        events = []
        while not q.empty():
            event = q.get_nowait()
            if event.type == REVALIDATE_EVENT_TYPE:
                events.append(event)
    finally:
        broker.unsubscribe(q)

    assert len(events) == 2
    assert all(event.payload["paths"] == list(services.FEATURE_GATE_SURFACES) for event in events)


def test_revalidation_failure_does_not_undo_write(db_session, monkeypatch):
    admin = _admin(db_session)

    def _boom(_event):
        raise RuntimeError("broker down")

    monkeypatch.setattr("portaldb.apps.events.revalidation.publish_event", _boom)

    rule = services.set_global_feature_gate_rule(db_session, actor=admin, feature_key="PASSION_WORLD", enabled=False)

    assert db_session.query(gate_models.FeatureGateRule).filter_by(id=rule.id).count() == 1


def test_list_rules_filters_by_key(db_session):
    admin = _admin(db_session)
    services.set_global_feature_gate_rule(db_session, actor=admin, feature_key="PASSION_WORLD")
    services.set_global_feature_gate_rule(db_session, actor=admin, feature_key="CHALLENGES")

    assert len(services.list_feature_gate_rules(db_session, actor=admin)) == 2
    rules = services.list_feature_gate_rules(db_session, actor=admin, feature_key="CHALLENGES")
    assert [rule.feature_key for rule in rules] == [Key.CHALLENGES]


def test_missing_table_on_write_requires_setup(db_session_without_gate_rules):
    admin = _admin(db_session_without_gate_rules)

    with pytest.raises(SetupRequired, match="alembic upgrade head"):
        services.set_global_feature_gate_rule(db_session_without_gate_rules, actor=admin, feature_key="CHALLENGES")
    with pytest.raises(SetupRequired):
        services.delete_feature_gate_rule(db_session_without_gate_rules, actor=admin, rule_id="FGR-1")

    assert services.list_feature_gate_rules(db_session_without_gate_rules, actor=admin) == []
