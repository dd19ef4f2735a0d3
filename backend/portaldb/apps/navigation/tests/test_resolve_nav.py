from __future__ import annotations

from dataclasses import asdict

import pytest

from portaldb.apps.accounts.models import PlatformRole
from portaldb.apps.navigation.catalog import NAV_CATALOG
from portaldb.apps.navigation.core_map import CORE_NAV_LIMIT, GROUP_ORDER_BY_ROLE
from portaldb.apps.navigation.resolve import CRITICAL_CORE_LINKS, is_nav_href_active, resolve_nav_model
from portaldb.apps.navigation.schemas import NavGroup, NavInput


def _hrefs(links):
    return [link.href for link in links]


@pytest.mark.parametrize("role", [role.value for role in PlatformRole])
def test_core_respects_limit_and_keeps_critical_links(role):
    model = resolve_nav_model(NavInput(pathname="/", roles=[role], primary_role=role))

    assert len(model.core) <= CORE_NAV_LIMIT
    for href in CRITICAL_CORE_LINKS:
        assert href in _hrefs(model.core)


def test_student_core_keeps_preferred_order_then_critical_links():
    model = resolve_nav_model(NavInput(pathname="/", roles=["STUDENT"], primary_role="STUDENT"))

    # Six preferred hrefs compete with two critical ones for six slots.
    assert _hrefs(model.core) == [
        "/",
        "/my-courses",
        "/classes/schedule",
        "/pathways",
        "/notifications",
        "/messages",
    ]


def test_instructor_core_evicts_from_the_end_for_critical_links():
    model = resolve_nav_model(NavInput(pathname="/", roles=["INSTRUCTOR"], primary_role="INSTRUCTOR"))

    # Critical links take over the last non-critical slots in place.
    assert _hrefs(model.core) == [
        "/",
        "/instructor-training",
        "/instructor/class-settings",
        "/lesson-plans",
        "/notifications",
        "/messages",
    ]


def test_output_is_deterministic():
    nav_input = NavInput(pathname="/challenges/daily", roles=["MENTOR", "STUDENT"], award_tier="gold")

    assert asdict(resolve_nav_model(nav_input)) == asdict(resolve_nav_model(nav_input))


def test_unknown_roles_are_dropped():
    model = resolve_nav_model(NavInput(roles=["SUPERHERO", "admin"], primary_role="SUPERHERO"))

    assert model.primary_role == PlatformRole.ADMIN
    assert "/admin" in _hrefs(model.visible)


@pytest.mark.parametrize(
    "roles, expected",
    [
        (["STUDENT", "PARENT"], PlatformRole.PARENT),
        (["MENTOR", "INSTRUCTOR"], PlatformRole.INSTRUCTOR),
        (["STAFF", "CHAPTER_LEAD", "ADMIN"], PlatformRole.ADMIN),
        ([], PlatformRole.STUDENT),
    ],
)
def test_primary_role_falls_back_by_priority(roles, expected):
    assert resolve_nav_model(NavInput(roles=roles)).primary_role == expected


def test_supplied_primary_role_wins_over_fallback():
    model = resolve_nav_model(NavInput(roles=["ADMIN", "MENTOR"], primary_role="mentor"))

    assert model.primary_role == PlatformRole.MENTOR


def test_role_restricted_links_hidden_from_other_roles():
    student = resolve_nav_model(NavInput(roles=["STUDENT"]))

    hrefs = _hrefs(student.visible)
    assert "/my-courses" in hrefs
    assert "/admin" not in hrefs
    assert "/parent" not in hrefs
    assert "/" in hrefs


def test_award_links_need_award_tier():
    without = resolve_nav_model(NavInput(roles=["STUDENT"]))
    bronze = resolve_nav_model(NavInput(roles=["STUDENT"], award_tier="bronze"))
    bogus = resolve_nav_model(NavInput(roles=["STUDENT"], award_tier="PLATINUM"))

    assert "/alumni" not in _hrefs(without.visible)
    assert "/alumni" in _hrefs(bronze.visible)
    assert "/college-advisor" not in _hrefs(bogus.visible)


def test_admin_sees_award_links_without_tier():
    model = resolve_nav_model(NavInput(roles=["ADMIN"]))

    assert "/alumni" in _hrefs(model.visible)
    assert "/college-advisor" in _hrefs(model.visible)


def test_visible_links_follow_role_group_order():
    model = resolve_nav_model(NavInput(roles=["PARENT"], primary_role="PARENT"))
    order = GROUP_ORDER_BY_ROLE[PlatformRole.PARENT]

    ranks = [order.index(link.group) for link in model.visible]
    assert ranks == sorted(ranks)
    assert model.visible[0].group == NavGroup.FAMILY


def test_more_sections_exclude_core_and_follow_group_order():
    model = resolve_nav_model(NavInput(roles=["ADMIN"], primary_role="ADMIN"))
    order = GROUP_ORDER_BY_ROLE[PlatformRole.ADMIN]

    core_hrefs = set(_hrefs(model.core))
    more_hrefs = [link.href for section in model.more for link in section.items]
    assert core_hrefs.isdisjoint(more_hrefs)
    assert len(core_hrefs) + len(more_hrefs) == len(model.visible)

    labels = [section.label for section in model.more]
    assert labels == sorted(labels, key=order.index)
    assert all(section.items for section in model.more)


def test_active_link_is_promoted_without_evicting_critical_links():
    model = resolve_nav_model(NavInput(pathname="/challenges/daily/42", roles=["INSTRUCTOR"]))

    hrefs = _hrefs(model.core)
    assert "/challenges/daily" in hrefs
    assert set(CRITICAL_CORE_LINKS) <= set(hrefs)
    assert len(hrefs) <= CORE_NAV_LIMIT


def test_active_link_not_promoted_when_only_critical_links_fit():
    model = resolve_nav_model(
        NavInput(pathname="/challenges", roles=["STUDENT"], max_core_items=2)
    )

    assert sorted(_hrefs(model.core)) == ["/messages", "/notifications"]


def test_max_core_items_only_lowers_the_limit():
    lowered = resolve_nav_model(NavInput(roles=["STUDENT"], max_core_items=3))
    raised = resolve_nav_model(NavInput(roles=["STUDENT"], max_core_items=50))
    empty = resolve_nav_model(NavInput(roles=["STUDENT"], max_core_items=0))

    assert len(lowered.core) == 3
    assert len(raised.core) == CORE_NAV_LIMIT
    assert empty.core == []
    assert sum(len(section.items) for section in empty.more) == len(empty.visible)


def test_is_nav_href_active():
    assert is_nav_href_active("/", "/") is True
    assert is_nav_href_active("/", "/goals") is False
    assert is_nav_href_active("/goals", "/goals") is True
    assert is_nav_href_active("/goals", "/goals/2024") is True
    assert is_nav_href_active("/goals", "/goalsetting") is False


def test_catalog_hrefs_are_unique():
    hrefs = [link.href for link in NAV_CATALOG]

    assert len(hrefs) == len(set(hrefs))
