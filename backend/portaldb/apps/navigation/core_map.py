"""Per-role navigation ordering tables."""

from __future__ import annotations

from typing import Dict, Tuple

from portaldb.apps.accounts.models import PlatformRole

from .schemas import NavGroup

R = PlatformRole
G = NavGroup

CORE_NAV_LIMIT = 6

PRIMARY_ROLE_FALLBACK_ORDER: Tuple[PlatformRole, ...] = (
    R.ADMIN,
    R.CHAPTER_LEAD,
    R.INSTRUCTOR,
    R.MENTOR,
    R.STAFF,
    R.PARENT,
    R.STUDENT,
)

_ADMIN_GROUPS = (G.ADMIN_PEOPLE, G.ADMIN_CONTENT, G.ADMIN_REPORTS, G.ADMIN_OPS)

GROUP_ORDER_BY_ROLE: Dict[PlatformRole, Tuple[NavGroup, ...]] = {
    R.STUDENT: (
        G.MAIN, G.LEARNING, G.GROWTH, G.CHALLENGES, G.INCUBATOR, G.COMMUNITY,
        G.OPPORTUNITIES, G.CHAPTERS, G.ACCOUNT, G.FAMILY, *_ADMIN_GROUPS,
    ),
    R.INSTRUCTOR: (
        G.MAIN, G.GROWTH, G.LEARNING, G.COMMUNITY, G.OPPORTUNITIES, G.INCUBATOR,
        G.CHALLENGES, G.CHAPTERS, G.ACCOUNT, G.FAMILY, *_ADMIN_GROUPS,
    ),
    R.ADMIN: (
        G.MAIN, *_ADMIN_GROUPS, G.GROWTH, G.LEARNING, G.COMMUNITY, G.CHAPTERS,
        G.OPPORTUNITIES, G.ACCOUNT, G.CHALLENGES, G.INCUBATOR, G.FAMILY,
    ),
    R.CHAPTER_LEAD: (
        G.MAIN, G.CHAPTERS, G.GROWTH, G.COMMUNITY, G.LEARNING, G.OPPORTUNITIES,
        G.INCUBATOR, G.CHALLENGES, G.ACCOUNT, G.FAMILY, *_ADMIN_GROUPS,
    ),
    R.PARENT: (
        G.FAMILY, G.MAIN, G.COMMUNITY, G.LEARNING, G.GROWTH, G.ACCOUNT,
        G.OPPORTUNITIES, G.CHAPTERS, G.CHALLENGES, G.INCUBATOR, *_ADMIN_GROUPS,
    ),
    R.MENTOR: (
        G.MAIN, G.COMMUNITY, G.GROWTH, G.LEARNING, G.OPPORTUNITIES, G.CHAPTERS,
        G.ACCOUNT, G.CHALLENGES, G.INCUBATOR, G.FAMILY, *_ADMIN_GROUPS,
    ),
    R.STAFF: (
        G.MAIN, G.OPPORTUNITIES, G.LEARNING, G.GROWTH, G.COMMUNITY, G.CHAPTERS,
        G.ACCOUNT, G.CHALLENGES, G.INCUBATOR, G.FAMILY, *_ADMIN_GROUPS,
    ),
}

# Preferred core hrefs per primary role, in display order.
CORE_NAV_MAP: Dict[PlatformRole, Tuple[str, ...]] = {
    R.STUDENT: ("/", "/my-courses", "/classes/schedule", "/pathways", "/goals", "/challenges"),
    R.INSTRUCTOR: ("/", "/instructor-training", "/instructor/class-settings", "/lesson-plans", "/attendance"),
    R.ADMIN: (
        "/",
        "/admin",
        "/admin/applications",
        "/admin/instructor-readiness",
        "/admin/parent-approvals",
        "/admin/analytics",
    ),
    R.CHAPTER_LEAD: (
        "/",
        "/chapter",
        "/chapter/recruiting",
        "/chapter-lead/instructor-readiness",
        "/chapter-lead/dashboard",
    ),
    R.MENTOR: ("/", "/mentorship/mentees", "/mentorship", "/mentor/resources", "/calendar"),
    R.STAFF: ("/", "/positions", "/applications", "/calendar", "/office-hours"),
    R.PARENT: ("/parent", "/parent/resources", "/announcements", "/events"),
}


def _check_tables() -> None:
    # Every role needs an entry and every group order must be total.
    for role in PlatformRole:
        if role not in GROUP_ORDER_BY_ROLE or role not in CORE_NAV_MAP:
            raise RuntimeError(f"Navigation tables have no entry for role {role.value}")
        if set(GROUP_ORDER_BY_ROLE[role]) != set(NavGroup) or len(GROUP_ORDER_BY_ROLE[role]) != len(NavGroup):
            raise RuntimeError(f"Group order for {role.value} must list every group exactly once")


_check_tables()
