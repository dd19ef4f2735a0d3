"""
Role-prioritised navigation model.

`resolve_nav_model` is pure: it reads only the static catalog and the
per-role tables in `core_map`, so identical inputs always produce identical
output.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Set

from portaldb.apps.accounts.authorization import parse_role
from portaldb.apps.accounts.models import AwardTier, PlatformRole

from .catalog import NAV_CATALOG
from .core_map import CORE_NAV_LIMIT, CORE_NAV_MAP, GROUP_ORDER_BY_ROLE, PRIMARY_ROLE_FALLBACK_ORDER
from .schemas import NavGroup, NavInput, NavLink, NavSection, NavViewModel

AWARD_TIERS = frozenset(tier.value for tier in AwardTier)
CRITICAL_CORE_LINKS = ("/messages", "/notifications")


def _normalize_roles(roles: Optional[Iterable[str]]) -> List[PlatformRole]:
    # Order-preserving dedupe; unknown strings are dropped.
    result: List[PlatformRole] = []
    for raw in roles or []:
        role = parse_role(raw)
        if role is not None and role not in result:
            result.append(role)
    return result


def _resolve_primary_role(primary_role: Optional[str], roles: Sequence[PlatformRole]) -> PlatformRole:
    parsed = parse_role(primary_role)
    if parsed is not None:
        return parsed
    for candidate in PRIMARY_ROLE_FALLBACK_ORDER:
        if candidate in roles:
            return candidate
    return PlatformRole.STUDENT


def _is_award_tier(tier: Optional[str]) -> bool:
    return bool(tier) and tier.strip().upper() in AWARD_TIERS


def _has_role_access(item: NavLink, roles: Set[PlatformRole]) -> bool:
    if not item.roles:
        return True
    return any(role in roles for role in item.roles)


def _has_award_access(item: NavLink, roles: Set[PlatformRole], has_award: bool) -> bool:
    if not item.requires_award:
        return True
    # Admins see award-gated links so they can support members.
    return has_award or PlatformRole.ADMIN in roles


def _group_rank(primary_role: PlatformRole, group: NavGroup) -> int:
    return GROUP_ORDER_BY_ROLE[primary_role].index(group)


def _sort_for_role(links: Iterable[NavLink], primary_role: PlatformRole) -> List[NavLink]:
    return sorted(
        links,
        key=lambda link: (_group_rank(primary_role, link.group), link.priority, link.label.casefold(), link.label),
    )


def is_nav_href_active(href: str, pathname: str) -> bool:
    """`/` is active only on itself; other hrefs also match their sub-paths."""
    if href == "/":
        return pathname == "/"
    return pathname == href or pathname.startswith(f"{href}/")


def _find_active_link(links: Sequence[NavLink], pathname: Optional[str]) -> Optional[NavLink]:
    if not pathname:
        return None
    best: Optional[NavLink] = None
    for link in links:
        if is_nav_href_active(link.href, pathname) and (best is None or len(link.href) > len(best.href)):
            best = link
    return best


def _last_non_critical_index(core: Sequence[NavLink]) -> int:
    for index in range(len(core) - 1, -1, -1):
        if core[index].href not in CRITICAL_CORE_LINKS:
            return index
    return -1


def _add_core_item(
    core: List[NavLink],
    item: NavLink,
    limit: int,
    *,
    may_evict: bool,
    may_evict_critical: bool = False,
) -> None:
    if limit <= 0 or any(entry.href == item.href for entry in core):
        return
    if len(core) < limit:
        core.append(item)
        return
    if not may_evict:
        return

    replace_index = _last_non_critical_index(core)
    if replace_index < 0:
        if not may_evict_critical:
            return
        replace_index = len(core) - 1
    core[replace_index] = item


def _effective_limit(max_core_items: Optional[int]) -> int:
    if max_core_items is None:
        return CORE_NAV_LIMIT
    return min(max_core_items, CORE_NAV_LIMIT)


def resolve_nav_model(nav_input: NavInput) -> NavViewModel:
    roles = _normalize_roles(nav_input.roles)
    role_set = set(roles)
    primary_role = _resolve_primary_role(nav_input.primary_role, roles)
    has_award = _is_award_tier(nav_input.award_tier)
    limit = _effective_limit(nav_input.max_core_items)

    visible = _sort_for_role(
        (
            item
            for item in NAV_CATALOG
            if _has_role_access(item, role_set) and _has_award_access(item, role_set, has_award)
        ),
        primary_role,
    )
    visible_by_href: Dict[str, NavLink] = {item.href: item for item in visible}

    core: List[NavLink] = []
    for href in CORE_NAV_MAP[primary_role]:
        item = visible_by_href.get(href)
        if item is None or not item.core_eligible:
            continue
        _add_core_item(core, item, limit, may_evict=False)

    for href in CRITICAL_CORE_LINKS:
        item = visible_by_href.get(href)
        if item is None or not item.core_eligible:
            continue
        _add_core_item(core, item, limit, may_evict=True, may_evict_critical=True)

    active = _find_active_link(visible, nav_input.pathname)
    if active is not None and active.core_eligible:
        _add_core_item(core, active, limit, may_evict=True)

    core_hrefs = {item.href for item in core}
    grouped: Dict[NavGroup, List[NavLink]] = {}
    for link in visible:
        if link.href in core_hrefs:
            continue
        grouped.setdefault(link.group, []).append(link)

    more = [
        NavSection(label=group, items=grouped[group])
        for group in sorted(grouped, key=lambda g: _group_rank(primary_role, g))
    ]

    return NavViewModel(primary_role=primary_role, visible=visible, core=core, more=more)
