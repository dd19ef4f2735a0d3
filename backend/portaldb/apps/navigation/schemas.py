from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from portaldb.apps.accounts.models import PlatformRole


class NavGroup(str, enum.Enum):
    FAMILY = "Family"
    MAIN = "Main"
    LEARNING = "Learning"
    GROWTH = "Growth"
    CHALLENGES = "Challenges"
    INCUBATOR = "Incubator"
    OPPORTUNITIES = "Opportunities"
    COMMUNITY = "Community"
    CHAPTERS = "Chapters"
    ACCOUNT = "Account"
    ADMIN_PEOPLE = "Admin: People"
    ADMIN_CONTENT = "Admin: Content"
    ADMIN_REPORTS = "Admin: Reports"
    ADMIN_OPS = "Admin: Ops"


@dataclass(frozen=True)
class NavLink:
    href: str
    label: str
    group: NavGroup
    priority: int
    icon: str = ""
    # Empty means visible to every role.
    roles: Tuple[PlatformRole, ...] = ()
    requires_award: bool = False
    core_eligible: bool = True
    badge_key: Optional[str] = None


@dataclass
class NavSection:
    label: NavGroup
    items: List[NavLink] = field(default_factory=list)


@dataclass
class NavViewModel:
    primary_role: PlatformRole
    visible: List[NavLink] = field(default_factory=list)
    core: List[NavLink] = field(default_factory=list)
    more: List[NavSection] = field(default_factory=list)


@dataclass
class NavInput:
    pathname: str = "/"
    roles: List[str] = field(default_factory=list)
    primary_role: Optional[str] = None
    award_tier: Optional[str] = None
    max_core_items: Optional[int] = None
