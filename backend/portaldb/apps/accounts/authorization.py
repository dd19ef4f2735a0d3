"""
Role helpers shared by services and routers.

Role lists can come from stale sessions while the role enum changes, so
normalisation drops anything it does not recognise instead of failing.
"""

from __future__ import annotations

from typing import Iterable, Optional, Set, Union

from portaldb.errors import Forbidden

from .models import PlatformRole, User

RoleLike = Union[PlatformRole, str]


def parse_role(value: Optional[RoleLike]) -> Optional[PlatformRole]:
    if value is None:
        return None
    if isinstance(value, PlatformRole):
        return value
    # UserRole rows and similar objects expose `.role`.
    value = getattr(value, "role", value)
    if isinstance(value, PlatformRole):
        return value
    try:
        return PlatformRole(str(value).strip().upper())
    except ValueError:
        return None


def normalize_role_set(
    roles: Iterable[RoleLike],
    primary_role: Optional[RoleLike] = None,
) -> Set[PlatformRole]:
    """Union of `roles` and `primary_role`, unknown values dropped."""
    result: Set[PlatformRole] = set()
    for raw in list(roles or []) + [primary_role]:
        role = parse_role(raw)
        if role is not None:
            result.add(role)
    return result


def roles_for_user(user: User) -> Set[PlatformRole]:
    return normalize_role_set(getattr(user, "roles", None) or [], getattr(user, "primary_role", None))


def has_any_role(user: User, allowed: Iterable[RoleLike]) -> bool:
    allowed_set = normalize_role_set(allowed)
    return bool(roles_for_user(user) & allowed_set)


def require_any_role(user: Optional[User], allowed: Iterable[RoleLike]) -> User:
    """
    Return `user` if it holds one of `allowed`, else raise Forbidden.

    Inactive accounts never pass.
    """
    if user is None or not getattr(user, "is_active", False):
        raise Forbidden("Unauthorized")
    if not has_any_role(user, allowed):
        raise Forbidden("Insufficient permissions for this operation")
    return user
