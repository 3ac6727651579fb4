"""Permission queries over effective roles.

A user's capabilities are the union of the permissions of every role they
hold. All functions here are pure: they read the permission table and never
raise for unknown roles or tokens.

Usage:
    from src.access.auth.permissions import has_permission, user_has_permission

    if user_has_permission(session_user, "create_offers"):
        ...
"""

from __future__ import annotations

from collections.abc import Iterable

from src.access.auth.enums import Permission, parse_permission
from src.access.auth.permission_table import PermissionTable
from src.access.auth.roles import UserInput, resolve_roles
from src.access.config import get_permission_table


def _table(table: PermissionTable | None) -> PermissionTable:
    return table if table is not None else get_permission_table()


def _role_sequence(roles: Iterable[str] | str) -> Iterable[str]:
    # A single role string (or Role member) is one role, not its characters
    if isinstance(roles, str):
        return (roles,)
    return roles


def has_permission(
    roles: Iterable[str] | str | None,
    permission: Permission | str,
    table: PermissionTable | None = None,
) -> bool:
    """Check whether any of the roles grants a permission.

    Args:
        roles: Effective roles (Role members or role value strings). A
            single role string counts as one role.
        permission: Permission token to look for
        table: Permission table; defaults to the process-wide table

    Returns:
        True if at least one role grants the permission. Unknown tokens and
        unknown roles never match.
    """
    if not roles:
        return False

    wanted = parse_permission(permission)
    if wanted is None:
        return False

    perms = _table(table)
    return any(
        wanted in perms.permissions_for(role) for role in _role_sequence(roles)
    )


def all_permissions(
    roles: Iterable[str] | str | None,
    table: PermissionTable | None = None,
) -> list[Permission]:
    """Concatenate the permissions of every role, in role order.

    Permissions shared by two held roles appear twice. Use
    unique_permissions() when a deduplicated list is needed.
    """
    if not roles:
        return []

    perms = _table(table)
    return [
        permission
        for role in _role_sequence(roles)
        for permission in perms.permissions_for(role)
    ]


def unique_permissions(
    roles: Iterable[str] | str | None,
    table: PermissionTable | None = None,
) -> list[Permission]:
    """Like all_permissions(), keeping only the first occurrence of each token."""
    return list(dict.fromkeys(all_permissions(roles, table)))


def user_has_permission(
    user: UserInput,
    permission: Permission | str,
    table: PermissionTable | None = None,
) -> bool:
    """Resolve the user's roles and check a permission. False without a user."""
    return has_permission(resolve_roles(user), permission, table)


def user_permissions(
    user: UserInput,
    table: PermissionTable | None = None,
) -> list[Permission]:
    """Resolve the user's roles and list their permissions (not deduplicated)."""
    return all_permissions(resolve_roles(user), table)
