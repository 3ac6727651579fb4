"""Role resolution for marketplace users.

resolve_roles() derives the effective role set from whichever representation
the user record carries:

- canonical: an explicit roles list, used as-is (even when empty)
- legacy: isBuyer / isProvider / isAdvertiser / isAdmin flags

The two are never merged. A roles list always wins, so a user whose list is
empty has no roles even if a legacy flag is still set.

The effective role set is returned as a tuple without duplicates, in first
occurrence order, so permission aggregation over it is deterministic.

The role management helpers below never mutate the record they are given.
They return a new UserRecord with the roles list and the legacy flags kept
in sync.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from src.access.auth.enums import LEGACY_FLAG_ROLES, Role, parse_role
from src.access.errors import LastRoleError
from src.access.models.user import (
    CanonicalRoles,
    LegacyFlags,
    UserRecord,
    UserRepresentation,
)

logger = logging.getLogger(__name__)

UserInput = UserRecord | UserRepresentation | Mapping[str, Any] | None

_FLAG_FIELDS: dict[str, str] = {
    "isBuyer": "is_buyer",
    "isProvider": "is_provider",
    "isAdvertiser": "is_advertiser",
    "isAdmin": "is_admin",
}


def _as_representation(user: UserInput) -> UserRepresentation | None:
    if user is None:
        return None
    if isinstance(user, (CanonicalRoles, LegacyFlags)):
        return user
    if isinstance(user, UserRecord):
        return user.representation

    record = UserRecord.from_session(user)
    if record is None:
        return None
    return record.representation


def _dedupe(roles: Iterable[Role]) -> tuple[Role, ...]:
    return tuple(dict.fromkeys(roles))


def resolve_roles(user: UserInput) -> tuple[Role, ...]:
    """Derive the effective role set for a user.

    Args:
        user: A UserRecord, a raw session mapping, a bare representation,
            or None when there is no session

    Returns:
        Roles without duplicates, in first occurrence order (canonical) or
        catalog order (legacy). Empty for absent or malformed records.

    Examples:
        >>> resolve_roles({"isProvider": True, "isAdmin": False})
        (<Role.PROVIDER: 'provider'>,)

        >>> resolve_roles({"roles": [], "isAdmin": True})
        ()
    """
    representation = _as_representation(user)

    if representation is None:
        return ()

    if isinstance(representation, CanonicalRoles):
        roles = _dedupe(representation.roles)
        logger.debug(
            "Resolved roles from roles list",
            extra={"roles": [role.value for role in roles]},
        )
        return roles

    roles = tuple(
        role
        for role, enabled in (
            (Role.BUYER, representation.is_buyer),
            (Role.PROVIDER, representation.is_provider),
            (Role.ADVERTISER, representation.is_advertiser),
            (Role.ADMIN, representation.is_admin),
        )
        if enabled
    )
    logger.debug(
        "Resolved roles from legacy flags",
        extra={"roles": [role.value for role in roles]},
    )
    return roles


def flags_to_roles(flags: Mapping[str, Any] | None) -> list[Role]:
    """Convert legacy flags ({"isBuyer": True, ...}) to a role list.

    Only flags that are exactly True count. Unknown flags are ignored.
    """
    if not flags:
        return []
    return [
        role for flag, role in LEGACY_FLAG_ROLES.items() if flags.get(flag) is True
    ]


def roles_to_flags(roles: Iterable[Role | str] | None = None) -> dict[str, bool]:
    """Convert a role list to the full set of legacy flags."""
    held = {parse_role(role) for role in roles or ()}
    return {flag: role in held for flag, role in LEGACY_FLAG_ROLES.items()}


def has_role(user: UserInput, role: Role | str) -> bool:
    """Check whether the user's effective roles include a role."""
    parsed = parse_role(role)
    if parsed is None:
        return False
    return parsed in resolve_roles(user)


def active_role_count(user: UserInput) -> int:
    """Number of effective roles the user holds."""
    return len(resolve_roles(user))


def _with_roles(user: UserRecord, roles: Iterable[Role]) -> UserRecord:
    new_roles = _dedupe(roles)
    flags = roles_to_flags(new_roles)
    update: dict[str, Any] = {"roles": new_roles}
    update.update({_FLAG_FIELDS[flag]: value for flag, value in flags.items()})
    if user.active_role is not None and user.active_role not in new_roles:
        update["active_role"] = None
    return user.model_copy(update=update)


def add_role(user: UserRecord, role: Role | str) -> UserRecord:
    """Return a copy of the user with a role added.

    Both representations are written so that older readers of the legacy
    flags see the same roles. Returns the same record if the role is
    already held.

    Raises:
        ValueError: If role is not in the catalog
    """
    parsed = parse_role(role)
    if parsed is None:
        raise ValueError(f"Unknown role: {role!r}")

    current = resolve_roles(user)
    if parsed in current:
        return user

    logger.debug("Adding role", extra={"role": parsed.value})
    return _with_roles(user, (*current, parsed))


def remove_role(user: UserRecord, role: Role | str) -> UserRecord:
    """Return a copy of the user with a role removed.

    Clears the active role if it was the one removed. Returns the same
    record if the role is not held.

    Raises:
        ValueError: If role is not in the catalog
        LastRoleError: If it is the user's only role
    """
    parsed = parse_role(role)
    if parsed is None:
        raise ValueError(f"Unknown role: {role!r}")

    current = resolve_roles(user)
    if parsed not in current:
        return user

    if len(current) == 1:
        raise LastRoleError(parsed.value)

    logger.debug("Removing role", extra={"role": parsed.value})
    return _with_roles(user, (r for r in current if r is not parsed))


def set_active_role(user: UserRecord, role: Role | str | None) -> UserRecord:
    """Return a copy of the user acting as one of their roles.

    Passing None clears the active role.

    Raises:
        ValueError: If role is unknown or not held by the user
    """
    if role is None:
        return user.model_copy(update={"active_role": None})

    parsed = parse_role(role)
    if parsed is None or parsed not in resolve_roles(user):
        raise ValueError(f"User does not hold role: {role!r}")

    return user.model_copy(update={"active_role": parsed})


def role_update_payload(
    user: UserRecord, roles: Iterable[Role | str]
) -> dict[str, dict[str, Any]]:
    """Build the profile update body carrying both role representations.

    Unknown role strings are dropped.

    Example:
        >>> role_update_payload(user, ["buyer"])["user"]["isBuyer"]
        True
    """
    known = _dedupe(r for r in (parse_role(role) for role in roles) if r is not None)
    body: dict[str, Any] = {
        "userId": user.user_id,
        "name": user.name,
        "email": user.email,
        "roles": [role.value for role in known],
    }
    body.update(roles_to_flags(known))
    return {"user": body}
