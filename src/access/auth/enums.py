"""Canonical enum definitions for marketplace access control.

This module defines the roles and permission tokens recognized throughout the
application. Both sets are closed: the permission table is validated against
them at load time so typos fail fast.

All access-related enums should be defined here to ensure a single source of truth.
"""

from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    """Marketplace user roles.

    Roles are not exclusive. A user may hold any combination:
    - buyer: hires services and attends trainings
    - provider: offers services and manages an agenda
    - advertiser: publishes ads and trainings
    - admin: administrative access (holds every other role's permissions)
    """

    BUYER = "buyer"
    PROVIDER = "provider"
    ADVERTISER = "advertiser"
    ADMIN = "admin"


class Permission(StrEnum):
    """Capability tokens checked before allowing an action."""

    # Buyer
    SEARCH_OFFERS = "search_offers"
    HIRE_SERVICES = "hire_services"
    VIEW_TRAININGS = "view_trainings"
    RATE_SERVICES = "rate_services"

    # Provider
    CREATE_OFFERS = "create_offers"
    MANAGE_AGENDA = "manage_agenda"
    VIEW_REQUESTS = "view_requests"
    RESPOND_TO_REQUESTS = "respond_to_requests"

    # Advertiser
    CREATE_TRAININGS = "create_trainings"
    VIEW_REPORTS = "view_reports"
    MANAGE_ADS = "manage_ads"
    VIEW_ANALYTICS = "view_analytics"

    # Admin
    MANAGE_USERS = "manage_users"
    VIEW_ALL_DATA = "view_all_data"
    SYSTEM_SETTINGS = "system_settings"
    MODERATE_CONTENT = "moderate_content"


# Immutable sets for O(1) validation at load time
VALID_ROLES: frozenset[str] = frozenset(role.value for role in Role)
VALID_PERMISSIONS: frozenset[str] = frozenset(perm.value for perm in Permission)

# Legacy boolean flag name -> role, in catalog order
LEGACY_FLAG_ROLES: dict[str, Role] = {
    "isBuyer": Role.BUYER,
    "isProvider": Role.PROVIDER,
    "isAdvertiser": Role.ADVERTISER,
    "isAdmin": Role.ADMIN,
}


def parse_role(value: object) -> Role | None:
    """Return the Role for a raw value, or None if it is not in the catalog."""
    if isinstance(value, Role):
        return value
    if isinstance(value, str) and value in VALID_ROLES:
        return Role(value)
    return None


def parse_permission(value: object) -> Permission | None:
    """Return the Permission for a raw token, or None if it is unknown."""
    if isinstance(value, Permission):
        return value
    if isinstance(value, str) and value in VALID_PERMISSIONS:
        return Permission(value)
    return None
