"""Unit tests for permission queries.

Covers point queries (has_permission), aggregate queries (all_permissions,
unique_permissions) and the user-level helpers that resolve roles first.
"""

import pytest

from src.access.auth.enums import Permission, Role
from src.access.auth.permission_table import DEFAULT_PERMISSION_TABLE, PermissionTable
from src.access.auth.permissions import (
    all_permissions,
    has_permission,
    unique_permissions,
    user_has_permission,
    user_permissions,
)
from src.access.auth.roles import resolve_roles
from src.access.models.user import UserRecord


@pytest.fixture
def small_table(small_table_data) -> PermissionTable:
    """Table granting search_offers to buyer and create_offers to advertiser."""
    return PermissionTable(small_table_data)


class TestHasPermission:
    """Test has_permission function."""

    def test_scenario_buyer_and_advertiser(self, small_table: PermissionTable) -> None:
        """A permission granted by any held role is held."""
        roles = resolve_roles({"roles": ["buyer", "advertiser"]})

        assert has_permission(roles, "create_offers", small_table) is True
        assert has_permission(roles, Permission.SEARCH_OFFERS, small_table) is True

    def test_permission_not_granted(self, small_table: PermissionTable) -> None:
        """Permissions outside every held role are not held."""
        assert has_permission([Role.BUYER], "create_offers", small_table) is False

    def test_unknown_permission_is_false(self) -> None:
        """Unknown tokens never match and never raise."""
        assert has_permission([Role.ADMIN], "launch_rockets") is False

    def test_unknown_role_is_ignored(self) -> None:
        """Unknown role strings grant nothing."""
        assert has_permission(["superuser"], "manage_users") is False

    def test_empty_roles(self) -> None:
        """No roles, no permissions."""
        assert has_permission([], Permission.SEARCH_OFFERS) is False
        assert has_permission(None, Permission.SEARCH_OFFERS) is False

    def test_single_role_string_is_one_role(self) -> None:
        """A bare role string is treated as that role, not its characters."""
        assert has_permission("admin", "manage_users") is True
        assert has_permission(Role.PROVIDER, Permission.CREATE_OFFERS) is True
        assert all_permissions("provider") == list(
            DEFAULT_PERMISSION_TABLE[Role.PROVIDER]
        )

    def test_union_across_roles(self) -> None:
        """Capabilities are the union, not the intersection, of roles."""
        roles = [Role.BUYER, Role.PROVIDER]

        assert has_permission(roles, Permission.HIRE_SERVICES)
        assert has_permission(roles, Permission.MANAGE_AGENDA)

    def test_admin_holds_every_permission(self) -> None:
        """The built-in admin role grants the whole permission set."""
        for permission in Permission:
            assert has_permission([Role.ADMIN], permission), permission

    def test_role_without_entry_grants_nothing(self, small_table: PermissionTable) -> None:
        """Roles the configuration leaves out grant no permissions."""
        assert has_permission([Role.PROVIDER], "create_offers", small_table) is False

    def test_defaults_to_process_table(self) -> None:
        """Without a table argument the configured table is used."""
        assert has_permission([Role.PROVIDER], Permission.CREATE_OFFERS) is True


class TestAllPermissions:
    """Test all_permissions and unique_permissions."""

    def test_scenario_order_follows_roles(self, small_table: PermissionTable) -> None:
        """Permissions are listed in role order."""
        roles = resolve_roles({"roles": ["buyer", "advertiser"]})

        assert all_permissions(roles, small_table) == [
            Permission.SEARCH_OFFERS,
            Permission.CREATE_OFFERS,
        ]

    def test_reversed_roles_reverse_the_output(
        self, small_table: PermissionTable
    ) -> None:
        """Order is driven by the role sequence, not the table."""
        assert all_permissions([Role.ADVERTISER, Role.BUYER], small_table) == [
            Permission.CREATE_OFFERS,
            Permission.SEARCH_OFFERS,
        ]

    def test_shared_permissions_are_not_deduplicated(self) -> None:
        """A permission granted by two held roles appears twice."""
        perms = all_permissions([Role.BUYER, Role.ADMIN])

        assert perms.count(Permission.SEARCH_OFFERS) == 2
        assert len(perms) == len(DEFAULT_PERMISSION_TABLE[Role.BUYER]) + len(
            DEFAULT_PERMISSION_TABLE[Role.ADMIN]
        )

    def test_unique_permissions_keeps_first_occurrence(self) -> None:
        """unique_permissions drops repeats and keeps order."""
        perms = unique_permissions([Role.BUYER, Role.ADMIN])

        assert len(perms) == len(set(perms)) == len(Permission)
        assert perms[:4] == list(DEFAULT_PERMISSION_TABLE[Role.BUYER])

    def test_duplicates_within_one_role_are_kept(self) -> None:
        """Redundant entries in one role's list are tolerated and preserved."""
        table = PermissionTable({"buyer": ["rate_services", "rate_services"]})

        assert all_permissions([Role.BUYER], table) == [
            Permission.RATE_SERVICES,
            Permission.RATE_SERVICES,
        ]

    def test_empty_roles(self) -> None:
        """No roles gives an empty list."""
        assert all_permissions([]) == []
        assert all_permissions(None) == []
        assert unique_permissions(None) == []

    def test_unknown_roles_contribute_nothing(self) -> None:
        """Unknown role strings are skipped."""
        assert all_permissions(["ghost", Role.PROVIDER]) == list(
            DEFAULT_PERMISSION_TABLE[Role.PROVIDER]
        )


class TestUserQueries:
    """Test user_has_permission and user_permissions."""

    def test_absent_user(self) -> None:
        """No session: false and empty, never an exception."""
        assert user_has_permission(None, Permission.SEARCH_OFFERS) is False
        assert user_permissions(None) == []

    def test_legacy_user(self, legacy_user: UserRecord) -> None:
        """Legacy flags drive the permission set."""
        assert user_has_permission(legacy_user, "respond_to_requests") is True
        assert user_has_permission(legacy_user, "manage_users") is False
        assert user_permissions(legacy_user) == list(
            DEFAULT_PERMISSION_TABLE[Role.PROVIDER]
        )

    def test_empty_roles_list_beats_admin_flag(self) -> None:
        """The canonical empty list leaves the user with nothing."""
        user = {"roles": [], "isAdmin": True}

        assert user_has_permission(user, "manage_users") is False
        assert user_permissions(user) == []

    def test_explicit_table(self, canonical_user: UserRecord, small_table) -> None:
        """A table passed in is used instead of the process table."""
        assert user_permissions(canonical_user, small_table) == [
            Permission.SEARCH_OFFERS,
            Permission.CREATE_OFFERS,
        ]

    def test_queries_are_repeatable(self, canonical_user: UserRecord) -> None:
        """Same input, same output."""
        first = user_permissions(canonical_user)
        second = user_permissions(canonical_user)

        assert first == second
        assert user_has_permission(canonical_user, "view_reports") == (
            user_has_permission(canonical_user, "view_reports")
        )
