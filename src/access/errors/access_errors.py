"""Access control error types.

Configuration errors are raised while loading the permission table and
should stop the process from starting. Role management errors are raised
when a requested role change would leave a user record in an invalid state.

Permission queries themselves never raise: absent or malformed user records
simply resolve to no roles.
"""

from __future__ import annotations

from collections.abc import Iterable


class ConfigurationError(ValueError):
    """Raised when access control configuration is invalid."""

    pass


class UnknownRoleError(ConfigurationError):
    """Raised when the permission table references a role outside the catalog.

    This indicates a configuration defect (typo or stale role name) and
    should cause the application to fail to start.
    """

    def __init__(self, role: str, valid_roles: Iterable[str]) -> None:
        self.role = role
        self.valid_roles = frozenset(valid_roles)
        super().__init__(
            f"Unknown role '{role}' in permission table. "
            f"Valid roles: {sorted(self.valid_roles)}"
        )


class UnknownPermissionError(ConfigurationError):
    """Raised when the permission table grants a token outside the permission set."""

    def __init__(self, role: str, permission: str) -> None:
        self.role = role
        self.permission = permission
        super().__init__(f"Unknown permission '{permission}' granted to role '{role}'")


class RoleManagementError(Exception):
    """Base class for refused role changes."""

    pass


class LastRoleError(RoleManagementError):
    """Raised when removing a role would leave the user with no roles.

    Users must keep at least one active role; another role has to be
    activated before this one can be removed.
    """

    def __init__(self, role: str) -> None:
        self.role = role
        super().__init__(f"Cannot remove '{role}': user must keep at least one role")
