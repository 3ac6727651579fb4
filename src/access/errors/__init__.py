"""Shared error types for access control."""

from src.access.errors.access_errors import (
    ConfigurationError,
    LastRoleError,
    RoleManagementError,
    UnknownPermissionError,
    UnknownRoleError,
)

__all__ = [
    "ConfigurationError",
    "LastRoleError",
    "RoleManagementError",
    "UnknownPermissionError",
    "UnknownRoleError",
]
