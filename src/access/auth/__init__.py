"""Role catalog and permission table for marketplace access control.

Resolution and queries live in src.access.auth.roles and
src.access.auth.permissions and are imported from there directly.
"""

from src.access.auth.enums import (
    LEGACY_FLAG_ROLES,
    VALID_PERMISSIONS,
    VALID_ROLES,
    Permission,
    Role,
)
from src.access.auth.permission_table import (
    DEFAULT_PERMISSION_TABLE,
    DEFAULT_ROLE_PERMISSIONS,
    PermissionTable,
)

__all__ = [
    "LEGACY_FLAG_ROLES",
    "VALID_PERMISSIONS",
    "VALID_ROLES",
    "Permission",
    "Role",
    "DEFAULT_PERMISSION_TABLE",
    "DEFAULT_ROLE_PERMISSIONS",
    "PermissionTable",
]
