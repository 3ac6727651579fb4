"""Role -> permission table for marketplace access control.

The table is pure configuration: it is validated once when constructed and
is read-only afterwards. Every role in the catalog has an entry; a role that
the source data leaves out grants no permissions.

For Developers:
    - DEFAULT_PERMISSION_TABLE is the built-in table
    - Use PermissionTable.from_json_file() to load an override
    - Construction raises UnknownRoleError / UnknownPermissionError for
      anything outside the catalog, so bad configuration fails at startup
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from src.access.auth.enums import (
    VALID_ROLES,
    Permission,
    Role,
    parse_permission,
    parse_role,
)
from src.access.errors import (
    ConfigurationError,
    UnknownPermissionError,
    UnknownRoleError,
)

logger = logging.getLogger(__name__)

_BUYER_PERMISSIONS = (
    Permission.SEARCH_OFFERS,
    Permission.HIRE_SERVICES,
    Permission.VIEW_TRAININGS,
    Permission.RATE_SERVICES,
)

_PROVIDER_PERMISSIONS = (
    Permission.CREATE_OFFERS,
    Permission.MANAGE_AGENDA,
    Permission.VIEW_REQUESTS,
    Permission.RESPOND_TO_REQUESTS,
)

_ADVERTISER_PERMISSIONS = (
    Permission.CREATE_TRAININGS,
    Permission.VIEW_REPORTS,
    Permission.MANAGE_ADS,
    Permission.VIEW_ANALYTICS,
)

DEFAULT_ROLE_PERMISSIONS: Mapping[Role, tuple[Permission, ...]] = MappingProxyType(
    {
        Role.BUYER: _BUYER_PERMISSIONS,
        Role.PROVIDER: _PROVIDER_PERMISSIONS,
        Role.ADVERTISER: _ADVERTISER_PERMISSIONS,
        # Admins also hold every other role's permissions
        Role.ADMIN: (
            Permission.MANAGE_USERS,
            Permission.VIEW_ALL_DATA,
            Permission.SYSTEM_SETTINGS,
            Permission.MODERATE_CONTENT,
            *_BUYER_PERMISSIONS,
            *_PROVIDER_PERMISSIONS,
            *_ADVERTISER_PERMISSIONS,
        ),
    }
)


class PermissionTable(Mapping[Role, tuple[Permission, ...]]):
    """Immutable mapping from every catalog role to its permission tuple.

    Args:
        role_permissions: Mapping keyed by Role (or role value string) to an
            iterable of Permission tokens. Duplicates within one role are kept.
        require_all_roles: When True, every catalog role must appear in
            role_permissions. When False, missing roles grant nothing.

    Raises:
        UnknownRoleError: A key is not a catalog role.
        UnknownPermissionError: A token is not a known permission.
        ConfigurationError: A role is missing while require_all_roles is set,
            or a role's permissions are not a list of tokens.
    """

    def __init__(
        self,
        role_permissions: Mapping[Role | str, Iterable[Permission | str]],
        require_all_roles: bool = False,
    ) -> None:
        entries: dict[Role, tuple[Permission, ...]] = {role: () for role in Role}
        seen: set[Role] = set()

        for raw_role, raw_permissions in role_permissions.items():
            role = parse_role(raw_role)
            if role is None:
                raise UnknownRoleError(str(raw_role), VALID_ROLES)

            if isinstance(raw_permissions, str) or not isinstance(
                raw_permissions, Iterable
            ):
                raise ConfigurationError(
                    f"Permissions for role '{role}' must be a list of tokens"
                )

            permissions = []
            for raw_permission in raw_permissions:
                permission = parse_permission(raw_permission)
                if permission is None:
                    raise UnknownPermissionError(role.value, str(raw_permission))
                permissions.append(permission)

            entries[role] = tuple(permissions)
            seen.add(role)

        if require_all_roles:
            missing = [role.value for role in Role if role not in seen]
            if missing:
                raise ConfigurationError(
                    f"Permission table is missing roles: {missing}"
                )

        self._entries = MappingProxyType(entries)

    def __getitem__(self, role: Role) -> tuple[Permission, ...]:
        return self._entries[role]

    def __iter__(self) -> Iterator[Role]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        counts = {role.value: len(perms) for role, perms in self._entries.items()}
        return f"PermissionTable({counts})"

    def permissions_for(self, role: Role | str) -> tuple[Permission, ...]:
        """Return the permissions granted to a role.

        Unknown roles grant nothing; this never raises.
        """
        parsed = parse_role(role)
        if parsed is None:
            return ()
        return self._entries[parsed]

    def to_dict(self) -> dict[str, list[str]]:
        """Serialize to the JSON configuration shape."""
        return {
            role.value: [perm.value for perm in perms]
            for role, perms in self._entries.items()
        }

    @classmethod
    def from_dict(
        cls, data: object, require_all_roles: bool = False
    ) -> PermissionTable:
        """Build a table from decoded configuration data.

        Args:
            data: Mapping of role value -> list of permission tokens
            require_all_roles: See PermissionTable

        Raises:
            ConfigurationError: If data is not a mapping or references
                anything outside the catalog
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                f"Permission table must be an object, got {type(data).__name__}"
            )
        return cls(data, require_all_roles=require_all_roles)

    @classmethod
    def from_json_file(
        cls, path: str | Path, require_all_roles: bool = True
    ) -> PermissionTable:
        """Load a table from a JSON file of the form {"role": ["perm", ...]}.

        Raises:
            ConfigurationError: File missing, unreadable or not valid JSON,
                or the content fails validation
        """
        file_path = Path(path)
        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Permission table file not found: {file_path}"
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read permission table file {file_path}: {e}"
            ) from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in permission table file {file_path}: {e}"
            ) from e

        table = cls.from_dict(data, require_all_roles=require_all_roles)
        logger.debug(
            "Permission table parsed",
            extra={"path": str(file_path), "roles": len(data)},
        )
        return table


DEFAULT_PERMISSION_TABLE = PermissionTable(
    DEFAULT_ROLE_PERMISSIONS, require_all_roles=True
)
