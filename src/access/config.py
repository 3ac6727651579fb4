"""
Access Control Configuration
============================

Parses and validates configuration from environment variables and builds
the process-wide permission table.

For On-Call Engineers:
    Environment variables:
    - PERMISSION_TABLE_PATH: Optional JSON file overriding the built-in
      role -> permissions table
    - PERMISSION_TABLE_STRICT: "true" (default) requires every role in the
      file; "false" lets missing roles grant nothing

    If the process refuses to start with a ConfigurationError:
    1. Check the file exists and is valid JSON
    2. Look for role or permission names outside the catalog
       (the error message lists the valid roles)

For Developers:
    - Use get_config() to read settings
    - Use get_permission_table() for the shared table; it is built once
    - Call get_permission_table.cache_clear() in tests that change env vars
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from src.access.auth.permission_table import DEFAULT_PERMISSION_TABLE, PermissionTable
from src.access.errors import ConfigurationError

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class AccessConfig:
    """
    Configuration for access control.

    All fields are validated on instantiation.
    """

    permission_table_path: str | None = None
    strict_permission_table: bool = True

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """
        Validate all configuration values.

        Raises:
            ConfigurationError: If any validation fails
        """
        if self.permission_table_path is not None:
            if not self.permission_table_path.strip():
                raise ConfigurationError("PERMISSION_TABLE_PATH must not be blank")
            if not self.permission_table_path.endswith(".json"):
                raise ConfigurationError(
                    f"PERMISSION_TABLE_PATH must be a .json file: "
                    f"{self.permission_table_path}"
                )


def parse_bool(value: str, name: str) -> bool:
    """
    Parse a boolean environment value.

    Raises:
        ConfigurationError: If the value is not a recognized boolean

    Example:
        >>> parse_bool("False", "PERMISSION_TABLE_STRICT")
        False
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be true or false, got '{value}'")


def get_config() -> AccessConfig:
    """
    Load and validate configuration from environment variables.

    Returns:
        AccessConfig with all settings

    Raises:
        ConfigurationError: If vars are invalid
    """
    path = os.environ.get("PERMISSION_TABLE_PATH") or None
    strict = parse_bool(
        os.environ.get("PERMISSION_TABLE_STRICT", "true"), "PERMISSION_TABLE_STRICT"
    )

    return AccessConfig(permission_table_path=path, strict_permission_table=strict)


def load_permission_table(config: AccessConfig) -> PermissionTable:
    """
    Build the permission table described by a configuration.

    Raises:
        ConfigurationError: If the override file is missing or invalid
    """
    if config.permission_table_path is None:
        logger.info(
            "Using built-in permission table",
            extra={"roles": len(DEFAULT_PERMISSION_TABLE)},
        )
        return DEFAULT_PERMISSION_TABLE

    table = PermissionTable.from_json_file(
        config.permission_table_path,
        require_all_roles=config.strict_permission_table,
    )
    logger.info(
        "Permission table loaded",
        extra={
            "path": config.permission_table_path,
            "strict": config.strict_permission_table,
        },
    )
    return table


@lru_cache(maxsize=1)
def get_permission_table() -> PermissionTable:
    """
    Return the process-wide permission table, loading it on first use.

    Raises:
        ConfigurationError: If configuration is invalid. Nothing is cached
            in that case, so the next call fails the same way.
    """
    return load_permission_table(get_config())
