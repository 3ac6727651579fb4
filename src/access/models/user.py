"""Session user record and its role representations.

A user record arrives from the authenticated-session provider in one of two
shapes: an explicit ``roles`` list (canonical) or per-role boolean flags
(legacy). UserRecord.representation exposes exactly one of them as a tagged
union so the resolver never has to guess which shape it is holding.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from src.access.auth.enums import Role, parse_role
from src.lib.logging_utils import log_expected_warning, sanitize_for_log

logger = logging.getLogger(__name__)

_FLAG_STRINGS: dict[str, bool] = {"true": True, "false": False, "1": True, "0": False}


@dataclass(frozen=True)
class CanonicalRoles:
    """Explicit role list attached to the user. May be empty."""

    roles: tuple[Role, ...] = ()


@dataclass(frozen=True)
class LegacyFlags:
    """Per-role boolean flags from records that predate the roles list."""

    is_buyer: bool = False
    is_provider: bool = False
    is_advertiser: bool = False
    is_admin: bool = False


UserRepresentation = CanonicalRoles | LegacyFlags


class UserRecord(BaseModel):
    """Marketplace user as supplied by the session provider.

    Only the fields that matter for access control are modelled; anything
    else in the raw record is ignored. Unusable identity, profile or flag
    values are dropped rather than failing the record, so a valid roles
    list is never lost to a bad unrelated field.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    # Identity - raw records use any of these id keys
    user_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("user_id", "userId", "idUsuario", "id", "_id"),
    )
    name: str | None = None
    email: str | None = None

    # Canonical representation; None means the record carries no roles list
    roles: tuple[Role, ...] | None = None

    # Role the user is currently acting as; must be one of their roles
    active_role: Role | None = Field(default=None, alias="activeRole")

    # Legacy representation
    is_buyer: bool = Field(default=False, alias="isBuyer")
    is_provider: bool = Field(default=False, alias="isProvider")
    is_advertiser: bool = Field(default=False, alias="isAdvertiser")
    is_admin: bool = Field(default=False, alias="isAdmin")

    @field_validator("user_id", mode="before")
    @classmethod
    def coerce_user_id(cls, v: Any) -> str | None:
        """Numeric ids become strings; anything else unusable is dropped."""
        if isinstance(v, str):
            return v
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        if v is not None:
            log_expected_warning(
                logger,
                "Ignoring unusable user id",
                extra={"id_type": type(v).__name__},
            )
        return None

    @field_validator("name", "email", mode="before")
    @classmethod
    def drop_non_string(cls, v: Any) -> str | None:
        """Profile fields the engine never reads must not fail the record."""
        return v if isinstance(v, str) else None

    @field_validator("active_role", mode="before")
    @classmethod
    def known_active_role(cls, v: Any) -> Role | None:
        return parse_role(v)

    @field_validator("roles", mode="before")
    @classmethod
    def keep_known_roles(cls, v: Any) -> tuple[Role, ...] | None:
        """Drop role strings outside the catalog; non-sequences count as absent."""
        if v is None:
            return None
        if isinstance(v, (set, frozenset)):
            # Unordered input: fall back to catalog order
            v = [role for role in Role if role in v]
        elif not isinstance(v, (list, tuple)):
            log_expected_warning(
                logger,
                "Ignoring non-list roles field",
                extra={"roles_type": type(v).__name__},
            )
            return None

        known = []
        for item in v:
            role = parse_role(item)
            if role is None:
                log_expected_warning(
                    logger,
                    "Dropping unknown role from user record",
                    extra={"role": sanitize_for_log(item, max_length=50)},
                )
                continue
            known.append(role)
        return tuple(known)

    @field_validator(
        "is_buyer", "is_provider", "is_advertiser", "is_admin", mode="before"
    )
    @classmethod
    def lenient_flag(cls, v: Any) -> bool:
        """Parse a legacy flag; nulls and unrecognized values mean not set."""
        if isinstance(v, bool):
            return v
        if isinstance(v, int) and v in (0, 1):
            return bool(v)
        if isinstance(v, str) and v.strip().lower() in _FLAG_STRINGS:
            return _FLAG_STRINGS[v.strip().lower()]
        if v is not None:
            log_expected_warning(
                logger,
                "Treating unrecognized legacy flag value as false",
                extra={"value": sanitize_for_log(v, max_length=50)},
            )
        return False

    @property
    def representation(self) -> UserRepresentation:
        """The single effective representation of this record.

        A roles list, even an empty one, always wins over the legacy flags.
        """
        if self.roles is not None:
            return CanonicalRoles(self.roles)
        return LegacyFlags(
            is_buyer=self.is_buyer,
            is_provider=self.is_provider,
            is_advertiser=self.is_advertiser,
            is_admin=self.is_admin,
        )

    @classmethod
    def from_session(cls, data: Mapping[str, Any] | None) -> UserRecord | None:
        """Parse a raw session record.

        Returns None for an absent record or one that is not a mapping at
        all, so callers treat it as a user with no roles.
        """
        if data is None:
            return None
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            log_expected_warning(
                logger,
                "Session user record failed validation, treating as no roles",
                extra={"error_count": e.error_count()},
            )
            return None
