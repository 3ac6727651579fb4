"""Models for access control.

- UserRecord: session user as supplied by the authentication provider
- CanonicalRoles / LegacyFlags: the two role representations of a user
"""

from src.access.models.user import (
    CanonicalRoles,
    LegacyFlags,
    UserRecord,
    UserRepresentation,
)

__all__ = [
    "CanonicalRoles",
    "LegacyFlags",
    "UserRecord",
    "UserRepresentation",
]
