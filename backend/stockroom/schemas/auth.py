"""Authentication schemas."""

from dataclasses import dataclass, field
from enum import StrEnum


class Role(StrEnum):
    """Role tags carried in identity-provider claims and on user records."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


@dataclass(frozen=True)
class Principal:
    """Authenticated identity attached to a request.

    Built per request from a verified bearer token and discarded when the
    request ends. Never persisted.

    Attributes:
        uid: Subject id issued by the identity provider.
        roles: Role tags claimed by the token.
        token: Raw bearer token the principal was resolved from.
    """

    uid: str
    roles: frozenset[str] = field(default_factory=frozenset)
    token: str = field(default="", repr=False)
