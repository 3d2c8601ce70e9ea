"""Identity provider error taxonomy.

Adapters translate SDK-specific exceptions into these so that services and
the authorization dependency never import a vendor SDK.
"""

__all__ = [
    "IdentityProviderError",
    "TokenExpiredError",
    "TokenVerificationError",
    "EmailAlreadyExistsError",
    "AccountAlreadyExistsError",
    "InvalidEmailError",
    "AccountNotFoundError",
]


class IdentityProviderError(Exception):
    """Base class for all identity provider errors."""


class TokenExpiredError(IdentityProviderError):
    """The token was well-formed but is past its expiry."""


class TokenVerificationError(IdentityProviderError):
    """The token is malformed, has a bad signature, or was revoked."""


class EmailAlreadyExistsError(IdentityProviderError):
    """An account with this email is already registered."""


class AccountAlreadyExistsError(IdentityProviderError):
    """An account with the requested uid is already registered."""


class InvalidEmailError(IdentityProviderError):
    """The provider rejected the email address as malformed."""


class AccountNotFoundError(IdentityProviderError):
    """No account exists for the given uid."""
