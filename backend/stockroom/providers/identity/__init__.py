"""Identity provider module.

Identity provider interface and adapters.
"""

from stockroom.providers.identity.base import IdentityProvider
from stockroom.providers.identity.errors import (
    AccountNotFoundError,
    EmailAlreadyExistsError,
    IdentityProviderError,
    InvalidEmailError,
    TokenExpiredError,
    TokenVerificationError,
)
from stockroom.providers.identity.firebase_adapter import FirebaseIdentityProvider
from stockroom.providers.identity.local_adapter import LocalIdentityProvider

__all__ = [
    # Base types
    "IdentityProvider",
    # Errors
    "IdentityProviderError",
    "TokenExpiredError",
    "TokenVerificationError",
    "EmailAlreadyExistsError",
    "InvalidEmailError",
    "AccountNotFoundError",
    # Adapters
    "FirebaseIdentityProvider",
    "LocalIdentityProvider",
]
