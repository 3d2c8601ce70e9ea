"""Provider factory functions.

Singleton pattern for provider instances.
"""

from datetime import timedelta

from stockroom.core.config import Settings, settings
from stockroom.providers.identity.base import IdentityProvider
from stockroom.providers.identity.firebase_adapter import FirebaseIdentityProvider
from stockroom.providers.identity.local_adapter import LocalIdentityProvider

_identity_provider: IdentityProvider | None = None


def get_identity_provider(config: Settings | None = None) -> IdentityProvider:
    """Get or create the identity provider singleton.

    The local provider keeps its accounts in memory, so it must be a single
    shared instance for accounts to survive across requests.

    Args:
        config: Optional settings. Defaults to the application settings.

    Returns:
        IdentityProvider instance.

    Raises:
        ValueError: If the configured provider is unknown.
    """
    global _identity_provider

    if _identity_provider is None:
        if config is None:
            config = settings

        if config.identity_provider == "firebase":
            _identity_provider = FirebaseIdentityProvider(
                project_id=config.firebase_project_id
            )
        elif config.identity_provider == "local":
            _identity_provider = LocalIdentityProvider(
                secret=config.auth_secret.get_secret_value(),
                issuer=config.auth_issuer,
                token_ttl=timedelta(minutes=config.auth_token_ttl_minutes),
                bcrypt_rounds=config.bcrypt_rounds,
            )
        else:
            raise ValueError(f"Unknown identity provider: {config.identity_provider}")

    return _identity_provider


def set_identity_provider(provider: IdentityProvider) -> None:
    """Install a specific provider instance (used by tests)."""
    global _identity_provider
    _identity_provider = provider


def reset_providers() -> None:
    """Reset provider singletons.

    Used in tests to ensure isolation between test cases.
    """
    global _identity_provider
    _identity_provider = None
