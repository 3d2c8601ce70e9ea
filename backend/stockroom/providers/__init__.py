"""Provider abstraction layer.

Exports:
    Factory functions for provider instances
"""

from stockroom.providers.factory import get_identity_provider, reset_providers

__all__ = [
    "get_identity_provider",
    "reset_providers",
]
