"""Tests for application configuration.

Settings for database, API, identity provider, pagination and rate limits.
Tests cover defaults and the security validation.
"""

import pytest
from pydantic import ValidationError

from stockroom.core.config import (
    _INSECURE_DEFAULT_AUTH_SECRET,
    _INSECURE_DEFAULT_PASSWORD,
    Settings,
)

# Reusable test constants
_SECURE_DB_PASSWORD = "my-secure-production-password-123!"
_TEST_AUTH_SECRET = "a" * 64
_PRODUCTION = "production"


class TestDefaults:
    def test_pagination_defaults(self):
        s = Settings()
        assert s.default_page_size == 20
        assert s.max_page_size == 100

    def test_database_url_uses_asyncpg(self):
        s = Settings(
            database_user="u",
            database_password="p",
            database_host="db",
            database_port=5433,
            database_name="inv",
        )
        assert s.database_url == "postgresql+asyncpg://u:p@db:5433/inv"


class TestProductionSecurityValidation:
    """Tests for production security requirements."""

    def test_allows_default_password_in_development(self):
        """Default password is allowed in development environment."""
        s = Settings(environment="development", database_password=_INSECURE_DEFAULT_PASSWORD)
        assert s.database_password == _INSECURE_DEFAULT_PASSWORD

    def test_rejects_default_password_in_production(self):
        """Default password is rejected in production environment."""
        with pytest.raises(ValidationError, match="default database password"):
            Settings(
                environment=_PRODUCTION,
                database_password=_INSECURE_DEFAULT_PASSWORD,
                identity_provider="firebase",
            )

    def test_rejects_local_provider_in_production(self):
        with pytest.raises(ValidationError, match="IDENTITY_PROVIDER=local"):
            Settings(
                environment=_PRODUCTION,
                database_password=_SECURE_DB_PASSWORD,
                identity_provider="local",
                auth_secret=_TEST_AUTH_SECRET,
            )

    def test_allows_firebase_in_production(self):
        s = Settings(
            environment=_PRODUCTION,
            database_password=_SECURE_DB_PASSWORD,
            identity_provider="firebase",
        )
        assert s.identity_provider == "firebase"

    def test_rejects_default_auth_secret_outside_development(self):
        with pytest.raises(ValidationError, match="AUTH_SECRET"):
            Settings(environment="staging", auth_secret=_INSECURE_DEFAULT_AUTH_SECRET)

    def test_rejects_short_auth_secret_outside_development(self):
        with pytest.raises(ValidationError, match="at least 32"):
            Settings(environment="staging", auth_secret="short")

    def test_allows_long_auth_secret_in_staging(self):
        s = Settings(environment="staging", auth_secret=_TEST_AUTH_SECRET)
        assert s.auth_secret.get_secret_value() == _TEST_AUTH_SECRET

    def test_rejects_wildcard_cors(self):
        with pytest.raises(ValidationError, match="wildcard"):
            Settings(allowed_origins=["*"])


class TestPaginationValidation:
    def test_rejects_default_above_ceiling(self):
        with pytest.raises(ValidationError, match="cannot exceed"):
            Settings(default_page_size=200, max_page_size=100)

    def test_rejects_non_positive_sizes(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Settings(default_page_size=0)
