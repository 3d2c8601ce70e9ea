"""Application configuration loaded from environment variables.

Settings for the database, API, identity provider, pagination and rate
limiting. Uses pydantic-settings for validation and .env file support.
"""

from typing import Literal

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Known insecure default password that must not be used in production
# Security: Runtime check in check_production_security() prevents use in production
_INSECURE_DEFAULT_PASSWORD = "stockroom_dev_password"  # nosec B105

# Development-only signing secret for the local identity provider
_INSECURE_DEFAULT_AUTH_SECRET = "stockroom-dev-only-signing-secret-0000"  # nosec B105

# Minimum length for AUTH_SECRET outside development (256 bits = 32 bytes)
_MIN_AUTH_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = "stockroom"
    database_user: str = "stockroom_user"
    database_password: str = _INSECURE_DEFAULT_PASSWORD

    # API
    # 0.0.0.0 binds to all network interfaces (required for Docker containers)
    api_host: str = "0.0.0.0"  # nosec B104
    api_port: int = 8000

    # CORS (Security)
    # Default allows localhost:3000 for the dashboard frontend
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    # Identity provider
    # firebase: production accounts and ID tokens live in Firebase Auth
    # local: in-process accounts with HS256 tokens, for development and tests
    identity_provider: Literal["firebase", "local"] = "local"
    firebase_project_id: str = ""
    auth_secret: SecretStr = SecretStr(_INSECURE_DEFAULT_AUTH_SECRET)
    auth_issuer: str = "stockroom"
    auth_token_ttl_minutes: int = 60
    bcrypt_rounds: int = 12

    # First admin, ensured at startup when both are set (POST /users needs one)
    bootstrap_admin_email: str | None = None
    bootstrap_admin_password: SecretStr | None = None

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 100

    # Rate Limiting (Security)
    # Format: "count/period" (e.g., "10/minute", "100/hour")
    rate_limit_user_create: str = "10/minute"  # POST /users hits the identity provider
    rate_limit_enabled: bool = True  # Disable for testing

    @property
    def database_url(self) -> str:
        """Async database URL for SQLAlchemy."""
        return (
            f"postgresql+asyncpg://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @model_validator(mode="after")
    def check_production_security(self) -> "Settings":
        """Validate configuration invariants.

        Security: Prevents deployment with known insecure defaults.
        Checks:
        - Page size bounds are positive and the default fits under the ceiling
        - CORS must not use wildcard origin (incompatible with credentials)
        - Database password must not be the default in production
        - The local identity provider is not allowed in production
        - AUTH_SECRET must be >= 32 chars when the local provider signs tokens
          outside development
        """
        if self.max_page_size < 1 or self.default_page_size < 1:
            msg = (
                "DEFAULT_PAGE_SIZE and MAX_PAGE_SIZE must be positive. "
                f"Got: {self.default_page_size}, {self.max_page_size}"
            )
            raise ValueError(msg)
        if self.default_page_size > self.max_page_size:
            msg = (
                f"DEFAULT_PAGE_SIZE ({self.default_page_size}) cannot exceed "
                f"MAX_PAGE_SIZE ({self.max_page_size})."
            )
            raise ValueError(msg)

        if "*" in self.allowed_origins:
            msg = (
                "ALLOWED_ORIGINS must not contain '*' (wildcard). "
                "This application allows credentials, which are "
                "incompatible with wildcard CORS origins."
            )
            raise ValueError(msg)

        if self.environment == "production":
            if self.database_password == _INSECURE_DEFAULT_PASSWORD:
                msg = (
                    "Cannot use default database password in production. "
                    "Set DATABASE_PASSWORD environment variable to a secure value."
                )
                raise ValueError(msg)

            if self.identity_provider == "local":
                msg = (
                    "IDENTITY_PROVIDER=local is for development only. "
                    "Set IDENTITY_PROVIDER=firebase in production."
                )
                raise ValueError(msg)

        if self.environment != "development" and self.identity_provider == "local":
            secret_value = self.auth_secret.get_secret_value()
            if secret_value == _INSECURE_DEFAULT_AUTH_SECRET:
                msg = (
                    "AUTH_SECRET must be changed from the development default "
                    "outside development."
                )
                raise ValueError(msg)
            if len(secret_value) < _MIN_AUTH_SECRET_LENGTH:
                msg = (
                    f"AUTH_SECRET must be at least {_MIN_AUTH_SECRET_LENGTH} "
                    "characters when the local identity provider signs tokens."
                )
                raise ValueError(msg)

        return self


settings = Settings()
