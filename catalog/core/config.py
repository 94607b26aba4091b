"""Application configuration loaded from environment variables.

Settings for the database, store timeouts, token lifetimes, activation email
and rate limiting. Uses pydantic-settings for validation and .env file support.
"""

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Known insecure default password that must not be used in production
# Security: Runtime check in check_production_security() prevents use in production
_INSECURE_DEFAULT_PASSWORD = "catalog_dev_password"  # nosec B105


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
    database_name: str = "catalog"
    database_user: str = "catalog_user"
    database_password: str = _INSECURE_DEFAULT_PASSWORD
    # Full SQLAlchemy URL; takes precedence over the individual parts above
    database_url_override: str = ""

    # Upper bound on a single store operation, in seconds
    store_timeout_seconds: float = 3.0

    # API
    # 0.0.0.0 binds to all network interfaces (required for Docker containers)
    api_host: str = "0.0.0.0"  # nosec B104
    api_port: int = 4000
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    app_version: str = "1.0.0"

    # Tokens
    activation_token_ttl_hours: int = 72
    authentication_token_ttl_hours: int = 24

    # Email (activation tokens)
    email_from: str = "noreply@catalog.local"
    resend_api_key: SecretStr = SecretStr("")
    frontend_url: str = "http://localhost:3000"

    # Rate Limiting (Security)
    # Format: "count/period" (e.g., "10/minute", "100/hour")
    rate_limit_auth: str = "10/minute"
    rate_limit_enabled: bool = True  # Disable for testing

    # Graceful shutdown: how long to wait for background tasks
    shutdown_drain_seconds: float = 30.0

    @property
    def database_url(self) -> str:
        """Async database URL for SQLAlchemy."""
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+asyncpg://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @model_validator(mode="after")
    def check_production_security(self) -> "Settings":
        """Validate operational and production security requirements.

        Checks:
        - Store timeout must be positive (all environments)
        - Token lifetimes must be positive (all environments)
        - CORS must not use wildcard origin
        - Database password must not be the default in production
        """
        if self.store_timeout_seconds <= 0:
            msg = (
                "STORE_TIMEOUT_SECONDS must be positive. "
                f"Got: {self.store_timeout_seconds}"
            )
            raise ValueError(msg)

        if self.activation_token_ttl_hours <= 0 or self.authentication_token_ttl_hours <= 0:
            msg = "Token TTLs must be positive numbers of hours."
            raise ValueError(msg)

        if "*" in self.allowed_origins:
            msg = (
                "ALLOWED_ORIGINS must not contain '*' (wildcard). "
                "Specify the exact frontend origin instead."
            )
            raise ValueError(msg)

        if (
            self.environment == "production"
            and not self.database_url_override
            and self.database_password == _INSECURE_DEFAULT_PASSWORD
        ):
            msg = (
                "Cannot use default database password in production. "
                "Set DATABASE_PASSWORD environment variable to a secure value."
            )
            raise ValueError(msg)

        return self


settings = Settings()
