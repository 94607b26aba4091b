"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from catalog.core.config import Settings


def _settings(**overrides) -> Settings:
    fields = {"database_url_override": "", "environment": "development"}
    fields.update(overrides)
    return Settings(_env_file=None, **fields)


class TestDefaults:
    def test_store_timeout_defaults_to_three_seconds(self):
        assert _settings().store_timeout_seconds == 3.0

    def test_token_lifetimes(self):
        settings = _settings()
        assert settings.activation_token_ttl_hours == 72
        assert settings.authentication_token_ttl_hours == 24


class TestDatabaseUrl:
    def test_built_from_parts(self):
        settings = _settings(
            database_user="u",
            database_password="p",
            database_host="db",
            database_port=6543,
            database_name="shop",
        )
        assert settings.database_url == "postgresql+asyncpg://u:p@db:6543/shop"

    def test_override_takes_precedence(self):
        settings = _settings(database_url_override="sqlite+aiosqlite:///:memory:")
        assert settings.database_url == "sqlite+aiosqlite:///:memory:"


class TestProductionSecurity:
    def test_default_password_rejected_in_production(self):
        with pytest.raises(ValidationError, match="default database password"):
            _settings(environment="production", database_password="catalog_dev_password")

    def test_default_password_allowed_in_development(self):
        assert _settings(database_password="catalog_dev_password").environment == "development"

    def test_custom_password_allowed_in_production(self):
        settings = _settings(environment="production", database_password="s3cure-and-long")
        assert settings.environment == "production"

    def test_wildcard_origin_rejected(self):
        with pytest.raises(ValidationError, match="wildcard"):
            _settings(allowed_origins=["*"])

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_non_positive_store_timeout_rejected(self, timeout):
        with pytest.raises(ValidationError, match="STORE_TIMEOUT_SECONDS"):
            _settings(store_timeout_seconds=timeout)

    def test_non_positive_token_ttl_rejected(self):
        with pytest.raises(ValidationError, match="Token TTLs"):
            _settings(activation_token_ttl_hours=0)
