"""Unit tests for signing-secret loading and validation."""

from __future__ import annotations

from datetime import timedelta

import pytest

from authcore.core.config import TestingConfig
from authcore.core.secrets import (
    MIN_SECRET_LENGTH,
    AuthSettings,
    ConfigurationError,
    load_auth_settings,
    validate_secrets,
)
from authcore.factory import create_app

STRONG_ACCESS = "Qm9mZXJ0LXNpZ25pbmcta2V5LWFjY2Vzcy1hYmNk"
STRONG_REFRESH = "Tm90LXRoZS1zYW1lLWtleS1yZWZyZXNoLXdxeXo"


class TestValidateSecrets:
    def test_non_strict_only_requires_presence_and_distinctness(self):
        assert validate_secrets("a", "b", strict=False) == []
        assert validate_secrets(None, "b", strict=False) == [
            "JWT_ACCESS_SECRET is required but not set"
        ]
        assert validate_secrets("same", "same", strict=False) == [
            "JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must be different"
        ]

    def test_strict_accepts_strong_pair(self):
        assert validate_secrets(STRONG_ACCESS, STRONG_REFRESH, strict=True) == []

    def test_strict_rejects_short_secret(self):
        errors = validate_secrets("Zq9", STRONG_REFRESH, strict=True)
        assert errors == [
            f"JWT_ACCESS_SECRET must be at least {MIN_SECRET_LENGTH} characters (current: 3)"
        ]

    def test_strict_rejects_blocked_default_and_patterns(self):
        errors = validate_secrets(
            "your-access-secret-key-change-in-production", STRONG_REFRESH, strict=True
        )
        assert "JWT_ACCESS_SECRET contains a blocked default value" in errors
        assert any("unsafe pattern" in e for e in errors)

    def test_strict_reports_both_missing(self):
        errors = validate_secrets(None, "", strict=True)
        assert len(errors) == 2


class TestLoadAuthSettings:
    def test_builds_settings(self):
        settings = load_auth_settings(
            {
                "JWT_ACCESS_SECRET": "a",
                "JWT_REFRESH_SECRET": "b",
                "JWT_ACCESS_EXPIRES_SECONDS": 60,
                "JWT_REFRESH_EXPIRES_SECONDS": "120",
            }
        )
        assert settings.access_ttl == timedelta(seconds=60)
        assert settings.refresh_ttl == timedelta(seconds=120)
        assert settings.algorithm == "HS256"

    def test_errors_are_collected_into_one_exception(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_auth_settings({"APP_ENV": "production", "JWT_ACCESS_EXPIRES_SECONDS": 0})
        message = str(exc_info.value)
        assert "JWT_ACCESS_SECRET is required" in message
        assert "JWT_REFRESH_SECRET is required" in message
        assert "positive" in message

    def test_non_numeric_lifetime_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_auth_settings(
                {
                    "JWT_ACCESS_SECRET": "a",
                    "JWT_REFRESH_SECRET": "b",
                    "JWT_ACCESS_EXPIRES_SECONDS": "fifteen-minutes",
                    "JWT_REFRESH_EXPIRES_SECONDS": None,
                }
            )
        message = str(exc_info.value)
        assert "JWT_ACCESS_EXPIRES_SECONDS must be an integer" in message
        assert "JWT_REFRESH_EXPIRES_SECONDS must be an integer" in message

    def test_repr_hides_keys(self):
        settings = AuthSettings(access_secret=STRONG_ACCESS, refresh_secret=STRONG_REFRESH)
        assert STRONG_ACCESS not in repr(settings)
        assert STRONG_REFRESH not in repr(settings)


def test_app_refuses_to_start_without_secrets():
    class NoSecrets(TestingConfig):
        JWT_ACCESS_SECRET = None

    with pytest.raises(ConfigurationError):
        create_app(NoSecrets)


def test_app_refuses_weak_production_secrets():
    class WeakProduction(TestingConfig):
        APP_ENV = "production"

    with pytest.raises(ConfigurationError, match="unsafe pattern"):
        create_app(WeakProduction)
