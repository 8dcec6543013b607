"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Refresh-token persistence backends understood by the composition root
REFRESH_STORE_BACKENDS: Final[frozenset[str]] = frozenset({"sql", "redis", "memory"})


# Load .env during development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_float(name: str, default: float) -> float:
    """Parse a float from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return float(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    JWT_ACCESS_SECRET: str | None
        HMAC key for access tokens. Required; startup fails without it.
    JWT_REFRESH_SECRET: str | None
        HMAC key for refresh tokens. Required and distinct from the access key.
    JWT_ALGORITHM: str
        Signing algorithm passed to PyJWT (``HS256`` by default).
    JWT_ACCESS_EXPIRES_SECONDS: str | int
        Access token lifetime (900 seconds).
    JWT_REFRESH_EXPIRES_SECONDS: str | int
        Refresh token lifetime (604800 seconds, 7 days).
    REFRESH_STORE_BACKEND: str
        ``"sql"`` (default), ``"redis"`` or ``"memory"``.
    REDIS_URL: str | None
        Connection URL used when the Redis backend is selected.
    REDIS_SOCKET_TIMEOUT: float
        Per-command timeout in seconds for the Redis client.
    REDIS_SOCKET_CONNECT_TIMEOUT: float
        Connect timeout in seconds for the Redis client.
    RATELIMIT_STORAGE_URI: str
        Flask-Limiter counter storage. Defaults to ``REDIS_URL`` when set,
        otherwise process memory.
    RATELIMIT_DEFAULT: str
        Limit applied to routes without their own (200 per minute).
    RATELIMIT_REGISTER / RATELIMIT_LOGIN / RATELIMIT_REFRESH: str
        Per-route limits: 10 per 10 minutes, 10 per 5 minutes, 30 per minute.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    SQLALCHEMY_ENGINE_OPTIONS: dict
        Engine options; ``pool_timeout`` bounds waits for a connection.
    SQLALCHEMY_TRACK_MODIFICATIONS: bool
        Disabled to avoid extra overhead from the event system.
    SQLALCHEMY_ECHO: bool
        When ``True`` SQLAlchemy logs SQL statements for debugging.
    PROPAGATE_EXCEPTIONS: bool
        Controls Flask error propagation.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    DEBUG: bool
        Toggles Flask debug mode.
    TESTING: bool
        Enables Flask testing mode when ``True``.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes. The JWT secrets are copied into an
    immutable :class:`authcore.core.secrets.AuthSettings` at startup; the
    Flask config is not consulted again afterwards.
    """

    APP_ENV = "development"
    API_BASE_PREFIX = "/api"

    # Token signing
    JWT_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    # Parsed and validated by authcore.core.secrets at startup
    JWT_ACCESS_EXPIRES_SECONDS = os.getenv("JWT_ACCESS_EXPIRES_SECONDS", "900")
    JWT_REFRESH_EXPIRES_SECONDS = os.getenv("JWT_REFRESH_EXPIRES_SECONDS", "604800")

    # Refresh token persistence
    REFRESH_STORE_BACKEND = os.getenv("REFRESH_STORE_BACKEND", "sql").strip().lower()
    REDIS_URL = os.getenv("REDIS_URL")
    REDIS_SOCKET_TIMEOUT = env_float("REDIS_SOCKET_TIMEOUT", 2.0)
    REDIS_SOCKET_CONNECT_TIMEOUT = env_float("REDIS_SOCKET_CONNECT_TIMEOUT", 2.0)

    # Rate limiting (Flask-Limiter), keyed by client address
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI") or REDIS_URL or "memory://"
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "200 per minute")
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_REGISTER = os.getenv("RATELIMIT_REGISTER", "10 per 10 minutes")
    RATELIMIT_LOGIN = os.getenv("RATELIMIT_LOGIN", "10 per 5 minutes")
    RATELIMIT_REFRESH = os.getenv("RATELIMIT_REFRESH", "30 per minute")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_ENGINE_OPTIONS: dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_timeout": env_float("DB_POOL_TIMEOUT", 5.0),
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    PROPAGATE_EXCEPTIONS = False

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default. Secrets are still mandatory, but the
    production-strength checks are skipped.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Ships fixed, distinct signing secrets so the suite never depends on env.
    """

    APP_ENV = "testing"
    TESTING = True
    DEBUG = False
    JWT_ACCESS_SECRET = "test-access-signing-key-0123456789abcdef"
    JWT_REFRESH_SECRET = "test-refresh-signing-key-fedcba9876543210"
    REFRESH_STORE_BACKEND = "sql"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    RATELIMIT_STORAGE_URI = "memory://"
    SQLALCHEMY_ENGINE_OPTIONS: dict[str, Any] = {}
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled. Signing secrets are validated for
    strength at startup (see :func:`authcore.core.secrets.validate_secrets`).
    """

    APP_ENV = "production"
    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
