"""Signing-secret loading and validation.

The two JWT secrets are read exactly once, when the application is built,
into an immutable :class:`AuthSettings`. Anything wrong with them is a fatal
startup error (:class:`ConfigurationError`), never a runtime exception on
the request path.

Production deployments get additional strength checks: minimum length,
blocked default values, unsafe substrings, and distinct access/refresh keys.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Final

#: Minimum length required for production secrets
MIN_SECRET_LENGTH: Final[int] = 32

#: Substrings that betray placeholder values
UNSAFE_PATTERNS: Final[tuple[str, ...]] = (
    "secret",
    "password",
    "change",
    "default",
    "example",
    "your-",
    "replace",
    "changeme",
    "xxx",
    "123",
)

#: Values that must never reach production
BLOCKED_DEFAULTS: Final[frozenset[str]] = frozenset(
    {
        "access-secret-key",
        "refresh-secret-key",
        "your-access-secret-key-change-in-production",
        "your-refresh-secret-key-change-in-production",
    }
)


class ConfigurationError(RuntimeError):
    """Raised at startup when the signing configuration is unusable."""


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Immutable signing configuration shared by every auth component.

    :param access_secret: HMAC key for access tokens.
    :type access_secret: str
    :param refresh_secret: HMAC key for refresh tokens.
    :type refresh_secret: str
    :param algorithm: JWS algorithm name.
    :type algorithm: str
    :param access_ttl: Access token lifetime.
    :type access_ttl: timedelta
    :param refresh_ttl: Refresh token lifetime.
    :type refresh_ttl: timedelta
    """

    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    access_ttl: timedelta = timedelta(seconds=900)
    refresh_ttl: timedelta = timedelta(seconds=604800)

    def __repr__(self) -> str:
        # Never render key material (tracebacks, debug toolbars, logs).
        return (
            f"AuthSettings(algorithm={self.algorithm!r}, "
            f"access_ttl={self.access_ttl!r}, refresh_ttl={self.refresh_ttl!r})"
        )


def _check_secret(name: str, value: str | None) -> list[str]:
    """Return the strength violations of a single production secret."""
    if not value:
        return [f"{name} is required but not set"]

    errors: list[str] = []
    if len(value) < MIN_SECRET_LENGTH:
        errors.append(
            f"{name} must be at least {MIN_SECRET_LENGTH} characters (current: {len(value)})"
        )
    if value in BLOCKED_DEFAULTS:
        errors.append(f"{name} contains a blocked default value")

    lowered = value.lower()
    for pattern in UNSAFE_PATTERNS:
        if pattern in lowered:
            errors.append(f'{name} contains unsafe pattern: "{pattern}"')
            break
    return errors


def validate_secrets(
    access_secret: str | None,
    refresh_secret: str | None,
    *,
    strict: bool,
) -> list[str]:
    """
    Collect every problem with the configured signing secrets.

    :param access_secret: Configured access-token key.
    :param refresh_secret: Configured refresh-token key.
    :param strict: Apply production strength rules when ``True``.
    :returns: Human-readable violations (empty when the pair is usable).
    :rtype: list[str]
    """
    errors: list[str] = []
    if strict:
        errors.extend(_check_secret("JWT_ACCESS_SECRET", access_secret))
        errors.extend(_check_secret("JWT_REFRESH_SECRET", refresh_secret))
    else:
        if not access_secret:
            errors.append("JWT_ACCESS_SECRET is required but not set")
        if not refresh_secret:
            errors.append("JWT_REFRESH_SECRET is required but not set")

    if access_secret and refresh_secret and access_secret == refresh_secret:
        errors.append("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must be different")
    return errors


def _seconds(config: Mapping[str, Any], key: str, default: int, errors: list[str]) -> int:
    """Read a positive lifetime in seconds, recording a violation instead of raising."""
    raw = config.get(key, default)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        errors.append(f"{key} must be an integer number of seconds (got {raw!r})")
        return default
    if value <= 0:
        errors.append(f"{key} must be a positive number of seconds")
    return value


def load_auth_settings(config: Mapping[str, Any]) -> AuthSettings:
    """
    Build :class:`AuthSettings` from a Flask config mapping.

    :param config: Application configuration (``app.config``).
    :returns: Frozen settings for the auth components.
    :raises ConfigurationError: When a secret is missing, reused, or (in
        production) too weak, or when a TTL is not a positive integer.
    """
    strict = str(config.get("APP_ENV", "")).lower() == "production"
    access_secret = config.get("JWT_ACCESS_SECRET")
    refresh_secret = config.get("JWT_REFRESH_SECRET")

    errors = validate_secrets(access_secret, refresh_secret, strict=strict)

    access_seconds = _seconds(config, "JWT_ACCESS_EXPIRES_SECONDS", 900, errors)
    refresh_seconds = _seconds(config, "JWT_REFRESH_EXPIRES_SECONDS", 604800, errors)

    if errors:
        lines = ["Invalid token signing configuration:"]
        lines.extend(f"  - {err}" for err in errors)
        raise ConfigurationError("\n".join(lines))

    return AuthSettings(
        access_secret=str(access_secret),
        refresh_secret=str(refresh_secret),
        algorithm=str(config.get("JWT_ALGORITHM", "HS256")),
        access_ttl=timedelta(seconds=access_seconds),
        refresh_ttl=timedelta(seconds=refresh_seconds),
    )
