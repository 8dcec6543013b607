"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
# Per-client request limits; storage comes from ``RATELIMIT_STORAGE_URI``
limiter = Limiter(key_func=get_remote_address)
redis_client: redis.Redis | None = None


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, rate limits, and (optionally) Redis.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`authcore.models` package to ensure SQLAlchemy metadata is ready
        for migrations.

    Notes
    -----
    The Redis client is only created when ``REFRESH_STORE_BACKEND`` is
    ``"redis"``. Socket timeouts come from configuration so every store call
    is bounded; a timeout surfaces as :class:`redis.exceptions.TimeoutError`.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from authcore import models as _models  # noqa: F401

    migrate.init_app(app, db)
    limiter.init_app(app)

    global redis_client
    if app.config.get("REFRESH_STORE_BACKEND") != "redis":
        redis_client = None
        app.extensions.pop("redis_client", None)
        return

    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        raise RuntimeError("REFRESH_STORE_BACKEND=redis requires REDIS_URL to be set.")

    redis_client = redis.Redis.from_url(
        redis_url,
        socket_timeout=app.config.get("REDIS_SOCKET_TIMEOUT"),
        socket_connect_timeout=app.config.get("REDIS_SOCKET_CONNECT_TIMEOUT"),
    )
    try:
        redis_client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = redis_client


def get_redis() -> redis.Redis:
    """Return the initialized Redis client."""
    if redis_client is None:
        raise RuntimeError("Redis client is not initialized. Call init_app() first.")
    return redis_client
