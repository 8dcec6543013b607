"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from authcore.api.deps import json_response, timing
from authcore.core.extensions import db, get_redis

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application, database and (when used) Redis health."""
    payload = {"status": "ok", "db": "ok"}
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("healthcheck.db_error")
        payload["db"] = "fail"

    if current_app.config.get("REFRESH_STORE_BACKEND") == "redis":
        payload["redis"] = "ok"
        try:
            get_redis().ping()
        except RedisError:
            current_app.logger.exception("healthcheck.redis_error")
            payload["redis"] = "fail"

    if "fail" in payload.values():
        payload["status"] = "degraded"
    payload["version"] = current_app.config.get("APP_VERSION", "dev")
    return json_response(payload, status=200 if payload["status"] == "ok" else 503)
