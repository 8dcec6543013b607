"""Authentication endpoints delegating to :class:`AuthService`."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from flask import Blueprint, current_app, request

from authcore.api.deps import (
    auth_service,
    current_claims,
    json_response,
    no_content,
    require_access,
    timing,
)
from authcore.core.extensions import limiter
from authcore.models.user import UserRole
from authcore.schemas import (
    ClaimSetSchema,
    LoginSchema,
    RefreshSchema,
    RegisterResponseSchema,
    RegisterSchema,
    TokenPairSchema,
)
from authcore.services._shared.errors import ServiceError
from authcore.services.auth.dto import AuthFailure, LoginIn, LogoutIn, RefreshIn, RegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
token_schema = TokenPairSchema()
register_out_schema = RegisterResponseSchema()
claims_schema = ClaimSetSchema()

T = TypeVar("T")


def _limit(key: str) -> Callable[[], str]:
    """Read a route limit from config at request time."""
    return lambda: current_app.config[key]


def _run(operation: Callable[..., T], *args: Any) -> T:
    """Call a service operation, raising API errors for failures."""
    service = auth_service()
    try:
        result = operation(*args)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    if isinstance(result, AuthFailure):
        raise service.translate_failure(result)
    return result


def _body() -> dict[str, Any]:
    return request.get_json(silent=True) or {}


@bp.post("/register")
@limiter.limit(_limit("RATELIMIT_REGISTER"))
@timing
def register():
    """Create an account and return its first token pair."""
    data = register_schema.load(_body())
    out = _run(auth_service().register, RegisterIn(**data))
    return json_response({"data": register_out_schema.dump(out)}, status=201)


@bp.post("/login")
@limiter.limit(_limit("RATELIMIT_LOGIN"))
@timing
def login():
    """Authenticate credentials and issue a token pair."""
    data = login_schema.load(_body())
    pair = _run(auth_service().login, LoginIn(email=data["email"], password=data["password"]))
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/refresh")
@limiter.limit(_limit("RATELIMIT_REFRESH"))
@timing
def refresh():
    """Exchange a refresh token for a new pair."""
    data = refresh_schema.load(_body())
    pair = _run(auth_service().refresh, RefreshIn(refresh_token=data["refresh_token"]))
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/logout")
@require_access()
@timing
def logout():
    """Revoke one refresh token. Always 204, even if it was unknown."""
    data = refresh_schema.load(_body())
    _run(auth_service().logout, LogoutIn(refresh_token=data["refresh_token"]))
    return no_content()


@bp.post("/logout-all")
@require_access()
@timing
def logout_all():
    """Revoke every refresh token of the caller."""
    _run(auth_service().logout_everywhere, current_claims().sub)
    return no_content()


@bp.get("/me")
@require_access()
@timing
def me():
    """Return the claims of the caller's access token."""
    return json_response({"data": claims_schema.dump(current_claims())})


@bp.post("/sessions/purge")
@require_access(UserRole.ADMIN.value)
@timing
def purge_sessions():
    """Delete expired refresh token records (admin only)."""
    purged = _run(auth_service().purge_expired)
    return json_response({"data": {"purged": purged}})
