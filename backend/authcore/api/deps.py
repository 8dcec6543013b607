"""Shared API helpers: responses, timing, bearer authentication."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from authcore.core.errors import Forbidden, Unauthorized
from authcore.services.auth import AuthService, get_auth_service
from authcore.services.auth.access import has_role
from authcore.services.auth.dto import ClaimSet

F = TypeVar("F", bound=Callable[..., Any])


def auth_service() -> AuthService:
    """Return the app's :class:`AuthService`."""
    return get_auth_service()


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""
    response = jsonify(payload)
    response.status_code = status
    return response


def no_content() -> Response:
    return Response(status=204)


def bearer_token() -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def current_claims() -> ClaimSet:
    """Claims stored by :func:`require_access` for the current request."""
    return g.claims


def require_access(*roles: str) -> Callable[[F], F]:
    """
    Validate the bearer access token, then check the role.

    Missing or invalid token → 401; valid token without one of ``roles``
    → 403. With no ``roles`` any authenticated caller passes.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            claims = auth_service().validate_access_token(bearer_token())
            if claims is None:
                raise Unauthorized("Missing or invalid access token")
            if not has_role(claims, *roles):
                raise Forbidden("Insufficient role")
            g.claims = claims
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
