# comments in English; reST docstrings
from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC
from typing import Any
from uuid import uuid4

import jwt

from authcore.core.secrets import AuthSettings
from authcore.services._shared.base import Clock, utc_now
from authcore.services._shared.ports.token_codec import (
    SignedToken,
    TokenCodec,
    TokenKind,
    TokenVerificationError,
)

#: Claims every token must carry to be accepted
REQUIRED_CLAIMS = ("sub", "iat", "exp", "jti", "type")


class PyJWTTokenCodec(TokenCodec):
    """
    HMAC-signed JWTs via PyJWT, one secret and TTL per :class:`TokenKind`.

    Each token embeds ``jti`` (random, unique) and ``type`` (its kind).
    Verification checks the signature with the kind's own secret *and* the
    ``type`` claim, so an access token never passes as a refresh token or
    the reverse.

    :param settings: Immutable signing configuration.
    :type settings: AuthSettings
    :param clock: Source of ``iat``; expiry checks use PyJWT's wall clock.
    :type clock: Clock | None
    """

    def __init__(self, settings: AuthSettings, *, clock: Clock | None = None) -> None:
        self._settings = settings
        self._clock: Clock = clock or utc_now
        self._contexts = {
            TokenKind.ACCESS: (settings.access_secret, settings.access_ttl),
            TokenKind.REFRESH: (settings.refresh_secret, settings.refresh_ttl),
        }

    def sign(self, claims: Mapping[str, Any], kind: TokenKind) -> SignedToken:
        secret, ttl = self._contexts[kind]
        # JWT timestamps are whole seconds
        issued_at = self._clock().astimezone(UTC).replace(microsecond=0)
        expires_at = issued_at + ttl
        jti = uuid4().hex

        payload = dict(claims)
        payload.update(
            {
                "iat": int(issued_at.timestamp()),
                "exp": int(expires_at.timestamp()),
                "jti": jti,
                "type": kind.value,
            }
        )
        value = jwt.encode(payload, secret, algorithm=self._settings.algorithm)
        return SignedToken(value=value, jti=jti, issued_at=issued_at, expires_at=expires_at)

    def verify(self, token: str, kind: TokenKind) -> dict[str, Any]:
        secret, _ = self._contexts[kind]
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self._settings.algorithm],
                options={"require": list(REQUIRED_CLAIMS)},
            )
        except jwt.InvalidTokenError as exc:
            raise TokenVerificationError(type(exc).__name__) from exc

        if payload.get("type") != kind.value:
            raise TokenVerificationError("Wrong token type")
        return payload

