"""Access token validation and role checks."""

from __future__ import annotations

from datetime import UTC, datetime

from authcore.services._shared.ports.token_codec import (
    TokenCodec,
    TokenKind,
    TokenVerificationError,
)
from authcore.services.auth.dto import ClaimSet


class AccessValidator:
    """
    Verify access tokens. Pure computation: no store, no directory.

    Every failure, whatever its cause, yields ``None``.
    """

    def __init__(self, *, codec: TokenCodec) -> None:
        self.codec = codec

    def validate(self, token: object) -> ClaimSet | None:
        if not isinstance(token, str) or not token:
            return None
        try:
            payload = self.codec.verify(token, TokenKind.ACCESS)
        except TokenVerificationError:
            return None

        sub, email, role = payload.get("sub"), payload.get("email"), payload.get("role")
        iat, exp = payload.get("iat"), payload.get("exp")
        if not all(isinstance(v, str) for v in (sub, email, role)):
            return None
        if not all(isinstance(v, int) for v in (iat, exp)):
            return None
        return ClaimSet(
            sub=sub,
            email=email,
            role=role,
            issued_at=datetime.fromtimestamp(iat, UTC),
            expires_at=datetime.fromtimestamp(exp, UTC),
        )


def has_role(claims: ClaimSet | None, *roles: str) -> bool:
    """
    Return ``True`` when ``claims`` exist and carry one of ``roles``.

    With no ``roles`` any authenticated caller passes.
    """
    if claims is None:
        return False
    return not roles or claims.role in roles
