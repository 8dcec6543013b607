"""Token pair minting."""

from __future__ import annotations

from authcore.services._shared.ports.refresh_token_store import (
    RefreshTokenRecord,
    RefreshTokenStore,
)
from authcore.services._shared.ports.token_codec import TokenCodec, TokenKind
from authcore.services.auth.dto import TokenPairOut


class TokenIssuer:
    """
    Mint an access/refresh pair and record the refresh token.

    This is the only place refresh token records are created. Each call
    performs exactly one store write; a failing write propagates and no
    pair is returned.
    """

    def __init__(
        self,
        *,
        codec: TokenCodec,
        store: RefreshTokenStore,
    ) -> None:
        self.codec = codec
        self.store = store

    def issue(self, subject_id: str, identifier: str, role: str) -> TokenPairOut:
        """
        :param subject_id: Principal id, becomes ``sub``.
        :param identifier: Login identifier, becomes ``email``.
        :param role: Role, becomes ``role``.
        :returns: Freshly signed pair.
        :raises StoreUnavailableError: If the record cannot be saved.
        """
        claims = {"sub": subject_id, "email": identifier, "role": role}
        access = self.codec.sign(claims, TokenKind.ACCESS)
        refresh = self.codec.sign(claims, TokenKind.REFRESH)

        self.store.save(
            RefreshTokenRecord(
                id=refresh.jti,
                token_value=refresh.value,
                subject_id=subject_id,
                issued_at=refresh.issued_at,
                expires_at=refresh.expires_at,
            )
        )
        return TokenPairOut(access_token=access.value, refresh_token=refresh.value)
