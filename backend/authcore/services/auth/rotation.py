"""Refresh token rotation."""

from __future__ import annotations

from authcore.services._shared.base import BaseService, Clock
from authcore.services._shared.ports.refresh_token_store import RefreshTokenStore
from authcore.services._shared.ports.token_codec import (
    TokenCodec,
    TokenKind,
    TokenVerificationError,
)
from authcore.services._shared.ports.user_directory import UserDirectory
from authcore.services.auth.dto import INVALID_OR_EXPIRED_TOKEN, AuthFailure, TokenPairOut
from authcore.services.auth.issuer import TokenIssuer


class RefreshRotator(BaseService):
    """
    Exchange a refresh token for a new pair, retiring the presented one.

    Every rejection (bad signature, unknown, revoked, expired, missing or
    disabled subject, lost race) is the same ``INVALID_OR_EXPIRED_TOKEN``.

    The presented record is revoked *before* the new pair is minted. If
    issuance then fails the subject is logged out rather than holding two
    valid tokens. The revoke is conditional, so of two concurrent rotations
    of one token only the one whose revoke flips the flag proceeds.
    """

    def __init__(
        self,
        *,
        codec: TokenCodec,
        store: RefreshTokenStore,
        directory: UserDirectory,
        issuer: TokenIssuer,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(clock=clock)
        self.codec = codec
        self.store = store
        self.directory = directory
        self.issuer = issuer

    def rotate(self, presented: str) -> TokenPairOut | AuthFailure:
        """
        :param presented: Refresh token sent by the client.
        :returns: New pair, or ``INVALID_OR_EXPIRED_TOKEN``.
        :raises StoreUnavailableError: On store failure (the presented token
            may or may not have been revoked).
        :raises DirectoryUnavailableError: On directory failure.
        """
        try:
            self.codec.verify(presented, TokenKind.REFRESH)
        except TokenVerificationError:
            return INVALID_OR_EXPIRED_TOKEN

        record = self.store.find_by_token(presented)
        if record is None or not record.is_valid(self.now_utc()):
            return INVALID_OR_EXPIRED_TOKEN

        account = self.directory.find_by_id(record.subject_id)
        if account is None or not account.active:
            return INVALID_OR_EXPIRED_TOKEN

        if not self.store.revoke(presented):
            return INVALID_OR_EXPIRED_TOKEN

        return self.issuer.issue(account.id, account.identifier, account.role)
