"""Logout, logout-everywhere and expired-record cleanup."""

from __future__ import annotations

from authcore.services._shared.base import BaseService, Clock
from authcore.services._shared.ports.refresh_token_store import RefreshTokenStore


class SessionRevocationManager(BaseService):
    """
    Revoke refresh tokens.

    ``logout`` and ``logout_everywhere`` are idempotent: nothing to revoke
    is success. Store failures still propagate.
    """

    def __init__(self, *, store: RefreshTokenStore, clock: Clock | None = None) -> None:
        super().__init__(clock=clock)
        self.store = store

    def logout(self, refresh_token: str) -> bool:
        """Revoke one token. :returns: Whether this call revoked it."""
        return self.store.revoke(refresh_token)

    def logout_everywhere(self, subject_id: str) -> int:
        """Revoke every token of a subject. :returns: Number revoked."""
        return self.store.revoke_all_for_subject(subject_id)

    def purge_expired(self) -> int:
        """
        Delete every record whose expiry has passed, revoked or not.

        Meant for periodic maintenance, not the request path.

        :returns: Number of records deleted.
        """
        return self.store.purge_expired(self.now_utc())
