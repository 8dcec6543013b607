"""Refresh token repository: lookups plus set-based revocation and purge."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import delete, select, update

from authcore.models.refresh_token import RefreshToken
from authcore.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken`.

    The write helpers issue single set-based statements so that the
    revoked flag is flipped atomically by the database, never by a
    read-modify-write in Python.
    """

    model = RefreshToken

    def get_by_token(self, token: str) -> RefreshToken | None:
        """Fetch the record whose signed value equals ``token``."""
        stmt = select(RefreshToken).where(RefreshToken.token == token)
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def revoke_if_active(self, token: str) -> bool:
        """
        Conditionally flip ``is_revoked`` for ``token``.

        :returns: ``True`` only for the statement that performed the transition.
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.token == token, RefreshToken.is_revoked.is_(False))
            .values(is_revoked=True)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1

    def revoke_all_for_user(self, user_id: str) -> int:
        """Revoke every non-revoked record of ``user_id``. :returns: Rows changed."""
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.is_revoked.is_(False))
            .values(is_revoked=True)
            .execution_options(synchronize_session=False)
        )
        return int(self.session.execute(stmt).rowcount or 0)

    def delete_expired(self, now: datetime) -> int:
        """Delete records with ``expires_at <= now``, revoked or not."""
        stmt = (
            delete(RefreshToken)
            .where(RefreshToken.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        return int(self.session.execute(stmt).rowcount or 0)

