# comments in English; reST docstrings
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy.exc import OperationalError

from authcore.models.base import as_utc
from authcore.models.refresh_token import RefreshToken
from authcore.services._shared.errors import StoreUnavailableError
from authcore.services._shared.ports import RefreshTokenRecord, RefreshTokenStore
from authcore.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


@contextmanager
def _store_errors() -> Iterator[None]:
    """Re-raise connection and timeout errors as :class:`StoreUnavailableError`."""
    try:
        yield
    except OperationalError as exc:
        raise StoreUnavailableError() from exc


def _to_record(row: RefreshToken) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        id=row.id,
        token_value=row.token,
        subject_id=row.user_id,
        issued_at=as_utc(row.issued_at),
        expires_at=as_utc(row.expires_at),
        revoked=row.is_revoked,
    )


class SQLRefreshTokenStore(RefreshTokenStore):
    """
    Refresh token store on the ``refresh_tokens`` table.

    Every call runs in its own Unit of Work. Revocations are single
    conditional ``UPDATE`` statements, so the database serializes two
    concurrent revokes of one token and only one sees a changed row.
    """

    def save(self, record: RefreshTokenRecord) -> None:
        with _store_errors(), SQLAlchemyUnitOfWork() as uow:
            uow.refresh_tokens.add(
                RefreshToken(
                    id=record.id,
                    token=record.token_value,
                    user_id=record.subject_id,
                    issued_at=record.issued_at,
                    expires_at=record.expires_at,
                    is_revoked=record.revoked,
                )
            )

    def find_by_token(self, token_value: str) -> RefreshTokenRecord | None:
        with _store_errors(), SQLAlchemyReadOnlyUnitOfWork() as uow:
            row = uow.refresh_tokens.get_by_token(token_value)
            return _to_record(row) if row is not None else None

    def revoke(self, token_value: str) -> bool:
        with _store_errors(), SQLAlchemyUnitOfWork() as uow:
            return uow.refresh_tokens.revoke_if_active(token_value)

    def revoke_all_for_subject(self, subject_id: str) -> int:
        with _store_errors(), SQLAlchemyUnitOfWork() as uow:
            return uow.refresh_tokens.revoke_all_for_user(subject_id)

    def purge_expired(self, now: datetime) -> int:
        with _store_errors(), SQLAlchemyUnitOfWork() as uow:
            return uow.refresh_tokens.delete_expired(now)
