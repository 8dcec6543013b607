from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Server-side record of an issued refresh token.

    :ivar id: Record identifier, equal to the token's ``jti``.
    :ivar token_value: Signed refresh token; unique.
    :ivar subject_id: Owning principal.
    :ivar issued_at: Issuance time (UTC).
    :ivar expires_at: Issuance plus refresh TTL (UTC).
    :ivar revoked: One-way revocation flag.
    """

    id: str
    token_value: str
    subject_id: str
    issued_at: datetime
    expires_at: datetime
    revoked: bool = False

    def is_valid(self, now: datetime) -> bool:
        return not self.revoked and now < self.expires_at


class RefreshTokenStore(Protocol):
    """
    Durable storage for refresh token records.

    Infrastructure failures surface as
    :class:`~authcore.services._shared.errors.StoreUnavailableError`.
    """

    def save(self, record: RefreshTokenRecord) -> None:
        """Persist a brand-new record. Called once per issued pair."""
        ...

    def find_by_token(self, token_value: str) -> RefreshTokenRecord | None:
        """Point lookup by signed token value."""
        ...

    def revoke(self, token_value: str) -> bool:
        """
        Atomically revoke a record if it is not revoked yet.

        :returns: ``True`` only for the call that performed the transition;
            ``False`` when the record is missing or already revoked.
        """
        ...

    def revoke_all_for_subject(self, subject_id: str) -> int:
        """Revoke every non-revoked record of ``subject_id``. :returns: Count changed."""
        ...

    def purge_expired(self, now: datetime) -> int:
        """Delete records with ``expires_at <= now`` regardless of revocation."""
        ...


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    Process-local store used by unit tests and ``REFRESH_STORE_BACKEND=memory``.

    .. note::
       A single lock makes every operation atomic, including the
       conditional revoke.
    """

    def __init__(self) -> None:
        self._by_token: dict[str, RefreshTokenRecord] = {}
        self._by_subject: dict[str, set[str]] = {}
        self._lock = threading.Lock()

    def save(self, record: RefreshTokenRecord) -> None:
        with self._lock:
            if record.token_value in self._by_token:
                raise ValueError("Refresh token value already stored")
            self._by_token[record.token_value] = record
            self._by_subject.setdefault(record.subject_id, set()).add(record.token_value)

    def find_by_token(self, token_value: str) -> RefreshTokenRecord | None:
        with self._lock:
            return self._by_token.get(token_value)

    def revoke(self, token_value: str) -> bool:
        with self._lock:
            record = self._by_token.get(token_value)
            if record is None or record.revoked:
                return False
            self._by_token[token_value] = replace(record, revoked=True)
            return True

    def revoke_all_for_subject(self, subject_id: str) -> int:
        with self._lock:
            count = 0
            for token_value in self._by_subject.get(subject_id, ()):
                record = self._by_token[token_value]
                if not record.revoked:
                    self._by_token[token_value] = replace(record, revoked=True)
                    count += 1
            return count

    def purge_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [r for r in self._by_token.values() if r.expires_at <= now]
            for record in expired:
                del self._by_token[record.token_value]
                tokens = self._by_subject.get(record.subject_id)
                if tokens is not None:
                    tokens.discard(record.token_value)
                    if not tokens:
                        del self._by_subject[record.subject_id]
            return len(expired)

    def records_for_subject(self, subject_id: str) -> list[RefreshTokenRecord]:
        """Snapshot of a subject's records, for assertions in tests."""
        with self._lock:
            return [self._by_token[t] for t in self._by_subject.get(subject_id, ())]
