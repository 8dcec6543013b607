# comments in English; reST docstrings
from __future__ import annotations

import hashlib
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime

import redis  # type: ignore[import-untyped]

from authcore.services._shared.errors import StoreUnavailableError
from authcore.services._shared.ports import RefreshTokenRecord, RefreshTokenStore


@contextmanager
def _store_errors() -> Iterator[None]:
    """Re-raise connection, timeout and protocol errors as :class:`StoreUnavailableError`."""
    try:
        yield
    except redis.RedisError as exc:
        raise StoreUnavailableError() from exc


def _s(value: bytes | str | None, default: str = "") -> str:
    if value is None:
        return default
    return value.decode() if isinstance(value, bytes | bytearray) else str(value)


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh token store.

    Layout
    ------
    ``rt:<sha256(token)>``
        Hash with the record fields. Expires with the record.
    ``rt:u:<subject_id>``
        Set of token digests owned by the subject.
    ``rt:exp``
        Sorted set of token digests scored by expiry, for the purge sweep.
    ``rt:sub``
        Hash from token digest to subject id. Outlives the record hash so the
        sweep can clean the subject index after Redis expired the record.

    Keys use a digest of the token so the signed value never appears in a
    key name. Revocation is a ``WATCH``/``MULTI``/``EXEC`` compare-and-set on
    the ``revoked`` field.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    # -------------------- helpers --------------------

    @staticmethod
    def _digest(token_value: str) -> str:
        return hashlib.sha256(token_value.encode()).hexdigest()

    @staticmethod
    def _k(digest: str) -> str:
        return f"rt:{digest}"

    @staticmethod
    def _ku(subject_id: str) -> str:
        return f"rt:u:{subject_id}"

    _KEXP = "rt:exp"
    _KSUB = "rt:sub"

    @staticmethod
    def _to_ts(dt: datetime) -> float:
        return dt.astimezone(UTC).timestamp()

    def _revoke_key(self, key: str) -> bool:
        # Retry until no concurrent writer touched the key between read and EXEC
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(key)
                    state = p.hget(key, "revoked")
                    if state is None or _s(state) == "1":
                        p.unwatch()
                        return False
                    p.multi()
                    p.hset(key, "revoked", "1")
                    p.execute()
                    return True
            except redis.WatchError:
                continue

    # -------------------- API ------------------------

    def save(self, record: RefreshTokenRecord) -> None:
        digest = self._digest(record.token_value)
        key = self._k(digest)
        with _store_errors(), self.r.pipeline(transaction=True) as pipe:
            pipe.hset(
                key,
                mapping={
                    "id": record.id,
                    "token": record.token_value,
                    "subject_id": record.subject_id,
                    "issued_at": str(self._to_ts(record.issued_at)),
                    "expires_at": str(self._to_ts(record.expires_at)),
                    "revoked": "1" if record.revoked else "0",
                },
            )
            pipe.expireat(key, int(self._to_ts(record.expires_at)) + 1)
            pipe.sadd(self._ku(record.subject_id), digest)
            pipe.zadd(self._KEXP, {digest: self._to_ts(record.expires_at)})
            pipe.hset(self._KSUB, digest, record.subject_id)
            pipe.execute()

    def find_by_token(self, token_value: str) -> RefreshTokenRecord | None:
        with _store_errors():
            h = self.r.hgetall(self._k(self._digest(token_value)))
        if not h:
            return None
        fields = {_s(k): _s(v) for k, v in h.items()}
        # Guard against digest collisions
        if fields.get("token") != token_value:
            return None
        return RefreshTokenRecord(
            id=fields["id"],
            token_value=fields["token"],
            subject_id=fields["subject_id"],
            issued_at=datetime.fromtimestamp(float(fields["issued_at"]), UTC),
            expires_at=datetime.fromtimestamp(float(fields["expires_at"]), UTC),
            revoked=fields.get("revoked", "0") == "1",
        )

    def revoke(self, token_value: str) -> bool:
        with _store_errors():
            return self._revoke_key(self._k(self._digest(token_value)))

    def revoke_all_for_subject(self, subject_id: str) -> int:
        key_u = self._ku(subject_id)
        with _store_errors():
            digests = [_s(m) for m in self.r.smembers(key_u)]
            count = 0
            stale: list[str] = []
            for digest in digests:
                key = self._k(digest)
                if not self.r.exists(key):
                    stale.append(digest)
                    continue
                if self._revoke_key(key):
                    count += 1
            if stale:
                # Hash expired on its own; drop it from the subject index
                self.r.srem(key_u, *stale)
            return count

    def purge_expired(self, now: datetime) -> int:
        with _store_errors():
            digests = [_s(m) for m in self.r.zrangebyscore(self._KEXP, "-inf", self._to_ts(now))]
            if not digests:
                return 0
            subjects = dict(zip(digests, (_s(s) for s in self.r.hmget(self._KSUB, digests))))
            with self.r.pipeline(transaction=True) as pipe:
                for digest, subject_id in subjects.items():
                    pipe.delete(self._k(digest))
                    if subject_id:
                        pipe.srem(self._ku(subject_id), digest)
                pipe.zrem(self._KEXP, *digests)
                pipe.hdel(self._KSUB, *digests)
                pipe.execute()
            return len(digests)
