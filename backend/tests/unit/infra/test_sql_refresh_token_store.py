"""Unit tests for :class:`SQLRefreshTokenStore` against the transactional SQLite session."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from authcore.infra.sql import SQLRefreshTokenStore
from authcore.repositories import RefreshTokenRepository
from authcore.services._shared.errors import StoreUnavailableError
from authcore.services._shared.ports import RefreshTokenRecord


def _record(token: str, subject: str = "user-1", *, ttl: timedelta = timedelta(days=7), revoked=False):
    now = datetime.now(UTC).replace(microsecond=0)
    return RefreshTokenRecord(
        id=f"id-{token}",
        token_value=token,
        subject_id=subject,
        issued_at=now,
        expires_at=now + ttl,
        revoked=revoked,
    )


@pytest.fixture()
def store(session):
    return SQLRefreshTokenStore()


def test_save_and_find_returns_aware_datetimes(store):
    rec = _record("tok-a")
    store.save(rec)

    found = store.find_by_token("tok-a")

    assert found == rec
    assert found.expires_at.tzinfo is not None


def test_find_unknown(store):
    assert store.find_by_token("missing") is None


def test_revoke_is_conditional(store):
    store.save(_record("tok-a"))

    assert store.revoke("tok-a") is True
    assert store.revoke("tok-a") is False
    assert store.find_by_token("tok-a").revoked is True


def test_revoke_all_for_subject(store):
    store.save(_record("a1", "alice"))
    store.save(_record("a2", "alice"))
    store.save(_record("b1", "bob"))

    assert store.revoke_all_for_subject("alice") == 2
    assert store.revoke_all_for_subject("alice") == 0
    assert store.find_by_token("b1").revoked is False


def test_purge_expired(store):
    store.save(_record("old", ttl=timedelta(seconds=-1)))
    store.save(_record("old-revoked", ttl=timedelta(seconds=-1), revoked=True))
    store.save(_record("fresh"))

    assert store.purge_expired(datetime.now(UTC)) == 2
    assert store.find_by_token("old") is None
    assert store.find_by_token("fresh") is not None


def test_operational_errors_become_store_unavailable(store, monkeypatch):
    def _down(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(RefreshTokenRepository, "revoke_if_active", _down)

    with pytest.raises(StoreUnavailableError):
        store.revoke("tok-a")
