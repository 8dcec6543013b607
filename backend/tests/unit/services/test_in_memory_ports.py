"""Unit tests for the in-memory port implementations."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from authcore.services._shared.errors import ConflictError
from authcore.services._shared.ports import NewAccount, RefreshTokenRecord


def _record(token: str, subject: str = "s1", **kwargs) -> RefreshTokenRecord:
    now = datetime.now(UTC)
    return RefreshTokenRecord(
        id=token,
        token_value=token,
        subject_id=subject,
        issued_at=now,
        expires_at=kwargs.pop("expires_at", now + timedelta(days=7)),
        **kwargs,
    )


class TestRefreshTokenRecord:
    def test_is_valid_boundaries(self):
        rec = _record("t")
        assert rec.is_valid(rec.issued_at)
        assert not rec.is_valid(rec.expires_at)
        assert not _record("r", revoked=True).is_valid(rec.issued_at)


class TestInMemoryRefreshTokenStore:
    def test_duplicate_token_value_rejected(self, memory_store):
        memory_store.save(_record("t"))
        with pytest.raises(ValueError):
            memory_store.save(_record("t"))

    def test_revoke_returns_transition(self, memory_store):
        memory_store.save(_record("t"))
        assert memory_store.revoke("t") is True
        assert memory_store.revoke("t") is False
        assert memory_store.revoke("unknown") is False

    def test_purge_drops_subject_index(self, memory_store):
        past = datetime.now(UTC) - timedelta(seconds=1)
        memory_store.save(_record("old", expires_at=past))

        assert memory_store.purge_expired(datetime.now(UTC)) == 1
        assert memory_store.records_for_subject("s1") == []
        assert memory_store.revoke_all_for_subject("s1") == 0


class TestInMemoryUserDirectory:
    def test_create_normalizes_and_hashes(self, directory):
        account = directory.create_account(
            NewAccount(identifier=" Bob@Example.COM ", secret="pw-123456", first_name="B", last_name="C")
        )

        assert account.identifier == "bob@example.com"
        assert account.secret_hash != "pw-123456"
        assert directory.find_by_identifier("BOB@example.com") == account
        assert directory.verify_secret(account, "pw-123456")
        assert not directory.verify_secret(None, "pw-123456")

    def test_duplicate_identifier(self, directory):
        new = NewAccount(identifier="d@example.com", secret="x", first_name="D", last_name="E")
        directory.create_account(new)
        with pytest.raises(ConflictError):
            directory.create_account(new)
