"""Tests for the RefreshToken model."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from authcore.models import RefreshToken
from authcore.models.base import as_utc
from tests.factories.user import RefreshTokenFactory


class TestRefreshToken:
    def test_defaults_and_timestamps(self, session):
        row = RefreshTokenFactory()
        session.refresh(row)
        assert row.is_revoked is False
        assert row.created_at is not None

    def test_token_is_unique(self, session):
        first = RefreshTokenFactory()
        now = datetime.now(UTC)
        session.add(
            RefreshToken(
                id="dup",
                token=first.token,
                user_id=first.user_id,
                issued_at=now,
                expires_at=now + timedelta(days=1),
            )
        )
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()

    def test_datetimes_round_trip_as_utc(self, session):
        issued = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        row = RefreshTokenFactory(issued_at=issued)
        session.expire(row)

        assert as_utc(row.issued_at) == issued
        assert as_utc(row.expires_at) == issued + timedelta(days=7)

    def test_repr_has_id(self):
        assert "abc" in repr(RefreshToken(id="abc"))


def test_as_utc_converts_aware_values():
    from datetime import timezone

    plus_two = timezone(timedelta(hours=2))
    value = datetime(2024, 1, 1, 12, 0, tzinfo=plus_two)
    assert as_utc(value) == datetime(2024, 1, 1, 10, 0, tzinfo=UTC)
    assert as_utc(datetime(2024, 1, 1, 10, 0)).tzinfo is UTC
