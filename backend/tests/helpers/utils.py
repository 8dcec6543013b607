"""Tiny helpers shared across test modules."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import UTC, datetime, timedelta

#: Cheap werkzeug hash method so tests do not pay for scrypt
FAST_HASH = "pbkdf2:sha256:1000"

ACCESS_SECRET = "unit-access-signing-key-0123456789abcdef"
REFRESH_SECRET = "unit-refresh-signing-key-fedcba9876543210"


@contextmanager
def not_raises(exception: type[BaseException]):
    """Context manager asserting that an exception is *not* raised.

    Parameters
    ----------
    exception: type[BaseException]
        Exception type that should not be raised within the context.
    """
    try:
        yield
    except exception as exc:  # pragma: no cover
        raise AssertionError(f"Did raise {exception}: {exc}") from exc


class MutableClock:
    """Callable clock that tests move forward explicitly."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime.now(UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)
