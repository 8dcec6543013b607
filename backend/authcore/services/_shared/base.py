from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from authcore.core import errors as api_errors
from authcore.services._shared.errors import (
    ConflictError,
    DirectoryUnavailableError,
    ServiceError,
    StoreUnavailableError,
)

#: Source of "now"; always returns a timezone-aware UTC datetime
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default :data:`Clock`."""
    return datetime.now(UTC)


class BaseService:
    """
    Base class for the auth components.

    Responsibilities
    ----------------
    * Hold the injected clock so expiry decisions are testable.
    * Centralize translation of service errors to API errors.

    Notes
    -----
    - Components receive their ports explicitly; none reaches for globals.
    - Components never catch infrastructure errors; those propagate.
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        """
        :param clock: Callable returning the current UTC time.
        :type clock: Clock | None
        """
        self._clock: Clock = clock or utc_now

    def now_utc(self) -> datetime:
        """Return the current time from the injected clock."""
        return self._clock()

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, ConflictError):
            return api_errors.Conflict(str(exc))

        if isinstance(exc, (StoreUnavailableError, DirectoryUnavailableError)):
            return api_errors.ServiceUnavailable()

        if isinstance(exc, ServiceError):
            return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")

        return exc
