"""
Service-level exceptions.

These exceptions are **framework-agnostic** and never depend on Flask or
HTTP. Adapters raise them from driver errors (``redis.RedisError``,
SQLAlchemy ``OperationalError``/``IntegrityError``) so the auth components
see one stable vocabulary.

Domain outcomes such as wrong credentials are *not* exceptions; they are
:class:`~authcore.services.auth.dto.AuthFailure` values. Only conflicts and
infrastructure failures travel as exceptions.

The translation to HTTP responses (RFC 7807) is handled by
``authcore/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    :param exc: Exception raised by SQLAlchemy during flush/commit.
    :type exc: IntegrityError
    :param constraint_name: Constraint name, e.g. ``"uq_users_email"``.
    :type constraint_name: str
    :returns: ``True`` when the driver message names the constraint.
    :rtype: bool
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    These are *not* HTTP errors; ``BaseService.translate_exceptions`` maps
    them to :class:`~authcore.core.errors.APIError`.
    """


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique identifier is already taken.

    :param entity: Entity name (e.g. ``"User"``).
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class StoreUnavailableError(ServiceError):
    """The refresh token store could not complete an operation.

    Raised on connection loss, timeouts and driver errors. Whether a write
    landed is unknown; callers that need certainty must re-read the store.
    """

    def __init__(self, message: str = "Refresh token store unavailable") -> None:
        super().__init__(message)


class DirectoryUnavailableError(ServiceError):
    """The user directory could not complete a lookup or write."""

    def __init__(self, message: str = "User directory unavailable") -> None:
        super().__init__(message)
