# authcore/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: Login identifier.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param email: Login identifier; normalized by the directory.
    :param password: Raw password; hashed by the directory.
    :param first_name: Given name.
    :param last_name: Family name.
    :param age: Optional age in years.
    :param avatar_url: Optional avatar URL.
    """

    email: str
    password: str
    first_name: str
    last_name: str
    age: int | None = None
    avatar_url: str | None = None


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param refresh_token: Encoded refresh JWT to revoke.
    :type refresh_token: str
    """

    refresh_token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :param refresh_token: Encoded refresh JWT.
    :param token_type: Authorization scheme for the access token.
    """

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"


@dataclass(frozen=True, slots=True)
class RegisterOut:
    """Token pair plus the id of the account that was just created."""

    access_token: str
    refresh_token: str
    user_id: str
    token_type: str = "Bearer"


# --------------------------- Values ---------------------------------------- #


@dataclass(frozen=True, slots=True)
class ClaimSet:
    """
    Claims carried by a verified access token.

    :ivar sub: Subject id.
    :ivar email: Login identifier.
    :ivar role: Role at issuance time.
    :ivar issued_at: ``iat`` (UTC).
    :ivar expires_at: ``exp`` (UTC).
    """

    sub: str
    email: str
    role: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class VerifiedSubject:
    """Principal whose credentials were just checked."""

    subject_id: str
    identifier: str
    role: str
    active: bool


# --------------------------- Failures -------------------------------------- #


class AuthFailureKind(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_DISABLED = "account_disabled"
    DUPLICATE_IDENTIFIER = "duplicate_identifier"
    INVALID_OR_EXPIRED_TOKEN = "invalid_or_expired_token"


_FAILURE_MESSAGES: dict[AuthFailureKind, str] = {
    AuthFailureKind.INVALID_CREDENTIALS: "Invalid credentials",
    AuthFailureKind.ACCOUNT_DISABLED: "Account is disabled",
    AuthFailureKind.DUPLICATE_IDENTIFIER: "Identifier already registered",
    AuthFailureKind.INVALID_OR_EXPIRED_TOKEN: "Invalid or expired token",
}


@dataclass(frozen=True, slots=True)
class AuthFailure:
    """
    Typed domain failure returned (never raised) by the auth components.

    It carries its kind and nothing else, so two failures of the same kind
    are equal and reveal nothing about which check failed.
    """

    kind: AuthFailureKind

    @property
    def message(self) -> str:
        return _FAILURE_MESSAGES[self.kind]


INVALID_CREDENTIALS = AuthFailure(AuthFailureKind.INVALID_CREDENTIALS)
ACCOUNT_DISABLED = AuthFailure(AuthFailureKind.ACCOUNT_DISABLED)
DUPLICATE_IDENTIFIER = AuthFailure(AuthFailureKind.DUPLICATE_IDENTIFIER)
INVALID_OR_EXPIRED_TOKEN = AuthFailure(AuthFailureKind.INVALID_OR_EXPIRED_TOKEN)
