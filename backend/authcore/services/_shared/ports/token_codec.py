from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Protocol


class TokenKind(str, Enum):
    """Signing context of a token. Each kind has its own secret and TTL."""

    ACCESS = "access"
    REFRESH = "refresh"


class TokenVerificationError(Exception):
    """The token is malformed, forged, expired, or of the wrong kind."""


@dataclass(frozen=True, slots=True)
class SignedToken:
    """
    A freshly signed token and the metadata the codec embedded in it.

    :ivar value: Compact serialized token.
    :ivar jti: Unique token identifier claim.
    :ivar issued_at: ``iat`` claim (UTC).
    :ivar expires_at: ``exp`` claim (UTC).
    """

    value: str
    jti: str
    issued_at: datetime
    expires_at: datetime


class TokenCodec(Protocol):
    """
    Signs and verifies self-contained tokens.

    Implementations own ``iat``, ``exp``, ``jti`` and ``type``; callers only
    supply the claim set. Verification never performs I/O.
    """

    def sign(self, claims: Mapping[str, Any], kind: TokenKind) -> SignedToken:
        """Sign ``claims`` in the context of ``kind``."""
        ...

    def verify(self, token: str, kind: TokenKind) -> dict[str, Any]:
        """
        Return the decoded payload of ``token``.

        :raises TokenVerificationError: On any signature, structure, expiry
            or kind mismatch.
        """
        ...
