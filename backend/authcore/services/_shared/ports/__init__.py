"""
authcore.services._shared.ports
===============================

Ports (hexagonal interfaces) the auth components depend on.

Modules
-------
- :mod:`token_codec`:
    :class:`~.TokenCodec` signs and verifies tokens per :class:`~.TokenKind`.
- :mod:`refresh_token_store`:
    :class:`~.RefreshTokenStore` and :class:`~.RefreshTokenRecord`.
- :mod:`user_directory`:
    :class:`~.UserDirectory` and :class:`~.UserAccount`.

Concrete adapters (PyJWT, SQLAlchemy, Redis) live under ``authcore.infra``;
the in-memory implementations here back unit tests and local runs.
"""

from __future__ import annotations

from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshTokenRecord,
    RefreshTokenStore,
)
from .token_codec import SignedToken, TokenCodec, TokenKind, TokenVerificationError
from .user_directory import (
    InMemoryUserDirectory,
    NewAccount,
    UserAccount,
    UserDirectory,
    normalize_identifier,
)

__all__ = [
    "TokenCodec",
    "TokenKind",
    "SignedToken",
    "TokenVerificationError",
    "RefreshTokenStore",
    "RefreshTokenRecord",
    "InMemoryRefreshTokenStore",
    "UserDirectory",
    "UserAccount",
    "NewAccount",
    "InMemoryUserDirectory",
    "normalize_identifier",
]
