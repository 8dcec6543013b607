"""
Composition root for the auth lifecycle.

Everything is built once per application, with explicit references to the
two ports and the immutable signing settings. No container, no registry.
"""

from __future__ import annotations

from flask import Flask, current_app

from authcore.core.config import REFRESH_STORE_BACKENDS
from authcore.core.secrets import AuthSettings, load_auth_settings
from authcore.services._shared.base import Clock
from authcore.services._shared.ports import (
    InMemoryRefreshTokenStore,
    RefreshTokenStore,
    TokenCodec,
    UserDirectory,
)
from authcore.services.auth.access import AccessValidator
from authcore.services.auth.credentials import CredentialVerifier
from authcore.services.auth.issuer import TokenIssuer
from authcore.services.auth.revocation import SessionRevocationManager
from authcore.services.auth.rotation import RefreshRotator
from authcore.services.auth.service import AuthService

EXTENSION_KEY = "auth_service"


def assemble(
    *,
    codec: TokenCodec,
    store: RefreshTokenStore,
    directory: UserDirectory,
    clock: Clock | None = None,
) -> AuthService:
    """
    Wire the lifecycle components around the given ports.

    :param codec: Token codec holding both signing contexts.
    :param store: Refresh token store.
    :param directory: User directory.
    :param clock: Clock for record expiry checks and purge.
    :returns: Ready-to-use facade.
    """
    issuer = TokenIssuer(codec=codec, store=store)
    return AuthService(
        directory=directory,
        verifier=CredentialVerifier(directory=directory),
        issuer=issuer,
        rotator=RefreshRotator(
            codec=codec, store=store, directory=directory, issuer=issuer, clock=clock
        ),
        revocations=SessionRevocationManager(store=store, clock=clock),
        validator=AccessValidator(codec=codec),
    )


def _select_store(app: Flask) -> RefreshTokenStore:
    backend = app.config.get("REFRESH_STORE_BACKEND", "sql")
    if backend not in REFRESH_STORE_BACKENDS:
        raise ValueError(f"Unknown REFRESH_STORE_BACKEND: {backend!r}")
    if backend == "sql":
        from authcore.infra.sql import SQLRefreshTokenStore

        return SQLRefreshTokenStore()
    if backend == "redis":
        from authcore.core.extensions import get_redis
        from authcore.infra.redis import RedisRefreshTokenStore

        return RedisRefreshTokenStore(get_redis())
    return InMemoryRefreshTokenStore()


def build_auth_service(app: Flask, settings: AuthSettings | None = None) -> AuthService:
    """
    Build the application's :class:`AuthService` and register it on ``app``.

    :param app: Flask app with configuration and extensions initialized.
    :param settings: Preloaded signing settings; loaded from config if omitted.
    :raises ConfigurationError: If the signing settings are unusable.
    """
    from authcore.infra.jwt import PyJWTTokenCodec
    from authcore.infra.sql import SQLUserDirectory

    settings = settings or load_auth_settings(app.config)
    service = assemble(
        codec=PyJWTTokenCodec(settings),
        store=_select_store(app),
        directory=SQLUserDirectory(),
    )
    app.extensions[EXTENSION_KEY] = service
    return service


def get_auth_service() -> AuthService:
    """Return the service registered on the current app."""
    return current_app.extensions[EXTENSION_KEY]
