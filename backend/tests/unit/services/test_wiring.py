"""Unit tests for the auth composition root."""

from __future__ import annotations

import pytest
from flask import Flask

from authcore.infra.sql import SQLRefreshTokenStore, SQLUserDirectory
from authcore.services._shared.ports import InMemoryRefreshTokenStore
from authcore.services.auth import AuthService, build_auth_service, get_auth_service
from authcore.services.auth.wiring import EXTENSION_KEY, _select_store


def _app(**config) -> Flask:
    app = Flask("wiring-test")
    app.config.update(config)
    return app


@pytest.mark.parametrize(
    ("backend", "expected"),
    [("sql", SQLRefreshTokenStore), ("memory", InMemoryRefreshTokenStore)],
)
def test_select_store(backend, expected):
    assert isinstance(_select_store(_app(REFRESH_STORE_BACKEND=backend)), expected)


def test_unknown_backend_is_rejected():
    with pytest.raises(ValueError, match="REFRESH_STORE_BACKEND"):
        _select_store(_app(REFRESH_STORE_BACKEND="cassandra"))


def test_build_registers_one_service(auth_settings):
    app = _app(REFRESH_STORE_BACKEND="memory")

    service = build_auth_service(app, auth_settings)

    assert isinstance(service, AuthService)
    assert app.extensions[EXTENSION_KEY] is service
    assert isinstance(service.directory, SQLUserDirectory)
    # Every component shares the same store instance
    assert service.issuer.store is service.rotator.store is service.revocations.store
    with app.app_context():
        assert get_auth_service() is service
