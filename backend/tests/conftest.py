"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. Unit tests of the
auth components use in-memory ports and a controllable clock instead.
"""

from __future__ import annotations

import os
from datetime import timedelta

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from authcore.core.config import TestingConfig
from authcore.core.extensions import db as _db  # Flask-SQLAlchemy instance
from authcore.core.secrets import AuthSettings
from authcore.factory import create_app  # application factory under test
from authcore.infra.jwt import PyJWTTokenCodec
from authcore.services._shared.ports import InMemoryRefreshTokenStore, InMemoryUserDirectory
from authcore.services.auth import assemble
from tests.helpers.utils import ACCESS_SECRET, FAST_HASH, REFRESH_SECRET, MutableClock



class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Stores refresh tokens in SQL so the HTTP tests cover that adapter.
    - Avoids hitting external services (no Redis).
    """

    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing."""
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Notes
    -----
    The fixture mirrors the SQLAlchemy 2.0 pattern for transactional tests: it
    begins a top-level transaction, starts a SAVEPOINT per test, and reinstalls
    the SAVEPOINT whenever SQLAlchemy ends one. ``db.session`` is swapped for
    the scoped session so Units of Work use it too.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(bind=connection, future=True)
    scoped = scoped_session(SessionFactory)

    nested = connection.begin_nested()

    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            nonlocal nested
            nested = connection.begin_nested()

    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield


@pytest.fixture(autouse=True)
def _reset_rate_limits(app):
    """Start every test with empty rate-limit counters."""
    from authcore.core.extensions import limiter

    with app.app_context():
        limiter.reset()
    yield


@pytest.fixture()
def client(app, session):
    """Flask test client sharing the transactional session."""
    return app.test_client()


@pytest.fixture()
def runner(app, session):
    """Flask CLI runner sharing the transactional session."""
    return app.test_cli_runner()


# -- In-memory auth wiring ------------------------------------------------------
@pytest.fixture()
def auth_settings() -> AuthSettings:
    return AuthSettings(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        access_ttl=timedelta(seconds=900),
        refresh_ttl=timedelta(seconds=604800),
    )


@pytest.fixture()
def clock() -> MutableClock:
    """Clock used for record expiry; starts at the real current time."""
    return MutableClock()


@pytest.fixture()
def codec(auth_settings) -> PyJWTTokenCodec:
    return PyJWTTokenCodec(auth_settings)


@pytest.fixture()
def memory_store() -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore()


@pytest.fixture()
def directory() -> InMemoryUserDirectory:
    return InMemoryUserDirectory(hash_method=FAST_HASH)


@pytest.fixture()
def auth(codec, memory_store, directory, clock):
    """:class:`AuthService` over in-memory ports."""
    return assemble(codec=codec, store=memory_store, directory=directory, clock=clock)
