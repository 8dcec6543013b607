"""Unit tests for :class:`SQLUserDirectory`."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from authcore.infra.sql import SQLUserDirectory
from authcore.repositories import UserRepository
from authcore.services._shared.errors import ConflictError, DirectoryUnavailableError
from authcore.services._shared.ports import NewAccount
from authcore.uow import SQLAlchemyUnitOfWork
from tests.factories.user import UserFactory


@pytest.fixture()
def directory(session):
    return SQLUserDirectory()


def _new(email="new@example.com", **kwargs):
    return NewAccount(identifier=email, secret="Secret123!", first_name="N", last_name="U", **kwargs)


def test_find_by_identifier_maps_account(directory, session):
    user = UserFactory(email="found@example.com", role="ADMIN")
    session.commit()

    account = directory.find_by_identifier("FOUND@example.com")

    assert account.id == user.id
    assert account.identifier == "found@example.com"
    assert account.role == "ADMIN"
    assert account.active is True


def test_find_by_id(directory, session):
    user = UserFactory()
    session.commit()

    assert directory.find_by_id(user.id).identifier == user.email
    assert directory.find_by_id("missing") is None


def test_verify_secret(directory, session):
    UserFactory(email="pw@example.com", password="Correct-Horse-1")
    session.commit()
    account = directory.find_by_identifier("pw@example.com")

    assert directory.verify_secret(account, "Correct-Horse-1") is True
    assert directory.verify_secret(account, "wrong") is False
    assert directory.verify_secret(None, "Correct-Horse-1") is False


def test_create_account_persists_hashed_user(directory):
    account = directory.create_account(_new(age=30))

    stored = directory.find_by_identifier("new@example.com")
    assert stored == account
    assert account.role == "USER"
    assert "Secret123!" not in account.secret_hash
    assert directory.verify_secret(stored, "Secret123!")


def test_create_account_duplicate(directory):
    directory.create_account(_new())
    with pytest.raises(ConflictError):
        directory.create_account(_new(email="NEW@example.com"))


def test_unique_constraint_race_is_conflict(directory, monkeypatch):
    directory.create_account(_new())
    # Pretend the pre-check lost the race
    monkeypatch.setattr(
        "authcore.repositories.user.UserRepository.exists_by_email", lambda self, email: False
    )

    with pytest.raises(ConflictError) as exc_info:
        directory.create_account(_new())
    assert isinstance(exc_info.value.__cause__, IntegrityError)


def test_set_active(directory):
    account = directory.create_account(_new())

    assert directory.set_active(account.id, False) is True
    assert directory.find_by_id(account.id).active is False
    assert directory.set_active("missing", True) is False


def test_operational_errors_become_directory_unavailable(directory, monkeypatch):
    def _down(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(UserRepository, "get", _down)

    with pytest.raises(DirectoryUnavailableError):
        directory.find_by_id("anything")


def test_writes_go_through_the_unit_of_work(directory, monkeypatch):
    commits = []
    original = SQLAlchemyUnitOfWork.commit

    def _spy(self):
        commits.append(self)
        original(self)

    monkeypatch.setattr(SQLAlchemyUnitOfWork, "commit", _spy)
    directory.create_account(_new())

    assert len(commits) == 1
