"""Unit tests for :class:`CredentialVerifier`."""

from __future__ import annotations

from authcore.services._shared.ports import NewAccount
from authcore.services.auth.credentials import CredentialVerifier
from authcore.services.auth.dto import ACCOUNT_DISABLED, INVALID_CREDENTIALS, VerifiedSubject


def _account(directory, email="alice@example.com", role="USER"):
    return directory.create_account(
        NewAccount(identifier=email, secret="Secret123!", first_name="A", last_name="L", role=role)
    )


def test_verified_subject_carries_directory_identity(directory):
    account = _account(directory, role="ADMIN")

    result = CredentialVerifier(directory=directory).verify("alice@example.com", "Secret123!")

    assert result == VerifiedSubject(
        subject_id=account.id, identifier="alice@example.com", role="ADMIN", active=True
    )


def test_unknown_identifier_still_runs_a_hash_check(directory, monkeypatch):
    calls = []
    original = directory.verify_secret

    def _spy(account, secret):
        calls.append(account)
        return original(account, secret)

    monkeypatch.setattr(directory, "verify_secret", _spy)

    result = CredentialVerifier(directory=directory).verify("ghost@example.com", "whatever")

    assert result == INVALID_CREDENTIALS
    assert calls == [None]


def test_wrong_secret(directory):
    _account(directory)
    assert CredentialVerifier(directory=directory).verify("alice@example.com", "bad") == (
        INVALID_CREDENTIALS
    )


def test_inactive_account(directory):
    account = _account(directory)
    directory.set_active(account.id, False)

    verifier = CredentialVerifier(directory=directory)
    assert verifier.verify("alice@example.com", "Secret123!") == ACCOUNT_DISABLED
