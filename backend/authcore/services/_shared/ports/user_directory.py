from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import uuid4

from werkzeug.security import check_password_hash, generate_password_hash

from authcore.services._shared.errors import ConflictError

#: Plaintext hashed once to equalize timing for unknown identifiers
_DUMMY_SECRET = "authcore-timing-equalizer"


@dataclass(frozen=True, slots=True)
class UserAccount:
    """
    Directory view of an account.

    :ivar id: Subject identifier (uuid string).
    :ivar identifier: Normalized login identifier (email).
    :ivar role: ``"USER"`` or ``"ADMIN"``.
    :ivar active: Disabled accounts cannot log in or refresh.
    :ivar secret_hash: Stored password hash; never leaves the directory.
    """

    id: str
    identifier: str
    role: str
    active: bool
    secret_hash: str


@dataclass(frozen=True, slots=True)
class NewAccount:
    """Account creation request passed from registration to the directory."""

    identifier: str
    secret: str
    first_name: str
    last_name: str
    age: int | None = None
    avatar_url: str | None = None
    role: str = "USER"


class UserDirectory(Protocol):
    """
    Identity lookup and password verification.

    Infrastructure failures surface as
    :class:`~authcore.services._shared.errors.DirectoryUnavailableError`.
    """

    def find_by_identifier(self, identifier: str) -> UserAccount | None: ...

    def find_by_id(self, subject_id: str) -> UserAccount | None: ...

    def verify_secret(self, account: UserAccount | None, secret: str) -> bool:
        """
        Check ``secret`` against the account's hash.

        With ``account=None`` a dummy hash is checked and ``False`` returned,
        so unknown identifiers cost the same time as wrong passwords.
        """
        ...

    def create_account(self, new: NewAccount) -> UserAccount:
        """
        Create an active account.

        :raises ConflictError: If the identifier is taken.
        """
        ...


def normalize_identifier(identifier: str) -> str:
    return identifier.strip().lower()


class InMemoryUserDirectory(UserDirectory):
    """
    Dictionary-backed directory for unit tests and local runs.

    :param hash_method: Werkzeug hash method; tests pass a cheap one.
    :type hash_method: str | None
    """

    def __init__(self, *, hash_method: str | None = None) -> None:
        self._hash_kwargs = {"method": hash_method} if hash_method else {}
        self._by_id: dict[str, UserAccount] = {}
        self._lock = threading.Lock()
        self._dummy_hash = generate_password_hash(_DUMMY_SECRET, **self._hash_kwargs)

    def find_by_identifier(self, identifier: str) -> UserAccount | None:
        key = normalize_identifier(identifier)
        with self._lock:
            return next((a for a in self._by_id.values() if a.identifier == key), None)

    def find_by_id(self, subject_id: str) -> UserAccount | None:
        with self._lock:
            return self._by_id.get(subject_id)

    def verify_secret(self, account: UserAccount | None, secret: str) -> bool:
        if account is None:
            check_password_hash(self._dummy_hash, secret)
            return False
        return check_password_hash(account.secret_hash, secret)

    def create_account(self, new: NewAccount) -> UserAccount:
        identifier = normalize_identifier(new.identifier)
        secret_hash = generate_password_hash(new.secret, **self._hash_kwargs)
        with self._lock:
            if any(a.identifier == identifier for a in self._by_id.values()):
                raise ConflictError("User", "email already registered")
            account = UserAccount(
                id=str(uuid4()),
                identifier=identifier,
                role=new.role,
                active=True,
                secret_hash=secret_hash,
            )
            self._by_id[account.id] = account
            return account

    def set_active(self, subject_id: str, active: bool) -> None:
        """Enable or disable an account."""
        with self._lock:
            self._by_id[subject_id] = replace(self._by_id[subject_id], active=active)

    def remove(self, subject_id: str) -> None:
        """Delete an account outright."""
        with self._lock:
            self._by_id.pop(subject_id, None)
