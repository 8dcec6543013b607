# comments in English; reST docstrings
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.security import check_password_hash, generate_password_hash

from authcore.models.user import User, UserRole
from authcore.services._shared.errors import (
    ConflictError,
    DirectoryUnavailableError,
    violates,
)
from authcore.services._shared.ports import NewAccount, UserAccount, UserDirectory
from authcore.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

#: Hashed lazily on first use; checked when the identifier is unknown
_DUMMY_HASH: str | None = None


def _dummy_hash() -> str:
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = generate_password_hash("authcore-timing-equalizer")
    return _DUMMY_HASH


@contextmanager
def _directory_errors() -> Iterator[None]:
    try:
        yield
    except OperationalError as exc:
        raise DirectoryUnavailableError() from exc


def _to_account(user: User) -> UserAccount:
    return UserAccount(
        id=user.id,
        identifier=user.email,
        role=user.role,
        active=user.is_active,
        secret_hash=user.password_hash,
    )


class SQLUserDirectory(UserDirectory):
    """
    User directory on the ``users`` table.

    Passwords are hashed by :class:`~authcore.models.user.User` (werkzeug)
    and checked here against the stored hash.
    """

    def find_by_identifier(self, identifier: str) -> UserAccount | None:
        with _directory_errors(), SQLAlchemyReadOnlyUnitOfWork() as uow:
            user = uow.users.get_by_email(identifier)
            return _to_account(user) if user is not None else None

    def find_by_id(self, subject_id: str) -> UserAccount | None:
        with _directory_errors(), SQLAlchemyReadOnlyUnitOfWork() as uow:
            user = uow.users.get(subject_id)
            return _to_account(user) if user is not None else None

    def verify_secret(self, account: UserAccount | None, secret: str) -> bool:
        if account is None:
            check_password_hash(_dummy_hash(), secret)
            return False
        return check_password_hash(account.secret_hash, secret)

    def create_account(self, new: NewAccount) -> UserAccount:
        """
        Insert an active user.

        :raises ConflictError: If the email is taken, including when a
            concurrent insert wins the unique constraint.
        """
        try:
            with _directory_errors(), SQLAlchemyUnitOfWork() as uow:
                if uow.users.exists_by_email(new.identifier):
                    raise ConflictError("User", "email already registered")
                user = User(
                    email=new.identifier,
                    first_name=new.first_name,
                    last_name=new.last_name,
                    age=new.age,
                    avatar_url=new.avatar_url,
                    role=UserRole(new.role).value,
                    is_active=True,
                )
                user.password = new.secret
                uow.users.add(user)
                account = _to_account(user)
        except IntegrityError as exc:
            if violates(exc, "uq_users_email") or violates(exc, "users.email"):
                raise ConflictError("User", "email already registered") from exc
            raise
        return account

    def set_active(self, subject_id: str, active: bool) -> bool:
        """Enable or disable an account. :returns: ``False`` if it does not exist."""
        with _directory_errors(), SQLAlchemyUnitOfWork() as uow:
            return uow.users.set_active(subject_id, active)
