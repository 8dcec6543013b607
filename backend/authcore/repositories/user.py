"""User repository for persistence utilities."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from authcore.models.user import User
from authcore.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Lookups and inserts only. It NEVER handles tokens or sessions.
    """

    model = User

    @staticmethod
    def normalize_email(email: str) -> str:
        """Return the canonical (trimmed, lower-case) form of an email."""
        return email.strip().lower()

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == self.normalize_email(email))
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists."""
        stmt = select(User.id).where(User.email == self.normalize_email(email))
        return bool(self.session.execute(stmt).first())

    def set_active(self, user_id: str, active: bool) -> bool:
        """Enable or disable an account. :returns: ``True`` if the user exists."""
        user = self.get(user_id)
        if user is None:
            return False
        user.is_active = active
        self.flush()
        return True
