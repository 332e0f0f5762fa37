"""User repository for persistence and credential checks."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from socialapp.models.user import User
from socialapp.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Safe lookups and password verification. It NEVER issues tokens.
    """

    model = User

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by exact (trimmed) username."""
        stmt = select(User).where(User.username == username.strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email.lower().strip())
        return bool(self.session.execute(stmt).first())

    def exists_by_username(self, username: str) -> bool:
        stmt = select(User.id).where(User.username == username.strip())
        return bool(self.session.execute(stmt).first())

    # ---------------------------- Credentials ----------------------------

    def authenticate(self, username: str, password: str) -> User | None:
        """Authenticate a user by username and password.

        Unknown usernames and wrong passwords are indistinguishable to the
        caller: both return ``None``.

        :param username: Login handle.
        :type username: str
        :param password: Raw password to verify.
        :type password: str
        :returns: Authenticated user or ``None`` when credentials fail.
        :rtype: User | None
        """
        user = self.get_by_username(username)
        if not user or not user.verify_password(password):
            return None
        return user
