"""Unit of Work contract shared by the services and the SQL refresh store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from socialapp.repositories import RefreshTokenRepository, UserRepository


class UnitOfWork(ABC):
    """
    One transaction around one use-case step.

    Leaving the ``with`` block cleanly commits. An exception rolls back and
    propagates, as does a failing commit.

    Every refresh store operation opens its own unit, so a row deleted by an
    expiry check stays deleted even though the check then raises.
    """

    users: UserRepository
    refresh_tokens: RefreshTokenRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
