"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from socialapp.core.extensions import db
from socialapp.repositories import RefreshTokenRepository, UserRepository
from socialapp.uow.base import UnitOfWork


class SQLAlchemyUnitOfWork(UnitOfWork):
    """
    Unit of work over the Flask-scoped ``db.session``.

    Both repositories share the session, so account and refresh token writes
    made inside one ``with`` block land in the same transaction.

    :param session: Session override; defaults to ``db.session``.
    :type session: Session | None
    """

    def __init__(self, session: Session | None = None) -> None:
        self.session: Session = session if session is not None else db.session
        self.users = UserRepository(session=self.session)
        self.refresh_tokens = RefreshTokenRepository(session=self.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # session begins lazily on the first statement
        return self

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
