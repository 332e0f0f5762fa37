"""Unit of Work abstractions and concrete implementations.

Re-exports the SQLAlchemy-backed unit of work used by the services and the
SQL refresh token store, alongside the abstract contract.
"""

from .base import UnitOfWork
from .sqlalchemy_uow import SQLAlchemyUnitOfWork

__all__ = [
    "UnitOfWork",
    "SQLAlchemyUnitOfWork",
]
