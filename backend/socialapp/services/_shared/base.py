# socialapp/services/_shared/base.py
from __future__ import annotations

from collections.abc import Callable

from socialapp.core import errors as api_errors
from socialapp.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ServiceError,
    ValidationFailedError,
)
from socialapp.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

UnitOfWorkFactory = Callable[[], SQLAlchemyUnitOfWork]


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide the read-write unit of work used by every use case.
    * Centralize error translation for the API layer.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    Services must never touch the global session; always use a Unit of Work.
    """

    def __init__(self, *, uow_factory: UnitOfWorkFactory | None = None) -> None:
        """
        Initialize the base service.

        :param uow_factory: Zero-argument callable returning a fresh UoW.
        :type uow_factory: Callable[[], SQLAlchemyUnitOfWork] | None
        """
        self._uow_factory: UnitOfWorkFactory = uow_factory or SQLAlchemyUnitOfWork

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return self._uow_factory()

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, AuthenticationError):
            # → 401, same body whatever the cause
            return api_errors.Unauthorized()

        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ConflictError):
            return api_errors.Conflict(str(exc))

        if isinstance(exc, ValidationFailedError):
            return api_errors.BadRequest(str(exc))

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.BadRequest(str(exc))

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
