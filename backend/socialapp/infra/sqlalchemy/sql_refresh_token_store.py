"""Relational refresh token store (default backend)."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import IntegrityError

from socialapp.models.base import as_utc
from socialapp.models.refresh_token import RefreshToken
from socialapp.services._shared.errors import (
    AccountNotFoundError,
    ConflictError,
    RefreshTokenExpiredError,
    RefreshTokenNotFoundError,
    violates,
)
from socialapp.services._shared.ports import (
    RefreshTokenStore,
    RefreshTokenView,
    new_refresh_value,
)
from socialapp.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


def _view(row: RefreshToken) -> RefreshTokenView:
    return RefreshTokenView(
        id=row.id,
        value=row.value,
        account_id=row.user_id,
        expires_at=as_utc(row.expires_at),
    )


class SQLRefreshTokenStore(RefreshTokenStore):
    """
    Refresh token store over ``refresh_tokens``.

    Every operation runs in its own unit of work, so a deletion performed
    while raising (expired token) is still committed.

    Concurrency
    -----------
    ``create`` locks the owning ``users`` row (``SELECT ... FOR UPDATE``) before
    the delete-then-insert, so two logins for one account serialize in the
    database. ``uq_refresh_tokens_user_id`` is the final guard on dialects
    without row locks.

    :param ttl: Refresh token lifetime.
    :param uow_factory: Zero-argument callable returning a fresh UoW.
    :param clock: Source of "now" (UTC).
    :param value_factory: Generator of new token values.
    """

    def __init__(
        self,
        *,
        ttl: timedelta,
        uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
        clock: Callable[[], datetime] | None = None,
        value_factory: Callable[[], str] = new_refresh_value,
    ) -> None:
        self.ttl = ttl
        self._uow_factory = uow_factory
        self._clock = clock or (lambda: datetime.now(UTC))
        self._new_value = value_factory

    # -------------------------- API ----------------------------

    def create(self, account_id: int) -> RefreshTokenView:
        now = self._clock()
        try:
            with self._uow_factory() as uow:
                if uow.users.get_for_update(account_id) is None:
                    raise AccountNotFoundError(account_id)
                # delete_for_user executes immediately: no transient duplicate
                replaced = uow.refresh_tokens.delete_for_user(account_id)
                row = uow.refresh_tokens.add(
                    RefreshToken(
                        value=self._new_value(),
                        user_id=account_id,
                        expires_at=now + self.ttl,
                    )
                )
                view = _view(row)
        except IntegrityError as exc:
            if violates(exc, "uq_refresh_tokens_user_id"):
                raise ConflictError("RefreshToken", "concurrent session creation") from exc
            raise

        log.info(
            "refresh_token.created",
            extra={"event": "refresh_token.created", "account_id": account_id},
        )
        if replaced:
            log.debug(
                "refresh_token.replaced",
                extra={"event": "refresh_token.replaced", "account_id": account_id},
            )
        return view

    def find_by_value(self, value: str) -> RefreshTokenView:
        with self._uow_factory() as uow:
            row = uow.refresh_tokens.get_by_value(value)
            if row is None:
                raise RefreshTokenNotFoundError()
            return _view(row)

    def verify_not_expired(self, token: RefreshTokenView) -> RefreshTokenView:
        if as_utc(token.expires_at) >= as_utc(self._clock()):
            return token
        with self._uow_factory() as uow:
            uow.refresh_tokens.delete_by_value(token.value)
        log.info(
            "refresh_token.expired_deleted",
            extra={"event": "refresh_token.expired_deleted", "account_id": token.account_id},
        )
        raise RefreshTokenExpiredError(token.account_id)

    def delete(self, value: str) -> None:
        with self._uow_factory() as uow:
            uow.refresh_tokens.delete_by_value(value)

    def delete_for_account(self, account_id: int) -> int:
        with self._uow_factory() as uow:
            return uow.refresh_tokens.delete_for_user(account_id)

    def purge_expired(self) -> int:
        with self._uow_factory() as uow:
            purged = uow.refresh_tokens.delete_expired(self._clock())
        log.info("refresh_token.purged", extra={"event": "refresh_token.purged", "backend": "sql"})
        return purged
