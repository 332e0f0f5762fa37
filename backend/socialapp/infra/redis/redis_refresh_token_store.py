# comments in English; reST docstrings
from __future__ import annotations

import logging
import math
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import redis  # type: ignore[import-untyped]

from socialapp.services._shared.errors import (
    AccountNotFoundError,
    ConflictError,
    RefreshTokenExpiredError,
    RefreshTokenNotFoundError,
)
from socialapp.services._shared.ports import (
    RefreshTokenStore,
    RefreshTokenView,
    new_refresh_value,
)

log = logging.getLogger(__name__)

SEQ_KEY = "rt:seq"
MAX_WATCH_ATTEMPTS = 5


def _s(raw: Any) -> str:
    return raw.decode() if isinstance(raw, bytes | bytearray) else str(raw)


class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh token store, one token per account.

    Layout
    ------
    ``rt:v:{value}``
        Hash ``{id, account_id, expires_at}`` (epoch seconds), native TTL.
    ``rt:a:{account_id}``
        Current value of the account, same TTL.

    Replacing the token of an account WATCHes ``rt:a:{account_id}`` and
    writes inside MULTI/EXEC; a concurrent writer aborts the transaction and
    retries behind the winner, so the account never ends with two values.
    After ``max_attempts`` lost races the call gives up with
    :class:`ConflictError`.

    :param r: A Redis client (already connected).
    :param ttl: Refresh token lifetime.
    :param account_exists: Callable checking the account collaborator.
    :param clock: Source of "now" (UTC).
    :param value_factory: Generator of new token values.
    :param max_attempts: WATCH transactions tried before giving up.
    """

    def __init__(
        self,
        r: redis.Redis,
        *,
        ttl: timedelta,
        account_exists: Callable[[int], bool],
        clock: Callable[[], datetime] | None = None,
        value_factory: Callable[[], str] = new_refresh_value,
        max_attempts: int = MAX_WATCH_ATTEMPTS,
    ) -> None:
        self.r = r
        self.ttl = ttl
        self._account_exists = account_exists
        self._clock = clock or (lambda: datetime.now(UTC))
        self._new_value = value_factory
        self.max_attempts = max(1, max_attempts)

    # -------------------- helpers --------------------

    @staticmethod
    def _kv(value: str) -> str:
        return f"rt:v:{value}"

    @staticmethod
    def _ka(account_id: int | str) -> str:
        return f"rt:a:{account_id}"

    def _ttl_seconds(self) -> int:
        return max(1, math.ceil(self.ttl.total_seconds()))

    def _watched(self, key: str, body: Callable[[Any], Any], *, op: str, account: Any) -> Any:
        """Run ``body(pipeline)`` with ``key`` WATCHed; retry lost races up to ``max_attempts``."""
        for _ in range(self.max_attempts):
            try:
                with self.r.pipeline() as p:
                    p.watch(key)
                    return body(p)
            except redis.WatchError:
                log.debug(
                    "refresh_token.watch_retry",
                    extra={"event": "refresh_token.watch_retry", "account_id": account},
                )
        log.warning(
            "refresh_token.contention",
            extra={"event": "refresh_token.contention", "account_id": account, "reason": op},
        )
        raise ConflictError("RefreshToken", f"{op} lost {self.max_attempts} concurrent updates")

    # -------------------- API ------------------------

    def create(self, account_id: int) -> RefreshTokenView:
        if not self._account_exists(account_id):
            raise AccountNotFoundError(account_id)

        expires_at = self._clock() + self.ttl
        ttl_s = self._ttl_seconds()
        k_acc = self._ka(account_id)

        def replace(p) -> tuple[int, str]:
            previous = p.get(k_acc)
            value = self._new_value()
            token_id = int(self.r.incr(SEQ_KEY))

            p.multi()
            if previous is not None:
                p.delete(self._kv(_s(previous)))
            p.hset(
                self._kv(value),
                mapping={
                    "id": str(token_id),
                    "account_id": str(account_id),
                    "expires_at": repr(expires_at.timestamp()),
                },
            )
            p.expire(self._kv(value), ttl_s)
            p.set(k_acc, value, ex=ttl_s)
            p.execute()
            return token_id, value

        token_id, value = self._watched(k_acc, replace, op="create", account=account_id)

        log.info(
            "refresh_token.created",
            extra={"event": "refresh_token.created", "account_id": account_id},
        )
        return RefreshTokenView(
            id=token_id, value=value, account_id=account_id, expires_at=expires_at
        )

    def find_by_value(self, value: str) -> RefreshTokenView:
        h = self.r.hgetall(self._kv(value))
        if not h:
            raise RefreshTokenNotFoundError()
        fields = {_s(k): _s(v) for k, v in h.items()}
        return RefreshTokenView(
            id=int(fields["id"]),
            value=value,
            account_id=int(fields["account_id"]),
            expires_at=datetime.fromtimestamp(float(fields["expires_at"]), tz=UTC),
        )

    def verify_not_expired(self, token: RefreshTokenView) -> RefreshTokenView:
        if token.expires_at >= self._clock():
            return token
        self.delete(token.value)
        log.info(
            "refresh_token.expired_deleted",
            extra={"event": "refresh_token.expired_deleted", "account_id": token.account_id},
        )
        raise RefreshTokenExpiredError(token.account_id)

    def delete(self, value: str) -> None:
        k_val = self._kv(value)
        account_raw = self.r.hget(k_val, "account_id")
        if account_raw is None:
            # No session -> nothing to delete
            return
        account = _s(account_raw)
        k_acc = self._ka(account)

        def drop(p) -> None:
            current = p.get(k_acc)
            p.multi()
            p.delete(k_val)
            # only drop the account pointer if it still points at this value
            if current is not None and _s(current) == value:
                p.delete(k_acc)
            p.execute()

        self._watched(k_acc, drop, op="delete", account=account)

    def delete_for_account(self, account_id: int) -> int:
        k_acc = self._ka(account_id)

        def drop_all(p) -> int:
            current = p.get(k_acc)
            p.multi()
            if current is not None:
                p.delete(self._kv(_s(current)))
            p.delete(k_acc)
            p.execute()
            return 0 if current is None else 1

        return self._watched(k_acc, drop_all, op="delete_for_account", account=account_id)

    def purge_expired(self) -> int:
        """Sweep tokens past ``expires_at`` that Redis has not evicted yet."""
        now_ts = self._clock().timestamp()
        purged = 0
        for key in self.r.scan_iter(match=self._kv("*")):
            raw = self.r.hget(key, "expires_at")
            if raw is None or float(_s(raw)) >= now_ts:
                continue
            self.delete(_s(key)[len(self._kv("")) :])
            purged += 1
        log.info(
            "refresh_token.purged", extra={"event": "refresh_token.purged", "backend": "redis"}
        )
        return purged
