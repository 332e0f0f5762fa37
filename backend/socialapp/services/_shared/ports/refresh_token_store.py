from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

# 48 random bytes -> 64 url-safe characters
REFRESH_TOKEN_BYTES = 48


def new_refresh_value() -> str:
    """Generate an unguessable, non-sequential refresh token value."""
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


@dataclass(frozen=True, slots=True)
class RefreshTokenView:
    """
    Read-model for the refresh token of an account.

    :ivar id: Storage-assigned identifier.
    :ivar value: Opaque bearer value (cookie payload).
    :ivar account_id: Owning account.
    :ivar expires_at: Absolute expiry (aware UTC).
    """

    id: int
    value: str
    account_id: int
    expires_at: datetime

    def __repr__(self) -> str:
        return f"RefreshTokenView(id={self.id}, account_id={self.account_id})"


class RefreshTokenStore(Protocol):
    """
    Stateful store holding at most one refresh token per account.

    Implementations rely on storage-level atomicity (a DB transaction plus a
    unique constraint, or Redis WATCH/MULTI), never on in-process locks.
    """

    def create(self, account_id: int) -> RefreshTokenView:
        """
        Replace any token of ``account_id`` with a brand-new one.

        :raises AccountNotFoundError: If the account does not exist.
        """
        ...

    def find_by_value(self, value: str) -> RefreshTokenView:
        """:raises RefreshTokenNotFoundError: If no row holds ``value``."""
        ...

    def verify_not_expired(self, token: RefreshTokenView) -> RefreshTokenView:
        """
        Return ``token`` unchanged while valid.

        :raises RefreshTokenExpiredError: After deleting the expired row.
        """
        ...

    def delete(self, value: str) -> None:
        """Delete the token holding ``value``; absent values are a no-op."""
        ...

    def delete_for_account(self, account_id: int) -> int:
        """Delete the account's token, returning how many rows went away."""
        ...

    def purge_expired(self) -> int:
        """Delete every token already past expiry, returning the count."""
        ...
