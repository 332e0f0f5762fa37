"""Refresh token repository: row-level access to ``refresh_tokens``."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import delete, select

from socialapp.models.refresh_token import RefreshToken
from socialapp.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken`.

    Bulk deletes return the number of rows affected and are flushed by the
    database immediately, so a following insert in the same transaction never
    trips ``uq_refresh_tokens_user_id``.
    """

    model = RefreshToken

    def get_by_value(self, value: str) -> RefreshToken | None:
        stmt = select(RefreshToken).where(RefreshToken.value == value)
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def delete_by_value(self, value: str) -> int:
        """Delete the row holding ``value``. Zero rows is not an error.

        :param value: Refresh token value.
        :type value: str
        :returns: Rows deleted (0 or 1).
        :rtype: int
        """
        stmt = delete(RefreshToken).where(RefreshToken.value == value)
        return self._execute_delete(stmt)

    def delete_for_user(self, user_id: int) -> int:
        """Delete every row owned by ``user_id`` (at most one by constraint).

        :param user_id: Owning account id.
        :type user_id: int
        :returns: Rows deleted.
        :rtype: int
        """
        stmt = delete(RefreshToken).where(RefreshToken.user_id == user_id)
        return self._execute_delete(stmt)

    def delete_expired(self, now: datetime) -> int:
        """Delete rows whose ``expires_at`` lies before ``now``."""
        stmt = delete(RefreshToken).where(RefreshToken.expires_at < now)
        return self._execute_delete(stmt)

    def _execute_delete(self, stmt) -> int:
        # Flush first so pending ORM state cannot resurrect a deleted row
        self.flush()
        result = self.session.execute(stmt.execution_options(synchronize_session=False))
        # Bulk DELETE skips the identity map; expire so stale objects reload
        self.session.expire_all()
        return int(result.rowcount or 0)
