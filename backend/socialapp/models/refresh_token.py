"""Persisted refresh session: one opaque bearer value per account."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from socialapp.core.extensions import db

from .base import CreatedAtMixin, PKMixin


class RefreshToken(PKMixin, CreatedAtMixin, db.Model):
    """
    Current refresh token of an account.

    Fields
    ------
    value : str
        High-entropy random string. Unique across all rows.
    user_id : int
        Owning account. Unique: at most one row per account.
    expires_at : datetime
        Absolute expiry (UTC). Rows past it are deleted on first encounter.
    """

    __tablename__ = "refresh_tokens"

    value: Mapped[str] = mapped_column(String(128), nullable=False)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("value", name="uq_refresh_tokens_value"),
        UniqueConstraint("user_id", name="uq_refresh_tokens_user_id"),
        Index("ix_refresh_tokens_expires_at", "expires_at"),
    )

    def __repr__(self) -> str:  # value is a bearer credential; keep it out of logs
        return f"<RefreshToken id={self.id} user_id={self.user_id}>"
