"""Account model: the identity that logs in and owns a refresh session."""

from __future__ import annotations

import enum
from typing import Any

from sqlalchemy import Enum, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates
from werkzeug.security import check_password_hash, generate_password_hash

from socialapp.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

AUTHORITY_PREFIX = "ROLE_"


class Role(str, enum.Enum):
    """Account role. Rendered into the access token ``scope`` as ``ROLE_<name>``."""

    MEMBER = "MEMBER"
    ADMIN = "ADMIN"


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Social network account.

    Fields
    ------
    email : str
        Contact/login email. Stored normalized (lowercase, trimmed).
    username : str
        Public handle used to log in and shown as the token ``name`` claim.
    full_name : str | None
        Optional real name.
    password_hash : str
        Hashed password (write-only setter via ``password``).
    role : Role
        ``MEMBER`` for self-registered accounts.
    """

    __tablename__ = "users"

    # Columns
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    username: Mapped[str] = mapped_column(String(50), nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(254), nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="user_role", native_enum=False, length=16),
        nullable=False,
        default=Role.MEMBER,
        server_default=Role.MEMBER.value,
    )

    # Constraints & indexes
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("username", name="uq_users_username"),
        Index("ix_users_email", "email"),
        Index("ix_users_username", "username"),
    )

    # -------------------- Authorities --------------------
    @property
    def authorities(self) -> tuple[str, ...]:
        """Authority strings granted to this account (one role per account)."""
        role = self.role or Role.MEMBER
        return (f"{AUTHORITY_PREFIX}{role.value}",)

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        """
        Hash and set the password.

        :param raw: Plain text password to hash.
        :type raw: str
        """
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :type raw: str
        :returns: ``True`` if it matches; otherwise ``False``.
        :rtype: bool
        """
        if not self.password_hash:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("username")
    def _normalize_username(self, key: str, value: str) -> str:
        if not isinstance(value, str):
            raise ValueError("Username is required.")
        v = value.strip()
        if not v:
            raise ValueError("Username is required.")
        return v
