"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
code. They are the contract between stores, repositories and services.

The translation to HTTP responses (RFC 7807) is handled by
``socialapp/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError

# Tables whose unique constraints follow ``uq_<table>_<column>``
_TABLES = ("refresh_tokens", "users")


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name; SQLite reports the columns
    (``UNIQUE constraint failed: users.email``), so the column spelling derived
    from the naming convention ``uq_<table>_<column>`` is matched too.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    name = constraint_name.lower()
    if name in message:
        return True
    # uq_refresh_tokens_user_id -> refresh_tokens.user_id
    if name.startswith("uq_"):
        for table in _TABLES:
            prefix = f"uq_{table}_"
            if name.startswith(prefix):
                return f"{table}.{name[len(prefix):]}" in message
    return False


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them via ``BaseService.translate_exceptions``.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class ValidationFailedError(ServiceError):
    """Input is well-formed but breaks a rule (e.g. password confirmation mismatch)."""


class AuthenticationError(ServiceError):
    """
    Uniform authentication failure.

    Bad credentials, unknown/expired refresh tokens and malformed subjects all
    end up here so callers cannot tell them apart.
    """

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


# ----------------------------- Refresh sessions ----------------------------- #


class RefreshTokenNotFoundError(NotFoundError):
    """No refresh token row holds the presented value."""

    def __init__(self) -> None:
        # never echo the bearer value
        NotFoundError.__init__(self, "RefreshToken", "<redacted>")


class RefreshTokenExpiredError(ServiceError):
    """The refresh token was past ``expires_at`` and has been deleted."""

    def __init__(self, account_id: int) -> None:
        super().__init__(f"Refresh token expired for account {account_id}")
        self.account_id = account_id


class AccountNotFoundError(NotFoundError):
    """A refresh token was requested for an account that does not exist."""

    def __init__(self, account_id: int) -> None:
        NotFoundError.__init__(self, "User", account_id)


class InvalidAccessTokenError(AuthenticationError):
    """Access token failed signature, issuer or expiry verification, or has a bad subject."""

    def __init__(self, reason: str = "invalid") -> None:
        super().__init__("Invalid access token")
        self.reason = reason
