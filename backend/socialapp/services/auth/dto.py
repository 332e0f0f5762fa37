# socialapp/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param username: Login handle.
    :type username: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    username: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Opaque refresh value read from the cookie, if any.
    :type refresh_token: str | None
    """

    refresh_token: str | None


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param refresh_token: Refresh value to discard; ``None`` when no cookie was sent.
    :type refresh_token: str | None
    """

    refresh_token: str | None = None


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for register-then-login.

    :param email: Contact email.
    :param username: Login handle.
    :param password: Raw password.
    :param confirm_password: Must equal ``password``.
    :param full_name: Optional real name.
    """

    email: str
    username: str
    password: str
    confirm_password: str
    full_name: str | None = None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Signed access token (goes into the body).
    :type access_token: str
    :param refresh_token: Opaque refresh value (goes into the cookie).
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class LoginOut:
    """Tokens plus a summary of the authenticated identity."""

    access_token: str
    refresh_token: str
    account_id: int
    role: str
    username: str


@dataclass(frozen=True, slots=True)
class RegistrationOut:
    """Created account summary plus its first session."""

    account_id: int
    email: str
    username: str
    role: str
    access_token: str
    refresh_token: str
