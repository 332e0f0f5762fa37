"""
DTOs for IdentityService.

Data Transfer Objects isolate the service layer from ORM models, ensuring
clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserRegisterIn:
    """
    Input DTO for account registration.

    :param email: Contact email (normalized to lowercase by the model).
    :type email: str
    :param username: Public handle used to log in.
    :type username: str
    :param password: Raw password to be hashed by the model.
    :type password: str
    :param confirm_password: Must equal ``password``.
    :type confirm_password: str
    :param full_name: Optional real name.
    :type full_name: str | None
    """

    email: str
    username: str
    password: str
    confirm_password: str
    full_name: str | None = None


@dataclass(frozen=True, slots=True)
class UserAuthIn:
    """
    Input DTO for credential verification.

    :param username: Login handle.
    :type username: str
    :param password: Raw password.
    :type password: str
    """

    username: str
    password: str


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class AccountIdentity:
    """
    Authenticated identity handed to the access token issuer.

    :param account_id: Numeric account id (``sub`` claim).
    :type account_id: int
    :param name: Display name (``name`` claim), informational only.
    :type name: str
    :param role: Role name, e.g. ``"MEMBER"``.
    :type role: str
    :param authorities: Authority strings (``scope`` claim).
    :type authorities: tuple[str, ...]
    """

    account_id: int
    name: str
    role: str
    authorities: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Output DTO exposing public-safe account fields.

    :param id: Account id.
    :param email: Email.
    :param username: Username.
    :param full_name: Optional real name.
    :param role: Role name.
    """

    id: int
    email: str
    username: str
    full_name: str | None
    role: str
