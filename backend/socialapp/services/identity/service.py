"""
IdentityService
===============

Account collaborator of the authentication core:
- Registration (password confirmation, email/username uniqueness)
- Credential verification (no token issuance)
- Identity resolution by account id
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from socialapp.models.user import Role, User
from socialapp.repositories.user import UserRepository
from socialapp.services._shared.base import BaseService
from socialapp.services._shared.errors import (
    AccountNotFoundError,
    AuthenticationError,
    ConflictError,
    ValidationFailedError,
    violates,
)
from socialapp.services.identity.dto import (
    AccountIdentity,
    UserAuthIn,
    UserPublicOut,
    UserRegisterIn,
)

log = logging.getLogger(__name__)


def _identity(user: User) -> AccountIdentity:
    role = user.role or Role.MEMBER
    return AccountIdentity(
        account_id=user.id,
        name=user.username,
        role=role.value,
        authorities=user.authorities,
    )


def _public(user: User) -> UserPublicOut:
    return UserPublicOut(
        id=user.id,
        email=user.email,
        username=user.username,
        full_name=user.full_name,
        role=(user.role or Role.MEMBER).value,
    )


class IdentityService(BaseService):
    """
    Application service for the `User` aggregate.

    Responsibilities
    ----------------
    - Register members ensuring email and username uniqueness.
    - Verify credentials with a uniform failure.
    - Resolve the current identity of an account (role may change over time).
    """

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def register_user(self, dto: UserRegisterIn) -> UserPublicOut:
        """
        Register a new member account.

        :param dto: User registration input DTO.
        :type dto: UserRegisterIn
        :returns: Public-safe user DTO.
        :rtype: UserPublicOut
        :raises ValidationFailedError: If ``password != confirm_password``.
        :raises ConflictError: If the email or the username is taken.
        """
        log.info("identity.register_attempt", extra={"event": "identity.register_attempt"})
        if dto.password != dto.confirm_password:
            log.warning("identity.password_mismatch", extra={"event": "identity.password_mismatch"})
            raise ValidationFailedError("Passwords do not match")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users

            if repo.exists_by_email(dto.email):
                raise ConflictError("User", "email already in use")
            if repo.exists_by_username(dto.username):
                raise ConflictError("User", "username already in use")

            try:
                user = repo.model(
                    email=dto.email,
                    username=dto.username,
                    full_name=dto.full_name,
                    role=Role.MEMBER,
                )
                user.password = dto.password  # model hashes via setter
                repo.add(user)
            except IntegrityError as exc:
                # Lost a race against a concurrent registration
                if violates(exc, "uq_users_email"):
                    raise ConflictError("User", "email already in use") from exc
                if violates(exc, "uq_users_username"):
                    raise ConflictError("User", "username already in use") from exc
                raise

            out = _public(user)

        log.info(
            "identity.registered",
            extra={"event": "identity.registered", "account_id": out.id},
        )
        return out

    # --------------------------------------------------------------------- #
    # Authentication
    # --------------------------------------------------------------------- #

    def authenticate(self, dto: UserAuthIn) -> AccountIdentity:
        """
        Verify a username/password pair.

        :param dto: Authentication input DTO.
        :type dto: UserAuthIn
        :returns: Identity of the authenticated account.
        :rtype: AccountIdentity
        :raises AuthenticationError: Unknown user or wrong password, indistinguishably.
        """
        with self.rw_uow() as uow:
            user = uow.users.authenticate(dto.username, dto.password)
            if user is None:
                raise AuthenticationError()
            return _identity(user)

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def resolve_identity(self, account_id: int) -> AccountIdentity:
        """
        Load the *current* identity of an account.

        :raises AccountNotFoundError: If the account no longer exists.
        """
        with self.rw_uow() as uow:
            user = uow.users.get(account_id)
            if user is None:
                raise AccountNotFoundError(account_id)
            return _identity(user)

    def get_user(self, account_id: int) -> UserPublicOut:
        """
        Retrieve a user by identifier.

        :raises AccountNotFoundError: If user does not exist.
        """
        with self.rw_uow() as uow:
            user = uow.users.get(account_id)
            if user is None:
                raise AccountNotFoundError(account_id)
            return _public(user)

    def account_exists(self, account_id: int) -> bool:
        with self.rw_uow() as uow:
            return uow.users.get(account_id) is not None
