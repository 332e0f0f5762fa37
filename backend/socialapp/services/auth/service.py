# socialapp/services/auth/service.py
from __future__ import annotations

import logging
from typing import Any, NoReturn

from socialapp.services._shared.base import BaseService, UnitOfWorkFactory
from socialapp.services._shared.errors import (
    AccountNotFoundError,
    AuthenticationError,
    ConflictError,
    InvalidAccessTokenError,
    RefreshTokenExpiredError,
    RefreshTokenNotFoundError,
)
from socialapp.services._shared.ports import RefreshTokenStore, TokenProvider
from socialapp.services.auth.dto import (
    LoginIn,
    LoginOut,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    RegistrationOut,
    TokenPairOut,
)
from socialapp.services.identity.dto import UserAuthIn, UserPublicOut, UserRegisterIn
from socialapp.services.identity.service import IdentityService

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Authentication lifecycle service (login / refresh / logout).

    Access tokens are issued through a pluggable :class:`TokenProvider`;
    refresh sessions live in a :class:`RefreshTokenStore` that keeps at most
    one token per account, so issuing a new one (login or refresh) is what
    invalidates the previous one.

    Every refresh failure surfaces as the same :class:`AuthenticationError`;
    the internal reason only reaches the logs.
    """

    def __init__(
        self,
        *,
        identity_service: IdentityService,
        token_provider: TokenProvider,
        refresh_store: RefreshTokenStore,
        uow_factory: UnitOfWorkFactory | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param identity_service: Credential verifier and account lookup.
        :param token_provider: Adapter issuing/decoding access tokens.
        :param refresh_store: One-per-account refresh token store.
        :param uow_factory: Optional UoW factory (shared with the base class).
        """
        super().__init__(uow_factory=uow_factory)
        self.identity = identity_service
        self.tokens = token_provider
        self.refresh_store = refresh_store

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Authenticate credentials and open a new session.

        Any refresh token previously held by the account stops working.

        :param dto: Login input.
        :returns: Access token, refresh value and identity summary.
        :raises AuthenticationError: If credentials are invalid, the account
            vanished before its session was stored, or a concurrent login for
            the same account won the race.
        """
        try:
            identity = self.identity.authenticate(UserAuthIn(dto.username, dto.password))
        except AuthenticationError:
            log.warning("auth.login_failed", extra={"event": "auth.login_failed"})
            raise

        try:
            access = self.tokens.issue(identity)
            session = self.refresh_store.create(identity.account_id)
        except AccountNotFoundError:
            self._reject("account_missing", account_id=identity.account_id)
        except ConflictError:
            self._reject("concurrent", account_id=identity.account_id)

        log.info(
            "auth.login_succeeded",
            extra={"event": "auth.login_succeeded", "account_id": identity.account_id},
        )
        return LoginOut(
            access_token=access,
            refresh_token=session.value,
            account_id=identity.account_id,
            role=identity.role,
            username=identity.name,
        )

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange a refresh value for a new access token and a new refresh value.

        The identity is resolved again so a role change since login shows up
        in the new access token. The presented value is dead afterwards.

        :param dto: Refresh input.
        :returns: New token pair.
        :raises AuthenticationError: Missing, unknown or expired value, the
            account is gone, or a concurrent refresh for the same account won
            the race. Callers cannot tell these apart.
        """
        value = (dto.refresh_token or "").strip()
        if not value:
            self._reject("missing")

        try:
            token = self.refresh_store.find_by_value(value)
            token = self.refresh_store.verify_not_expired(token)
            identity = self.identity.resolve_identity(token.account_id)
            access = self.tokens.issue(identity)
            session = self.refresh_store.create(identity.account_id)
        except RefreshTokenNotFoundError:
            self._reject("unknown")
        except RefreshTokenExpiredError as exc:
            self._reject("expired", account_id=exc.account_id)
        except AccountNotFoundError as exc:
            self._reject("account_missing", account_id=exc.key)
        except ConflictError:
            self._reject("concurrent", account_id=token.account_id)

        log.info(
            "auth.refresh_succeeded",
            extra={"event": "auth.refresh_succeeded", "account_id": identity.account_id},
        )
        return TokenPairOut(access_token=access, refresh_token=session.value)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> None:
        """
        Discard the presented refresh value, if any.

        Unknown or already deleted values are a no-op. Access tokens already
        issued stay valid until their own ``exp``.
        """
        value = (dto.refresh_token or "").strip()
        if value:
            self.refresh_store.delete(value)
        log.info("auth.logout", extra={"event": "auth.logout"})

    # ------------------------------------------------------------------ #
    # Register then login
    # ------------------------------------------------------------------ #

    def register_and_login(self, dto: RegisterIn) -> RegistrationOut:
        """
        Create a member account and open its first session.

        :raises ValidationFailedError: Password confirmation mismatch.
        :raises ConflictError: Email or username already taken.
        """
        user = self.identity.register_user(
            UserRegisterIn(
                email=dto.email,
                username=dto.username,
                password=dto.password,
                confirm_password=dto.confirm_password,
                full_name=dto.full_name,
            )
        )
        session = self.login(LoginIn(username=dto.username, password=dto.password))
        return RegistrationOut(
            account_id=user.id,
            email=user.email,
            username=user.username,
            role=user.role,
            access_token=session.access_token,
            refresh_token=session.refresh_token,
        )

    # ------------------------------------------------------------------ #
    # Current account
    # ------------------------------------------------------------------ #

    def current_account(self, account_id: int) -> UserPublicOut:
        """
        Public view of the account behind a verified access token.

        :raises AuthenticationError: The account no longer exists.
        """
        try:
            return self.identity.get_user(account_id)
        except AccountNotFoundError:
            self._reject("account_missing", account_id=account_id)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    @staticmethod
    def subject_to_account_id(subject: int | str | None) -> int:
        """
        Ensure the token subject can be treated as an integer account id.

        :raises InvalidAccessTokenError: If the subject is not a positive integer.
        """
        if isinstance(subject, int) and not isinstance(subject, bool) and subject > 0:
            return subject
        if isinstance(subject, str) and subject.isdigit() and int(subject) > 0:
            return int(subject)
        log.warning(
            "auth.bad_subject",
            extra={"event": "auth.access_token_rejected", "reason": "bad_subject"},
        )
        raise InvalidAccessTokenError("bad_subject")

    @staticmethod
    def _reject(reason: str, *, account_id: Any = None) -> NoReturn:
        log.warning(
            "auth.rejected",
            extra={"event": "auth.rejected", "reason": reason, "account_id": account_id},
        )
        raise AuthenticationError()
