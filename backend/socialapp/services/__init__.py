"""Service layer public API.

Callers import from :mod:`socialapp.services` without knowing the internal
structure.

Re-exports
----------
- Base primitive (from ``socialapp.services._shared.base``)
    * :class:`BaseService`

- Identity service (from ``socialapp.services.identity``)
    * :class:`IdentityService`
    * DTOs: :class:`UserRegisterIn`, :class:`UserAuthIn`,
      :class:`AccountIdentity`, :class:`UserPublicOut`

- Auth service (from ``socialapp.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`LoginIn`, :class:`LoginOut`, :class:`RefreshIn`,
      :class:`TokenPairOut`, :class:`LogoutIn`, :class:`RegisterIn`,
      :class:`RegistrationOut`
"""

from __future__ import annotations

from ._shared.base import BaseService

# Auth service + DTOs
from .auth.dto import (
    LoginIn,
    LoginOut,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    RegistrationOut,
    TokenPairOut,
)
from .auth.service import AuthService

# Identity service + DTOs
from .identity.dto import AccountIdentity, UserAuthIn, UserPublicOut, UserRegisterIn
from .identity.service import IdentityService

__all__ = [
    # Base
    "BaseService",
    # Identity
    "IdentityService",
    "UserRegisterIn",
    "UserAuthIn",
    "AccountIdentity",
    "UserPublicOut",
    # Auth
    "AuthService",
    "LoginIn",
    "LoginOut",
    "RefreshIn",
    "TokenPairOut",
    "LogoutIn",
    "RegisterIn",
    "RegistrationOut",
]
