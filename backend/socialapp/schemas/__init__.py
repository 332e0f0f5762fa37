"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    LoginResponseSchema,
    LoginSchema,
    RegisterSchema,
    RegistrationResponseSchema,
    TokenResponseSchema,
    WhoAmISchema,
)

__all__ = [
    "LoginSchema",
    "LoginResponseSchema",
    "RegisterSchema",
    "RegistrationResponseSchema",
    "TokenResponseSchema",
    "WhoAmISchema",
]
