"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from socialapp.repositories.base import BaseRepository
from socialapp.repositories.refresh_token import RefreshTokenRepository
from socialapp.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "RefreshTokenRepository",
    "UserRepository",
]
