"""
socialapp.services._shared.ports
================================

*Ports* (hexagonal interfaces) for the authentication session core.

Modules
-------
- :mod:`token_provider`:
    :class:`~.TokenProvider`, issuing and verifying signed access tokens.

- :mod:`refresh_token_store`:
    :class:`~.RefreshTokenStore` and :class:`~.RefreshTokenView`, the
    one-token-per-account refresh session store.

Concrete adapters live under ``socialapp.infra``.
"""

from __future__ import annotations

from .refresh_token_store import (
    RefreshTokenStore,
    RefreshTokenView,
    new_refresh_value,
)
from .token_provider import TokenProvider

__all__ = [
    "TokenProvider",
    "RefreshTokenStore",
    "RefreshTokenView",
    "new_refresh_value",
]
