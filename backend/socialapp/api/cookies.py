"""Refresh token cookie helpers.

The refresh value only ever travels in this cookie, never in a JSON body.
"""

from __future__ import annotations

from flask import Response, current_app

DEFAULT_COOKIE_NAME = "refreshToken"


def refresh_cookie_name() -> str:
    return str(current_app.config.get("REFRESH_COOKIE_NAME", DEFAULT_COOKIE_NAME))


def refresh_cookie_max_age() -> int:
    """Cookie ``Max-Age`` in seconds, derived from ``REFRESH_TOKEN_TTL_MS``."""
    return int(current_app.config["REFRESH_TOKEN_TTL_MS"]) // 1000


def _set(response: Response, value: str, max_age: int) -> Response:
    config = current_app.config
    response.set_cookie(
        refresh_cookie_name(),
        value,
        max_age=max_age,
        path="/",
        secure=bool(config.get("REFRESH_COOKIE_SECURE", True)),
        httponly=True,
        samesite=str(config.get("REFRESH_COOKIE_SAMESITE", "Strict")),
    )
    return response


def set_refresh_cookie(response: Response, value: str) -> Response:
    """Attach ``value`` as the HttpOnly refresh cookie living as long as the token."""
    return _set(response, value, refresh_cookie_max_age())


def clear_refresh_cookie(response: Response) -> Response:
    """Overwrite the refresh cookie with an empty, immediately expiring one."""
    return _set(response, "", 0)


__all__ = [
    "clear_refresh_cookie",
    "refresh_cookie_max_age",
    "refresh_cookie_name",
    "set_refresh_cookie",
]
