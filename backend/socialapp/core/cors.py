"""CORS policy for the API, tied to how the refresh cookie travels."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Flask
from flask_cors import CORS

WILDCARD = "*"


def parse_origins(raw: str | None) -> list[str]:
    """Split ``CORS_ORIGINS`` into a clean list; empty means wildcard."""
    origins = [o.strip().rstrip("/") for o in (raw or "").split(",") if o.strip()]
    return [] if origins == [WILDCARD] else origins


def validate_cors_settings(config: Mapping[str, Any]) -> None:
    """
    Refuse a CORS policy the refresh cookie cannot work with.

    ``SameSite=None`` means the SPA lives on another site and posts to
    ``/auth/refresh`` with credentials. Browsers drop credentialed responses
    for a wildcard origin, so that combination needs explicit origins.

    :raises RuntimeError: Cross-site cookie with wildcard origins, or a
        wildcard mixed into an explicit origin list.
    """
    raw = str(config.get("CORS_ORIGINS", "") or "")
    origins = parse_origins(raw)
    if WILDCARD in origins:
        raise RuntimeError("CORS_ORIGINS cannot mix '*' with explicit origins")
    if not origins and config.get("REFRESH_COOKIE_SAMESITE") == "None":
        raise RuntimeError(
            "REFRESH_COOKIE_SAMESITE=None needs explicit CORS_ORIGINS for credentialed refresh"
        )


def init_app(app: Flask) -> None:
    """Configure CORS on ``/api/*``.

    Parameters
    ----------
    app: flask.Flask
        Application whose ``CORS_ORIGINS``, ``CORS_MAX_AGE`` and
        ``REFRESH_COOKIE_SAMESITE`` settings are consulted.

    Notes
    -----
    Explicit origins get ``Access-Control-Allow-Credentials`` so the refresh
    cookie flows. A wildcard only serves the bearer-token routes.
    """
    validate_cors_settings(app.config)
    origins = parse_origins(app.config.get("CORS_ORIGINS"))

    CORS(
        app,
        resources={r"/api/*": {"origins": origins or WILDCARD}},
        supports_credentials=bool(origins),
        expose_headers=["X-Request-ID"],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )


__all__ = ["init_app", "parse_origins", "validate_cors_settings"]
