"""Version 1 of the HTTP API.

Mounted under ``{API_BASE_PREFIX}/v1``:

* ``/health``: liveness plus database and key status;
* ``/auth/*``: register, login, refresh, logout and ``/me``.
"""

from __future__ import annotations

from flask import Blueprint

from .auth import bp as auth_bp
from .health import bp as health_bp

API_VERSION = "v1"

# (blueprint, prefix relative to the version root)
REGISTRY: list[tuple[Blueprint, str]] = [(health_bp, ""), (auth_bp, "/auth")]
