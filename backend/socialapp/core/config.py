"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

SAMESITE_VALUES: Final[frozenset[str]] = frozenset({"Strict", "Lax", "None"})

# Loads .env in development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Not used for tokens; access tokens are RS256-signed.
    JWT_PRIVATE_KEY / JWT_PUBLIC_KEY: str | None
        RSA key pair, base64 DER (PKCS#8 / X.509 SPKI) or PEM. Required.
    JWT_ISSUER: str
        Value of the ``iss`` claim written on issue and required on verify.
    ACCESS_TOKEN_TTL_MINUTES: int
        Access token lifetime in minutes.
    REFRESH_TOKEN_TTL_MS: int
        Refresh token lifetime in milliseconds (cookie ``Max-Age`` is derived).
    REFRESH_COOKIE_SECURE / REFRESH_COOKIE_SAMESITE: bool / str
        Transport attributes of the refresh cookie. Secure by default.
    REFRESH_TOKEN_BACKEND: str
        ``"sql"`` (default) or ``"redis"``.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for credentialed CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Token signing (see socialapp.core.keys)
    JWT_PRIVATE_KEY = os.getenv("JWT_PRIVATE_KEY")
    JWT_PUBLIC_KEY = os.getenv("JWT_PUBLIC_KEY")
    JWT_EPHEMERAL_KEYS = env_bool("JWT_EPHEMERAL_KEYS", False)
    JWT_ISSUER = os.getenv("JWT_ISSUER", "self")
    ACCESS_TOKEN_TTL_MINUTES = env_int("ACCESS_TOKEN_TTL_MINUTES", 15)

    # Refresh sessions
    REFRESH_TOKEN_TTL_MS = env_int("REFRESH_TOKEN_TTL_MS", 7 * 24 * 60 * 60 * 1000)
    REFRESH_TOKEN_BACKEND = os.getenv("REFRESH_TOKEN_BACKEND", "sql").strip().lower()
    REFRESH_COOKIE_NAME = "refreshToken"
    REFRESH_COOKIE_SECURE = env_bool("REFRESH_COOKIE_SECURE", True)
    REFRESH_COOKIE_SAMESITE = os.getenv("REFRESH_COOKIE_SAMESITE", "Strict")
    REDIS_URL = os.getenv("REDIS_URL")

    # Rate limiting (Flask-Limiter)
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "5 per minute")
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging, CORS & proxy
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROXYFIX_HOPS = int(os.getenv("PROXYFIX_HOPS", "1"))

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Plain-HTTP friendly cookie defaults (``Secure`` off, ``SameSite=Lax``) so
    a local SPA on another port can exercise the refresh flow.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes
    REFRESH_COOKIE_SECURE = env_bool("REFRESH_COOKIE_SECURE", False)
    REFRESH_COOKIE_SAMESITE = os.getenv("REFRESH_COOKIE_SAMESITE", "Lax")


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Propagates exceptions so pytest can surface tracebacks directly.
    - Disables rate limiting.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    PROPAGATE_EXCEPTIONS = True
    RATELIMIT_ENABLED = False
    REFRESH_COOKIE_SECURE = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled. Refresh cookies are always
    ``Secure`` with ``SameSite=Strict`` unless explicitly overridden.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    JWT_EPHEMERAL_KEYS = False
    REFRESH_COOKIE_SECURE = env_bool("REFRESH_COOKIE_SECURE", True)
    REFRESH_COOKIE_SAMESITE = os.getenv("REFRESH_COOKIE_SAMESITE", "Strict")


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def validate_auth_settings(config: Mapping[str, object]) -> None:
    """Reject transport and lifetime settings that cannot be served safely.

    :param config: Loaded Flask config mapping.
    :raises RuntimeError: On an unknown ``SameSite`` policy, ``SameSite=None``
        without ``Secure``, non-positive TTLs or an unknown refresh backend.
    """
    samesite = str(config.get("REFRESH_COOKIE_SAMESITE", "Strict"))
    if samesite not in SAMESITE_VALUES:
        raise RuntimeError(f"REFRESH_COOKIE_SAMESITE must be one of {sorted(SAMESITE_VALUES)}")
    if samesite == "None" and not config.get("REFRESH_COOKIE_SECURE"):
        raise RuntimeError("REFRESH_COOKIE_SAMESITE=None requires REFRESH_COOKIE_SECURE=true")
    if int(config.get("ACCESS_TOKEN_TTL_MINUTES", 15)) <= 0:  # type: ignore[call-overload]
        raise RuntimeError("ACCESS_TOKEN_TTL_MINUTES must be positive")
    if int(config.get("REFRESH_TOKEN_TTL_MS", 0)) < 1000:  # type: ignore[call-overload]
        raise RuntimeError("REFRESH_TOKEN_TTL_MS must be at least one second")
    backend = str(config.get("REFRESH_TOKEN_BACKEND", "sql"))
    if backend not in {"sql", "redis"}:
        raise RuntimeError(f"Unknown REFRESH_TOKEN_BACKEND {backend!r}")
