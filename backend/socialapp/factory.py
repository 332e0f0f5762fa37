"""Application factory wiring Flask extensions, signing keys and blueprints."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from flask import Flask

from socialapp.core.config import BaseConfig, get_config, validate_auth_settings
from socialapp.core.keys import SigningKeyPair, load_key_pair
from socialapp.core.logger import configure_logging, init_app as init_logging
from socialapp.services._shared.ports import RefreshTokenStore
from socialapp.services.auth.service import AuthService

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuthComponents:
    """Process-wide authentication collaborators, built once per app."""

    key_pair: SigningKeyPair
    refresh_store: RefreshTokenStore
    service: AuthService


def _apply_jwt_settings(app: Flask, key_pair: SigningKeyPair) -> None:
    """Point Flask-JWT-Extended (resource-server verification) at the RS256 public key."""
    app.config["JWT_ALGORITHM"] = "RS256"
    app.config["JWT_PRIVATE_KEY"] = key_pair.private_pem
    app.config["JWT_PUBLIC_KEY"] = key_pair.public_pem
    app.config["JWT_DECODE_ISSUER"] = app.config.get("JWT_ISSUER", "self")
    app.config["JWT_TOKEN_LOCATION"] = ["headers"]
    app.config["JWT_IDENTITY_CLAIM"] = "sub"


def _build_refresh_store(app: Flask, identity) -> RefreshTokenStore:
    ttl = timedelta(milliseconds=int(app.config["REFRESH_TOKEN_TTL_MS"]))
    if app.config.get("REFRESH_TOKEN_BACKEND") == "redis":
        from socialapp.core.extensions import get_redis
        from socialapp.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore

        return RedisRefreshTokenStore(
            get_redis(), ttl=ttl, account_exists=identity.account_exists
        )

    from socialapp.infra.sqlalchemy.sql_refresh_token_store import SQLRefreshTokenStore

    return SQLRefreshTokenStore(ttl=ttl)


def _init_auth(app: Flask, key_pair: SigningKeyPair) -> None:
    from socialapp.infra.jwt.rsa_token_provider import RSATokenProvider
    from socialapp.services.identity.service import IdentityService

    identity = IdentityService()
    provider = RSATokenProvider(
        key_pair=key_pair,
        issuer=app.config.get("JWT_ISSUER", "self"),
        access_ttl=timedelta(minutes=int(app.config["ACCESS_TOKEN_TTL_MINUTES"])),
    )
    store = _build_refresh_store(app, identity)
    service = AuthService(
        identity_service=identity, token_provider=provider, refresh_store=store
    )
    app.extensions["auth"] = AuthComponents(
        key_pair=key_pair, refresh_store=store, service=service
    )
    log.info(
        "auth.initialized",
        extra={"event": "auth.initialized", "backend": app.config.get("REFRESH_TOKEN_BACKEND")},
    )


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    key_pair: SigningKeyPair | None = None,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """
    Build and configure the Flask application.

    :param config: Config object/class or import path; ``APP_ENV`` when omitted.
    :param key_pair: Signing key pair to use instead of ``JWT_PRIVATE_KEY`` /
        ``JWT_PUBLIC_KEY`` (tests inject a throwaway pair).
    :raises KeyMaterialError: Missing, malformed or weak key material. Startup aborts.
    :raises RuntimeError: Unsafe cookie or lifetime settings.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Fatal before anything binds: no key pair, no app
    validate_auth_settings(app.config)
    key_pair = key_pair or load_key_pair(app.config)
    _apply_jwt_settings(app, key_pair)

    # Proxy headers if running behind a reverse proxy (optional module)
    from socialapp.core import proxy

    proxy.init_app(app)

    from socialapp.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from socialapp.core import cors

    cors.init_app(app)

    _init_auth(app, key_pair)

    from socialapp.api import init_app as init_api

    init_api(app)

    from socialapp.core import errors

    errors.init_app(app)

    from socialapp import cli as app_cli

    app_cli.init_app(app)

    return app
