"""WSGI proxy middleware configuration helper."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Trust ``X-Forwarded-*`` from ``PROXYFIX_HOPS`` upstream proxies.

    Parameters
    ----------
    app: flask.Flask
        Application whose WSGI pipeline is wrapped.

    Notes
    -----
    Controlled by ``USE_PROXYFIX`` (default ``True``). TLS terminates at the
    proxy, so ``X-Forwarded-Proto`` decides whether the request counts as
    secure, and ``X-Forwarded-For`` is the address the login rate limit keys on.
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = int(app.config.get("PROXYFIX_HOPS", 1))
    app.wsgi_app = ProxyFix(  # type: ignore[method-assign]
        app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops
    )
