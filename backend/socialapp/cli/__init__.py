"""Command-line interface registration for the Flask application."""

from __future__ import annotations

from flask import Flask

from .keys import keys_cli
from .tokens import tokens_cli


def init_app(app: Flask) -> None:
    """Register application-specific CLI command groups.

    Parameters
    ----------
    app:
        Flask application instance whose CLI registry receives the ``keys``
        and ``tokens`` groups.

    Notes
    -----
    ``keys`` is also published as a ``flask.commands`` entry point so it can
    run before any key material exists (the app itself refuses to start then).
    """
    app.cli.add_command(keys_cli)
    app.cli.add_command(tokens_cli)
