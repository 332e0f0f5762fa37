"""Flask CLI commands for refresh token housekeeping."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

LOGGER = logging.getLogger(__name__)


@click.group("tokens")
def tokens_cli() -> None:
    """Refresh token maintenance."""


@tokens_cli.command("purge-expired")
@with_appcontext
def purge_expired_command() -> None:
    """Delete refresh tokens past their expiry that nobody presented again."""
    store = current_app.extensions["auth"].refresh_store
    purged = store.purge_expired()
    LOGGER.info("Purged %d expired refresh tokens", purged)
    click.echo(f"Purged {purged} expired refresh token(s).")
