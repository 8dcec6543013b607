"""Flask CLI commands for refresh token maintenance."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from authcore.services._shared.errors import ServiceError
from authcore.services.auth import get_auth_service

LOGGER = logging.getLogger(__name__)


@click.group("tokens")
@click.option("--verbose", is_flag=True, help="Enable verbose logging.")
def tokens_cli(verbose: bool) -> None:
    """Refresh token maintenance commands."""
    LOGGER.setLevel(logging.DEBUG if verbose else logging.INFO)


@tokens_cli.command("purge-expired")
@with_appcontext
def purge_expired() -> None:
    """Delete refresh token records whose expiry has passed.

    Revoked and non-revoked records are both removed. Meant to run from a
    scheduler (cron, systemd timer), never on the request path.
    """
    try:
        purged = get_auth_service().purge_expired()
    except ServiceError as exc:
        LOGGER.error("tokens.purge_failed", exc_info=True)
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Purged {purged} expired refresh token(s).")
