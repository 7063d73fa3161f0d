"""Command group: git credential cache configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gitok.commands._base import GitokGroup

if TYPE_CHECKING:
    from gitok.commands._context import AppContext


@click.group(
    cls=GitokGroup,
    examples="""\
  gitok cache enable
  gitok cache enable --timeout 28800
  gitok cache status""",
)
def cache() -> None:
    """Configure git's in-memory credential cache."""


@cache.command(
    examples="""\
  gitok cache enable --timeout 3600""",
)
@click.option(
    "-t",
    "--timeout",
    type=click.IntRange(min=1),
    default=None,
    help="Seconds git keeps an approved credential (default from config).",
)
@click.pass_obj
def enable(app: AppContext, timeout: int | None) -> None:
    """Set the global credential helper to 'cache --timeout=SECONDS'."""
    from gitok.services.manage import ManageService

    app.emit(ManageService(app.keystore).enable_cache(timeout))


@cache.command()
@click.pass_obj
def status(app: AppContext) -> None:
    """Show the active credential helper."""
    from gitok.services.manage import ManageService

    app.emit(ManageService(app.keystore).cache_status())
