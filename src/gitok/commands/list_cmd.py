"""Command: list stored records."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gitok.commands._base import GitokCommand

if TYPE_CHECKING:
    from gitok.commands._context import AppContext


@click.command(
    "list",
    cls=GitokCommand,
    examples="""\
  gitok list
  gitok --json list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List stored usernames by domain (tokens stay encrypted)."""
    from gitok.services.manage import ManageService

    app.emit(ManageService(app.keystore).list_records())
