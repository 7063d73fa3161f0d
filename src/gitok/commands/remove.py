"""Command: delete a stored token and its identity."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gitok.commands._base import GitokCommand

if TYPE_CHECKING:
    from gitok.commands._context import AppContext


@click.command(
    cls=GitokCommand,
    examples="""\
  gitok remove adam
  gitok remove adam --domain gitlab.com""",
)
@click.argument("username")
@click.option("-d", "--domain", default=None, help="Domain to use when USERNAME is ambiguous.")
@click.pass_obj
def remove(app: AppContext, username: str, domain: str | None) -> None:
    """Remove USERNAME's record (token, name, and email)."""
    from gitok.services.manage import ManageService

    app.emit(ManageService(app.keystore, app.prompter).remove(username, domain=domain))
