"""Command: decrypt a token and approve it with git's credential helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gitok.commands._base import GitokCommand

if TYPE_CHECKING:
    from gitok.commands._context import AppContext


@click.command(
    cls=GitokCommand,
    examples="""\
  gitok unlock adam
  gitok unlock adam --domain gitlab.com
  gitok unlock adam --only-token
  gitok unlock adam --redo-last-commit
  gitok -q unlock adam | pbcopy""",
)
@click.argument("username")
@click.option("-d", "--domain", default=None, help="Domain to use when USERNAME is ambiguous.")
@click.option("--only-token", is_flag=True, help="Do not set git's global user.name/user.email.")
@click.option(
    "--redo-last-commit",
    is_flag=True,
    help="Amend the last commit with the refreshed author after unlocking.",
)
@click.pass_obj
def unlock(
    app: AppContext,
    username: str,
    domain: str | None,
    only_token: bool,
    redo_last_commit: bool,
) -> None:
    """Decrypt USERNAME's token and hand it to git's credential cache."""
    from gitok.services.unlock import UnlockService

    result = UnlockService(app.keystore, app.prompter).unlock(
        username,
        domain=domain,
        only_token=only_token,
        redo_last_commit=redo_last_commit,
    )
    app.emit(result)
