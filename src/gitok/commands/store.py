"""Command: encrypt a token into the store."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click

from gitok.commands._base import GitokCommand
from gitok.commands._prompts import ClickPrompter

if TYPE_CHECKING:
    from gitok.commands._context import AppContext


@click.command(
    cls=GitokCommand,
    examples="""\
  gitok store adam ghp_abc123
  gitok store adam ghp_abc123 --domain gitlab.com --name "Adam" --email adam@example.com
  echo ghp_abc123 | gitok store adam --domain github.com
  gitok store adam --force --only-token""",
)
@click.argument("username")
@click.argument("token", required=False)
@click.option("-d", "--domain", default=None, help="Target domain (prompted when omitted).")
@click.option("--name", default=None, help="Display name for git's user.name.")
@click.option("--email", default=None, help="Email for git's user.email.")
@click.option("-f", "--force", is_flag=True, help="Overwrite an existing token.")
@click.option("--only-token", is_flag=True, help="Do not ask for or change name/email.")
@click.pass_obj
def store(
    app: AppContext,
    username: str,
    token: str | None,
    domain: str | None,
    name: str | None,
    email: str | None,
    force: bool,
    only_token: bool,
) -> None:
    """Encrypt TOKEN for USERNAME. TOKEN may also be piped on stdin."""
    from gitok.services.enroll import EnrollService

    prompter = app.prompter
    if token is None:
        if sys.stdin.isatty():
            token = click.prompt("Token", hide_input=True, err=True)
        else:
            token = sys.stdin.readline()
            # stdin is spent on the token; only hidden prompts remain usable.
            prompter = ClickPrompter(interactive=False)
    token = token.strip()

    result = EnrollService(app.keystore, prompter).store(
        username,
        token,
        domain=domain,
        name=name,
        email=email,
        force=force,
        only_token=only_token,
    )
    app.emit(result)
