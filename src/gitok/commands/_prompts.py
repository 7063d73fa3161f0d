"""Click-backed implementation of the service Prompter protocol.

Prompts go to stderr so stdout carries only the command result.
"""

from __future__ import annotations

import click

from gitok.services.prompts import PromptField


class ClickPrompter:
    """Terminal prompts via ``click.prompt``.

    When not interactive, visible fields resolve to their defaults and
    ``choose`` declines. Secret fields are always prompted: click reads
    hidden input from the controlling terminal even when stdin is a pipe.
    """

    def __init__(self, *, interactive: bool = True) -> None:
        self._interactive = interactive

    def ask(self, field: PromptField) -> str:
        if field.secret:
            return click.prompt(
                field.label,
                hide_input=True,
                confirmation_prompt=field.confirm,
                err=True,
            )
        if not self._interactive:
            return field.default or ""
        return click.prompt(
            field.label,
            default=field.default,
            show_default=bool(field.default),
            err=True,
        )

    def choose(self, label: str, choices: list[str]) -> str | None:
        if not self._interactive:
            return None
        click.echo(f"{label}: {', '.join(choices)}", err=True)
        return click.prompt("Domain", err=True).strip()

    def notify(self, message: str) -> None:
        click.echo(message, err=True)
