"""Click command classes that take an ``examples=`` text.

Commands built with these classes grow an eager ``--examples`` flag that
prints the text and exits, so ``--help`` stays short.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Adds ``--examples`` when the command is declared with example text."""

    examples: str | None
    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
            ctx.exit(0)


class GitokCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class GitokGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`GitokCommand`."""

    command_class = GitokCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
