"""AppContext: the object every command receives through ``@click.pass_obj``.

It owns the per-invocation settings, the terminal prompter, and a keystore
that is only built when a command actually needs the store.
"""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING

import click

from gitok.commands._prompts import ClickPrompter
from gitok.config.logging import configure_logging
from gitok.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from gitok.config.settings import GitokSettings
    from gitok.infrastructure.keystore import Keystore
    from gitok.services.result import ServiceResult


class AppContext:
    def __init__(self, settings: GitokSettings) -> None:
        self.settings = settings
        self.prompter = ClickPrompter(interactive=not settings.no_interact)
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            from gitok.services.telemetry import enable_telemetry

            enable_telemetry()

    @cached_property
    def keystore(self) -> Keystore:
        """Store, git client and plugins; ``--help`` never gets this far."""
        from gitok.infrastructure.keystore import Keystore

        keystore = Keystore(self.settings)
        keystore.init_plugins()
        return keystore

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and, on failure, exit with ``result.exit_code``.

        Results go to stdout and warnings to stderr. A failure goes to stderr
        with a pointer to the command's help (omitted under ``--json``).
        """
        text = format_result(result, settings=self.output)
        if result.ok:
            click.echo(text)
            if not self.output.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
            return

        click.echo(text, err=True)
        ctx = click.get_current_context(silent=True)
        if ctx is not None and not self.output.json_output:
            click.echo(f"Try '{ctx.command_path} --help' for help.", err=True)
        raise SystemExit(result.exit_code)
