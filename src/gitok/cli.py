"""``gitok`` entry point: global options, settings, and the command table."""

from __future__ import annotations

from typing import Any

import click

from gitok import __version__
from gitok.commands import register_commands
from gitok.commands._base import GitokGroup
from gitok.commands._context import AppContext
from gitok.config.settings import GitokSettings


@click.group(
    "gitok",
    cls=GitokGroup,
    invoke_without_command=True,
    examples="""\
  gitok store adam ghp_abc123 --domain github.com
  gitok unlock adam
  gitok --json list
  gitok --store-dir /mnt/usb/tokens unlock adam""",
)
@click.version_option(version=__version__, prog_name="gitok")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only the essentials.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and timing spans.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option("--no-interact", is_flag=True, help="Never ask; use defaults and fail on ambiguity.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Read this gitok.toml instead of searching for one.",
)
@click.option(
    "--store-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Token store directory (default ~/.gitok).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: str | None,
    store_dir: str | None,
    **flags: Any,
) -> None:
    """gitok: passphrase-encrypted git tokens, handed to git's credential cache."""
    settings = GitokSettings.from_cli(config_path=config_path, store_dir=store_dir, **flags)
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
