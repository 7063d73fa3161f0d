"""Subcommand modules for gitok.

Provides register_commands() which uses deferred imports to keep
``gitok --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    from gitok.commands.cache import cache

    cli.add_command(cache)

    from gitok.commands.list_cmd import list_cmd
    from gitok.commands.remove import remove
    from gitok.commands.store import store
    from gitok.commands.unlock import unlock

    cli.add_command(store)
    cli.add_command(unlock)
    cli.add_command(remove)
    cli.add_command(list_cmd)
