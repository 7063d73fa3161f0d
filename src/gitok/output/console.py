"""Buffered rich consoles.

Renderers draw on a console backed by ``StringIO`` and hand back the text, so
the CLI decides where it goes (stdout for results, stderr for failures).
Rich drops colour codes on its own when the buffer is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

GITOK_THEME = Theme(
    {
        "gitok.ok": "bold green",
        "gitok.error": "bold red",
        "gitok.op": "bold cyan",
        "gitok.key": "dim",
        "gitok.domain": "bold blue",
        "gitok.path": "dim",
        "gitok.secret": "bold magenta",
    }
)


def create_console(*, width: int = 120) -> Console:
    # Paths and tokens must survive copy-paste, so long lines are never wrapped.
    return Console(
        file=StringIO(),
        theme=GITOK_THEME,
        highlight=False,
        soft_wrap=True,
        width=width,
    )


def get_output(console: Console) -> str:
    buffer = console.file
    assert isinstance(buffer, StringIO)
    return buffer.getvalue()
