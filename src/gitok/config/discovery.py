"""Locate ``gitok.toml``.

Search order: the file named by ``GITOK_CONFIG``; the nearest ``gitok.toml``
in the start directory or any parent; the per-user file
``$XDG_CONFIG_HOME/gitok/gitok.toml`` (``~/.config`` when unset).
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "gitok.toml"
CONFIG_ENV_VAR = "GITOK_CONFIG"


def user_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    config_home = Path(base) if base else Path.home() / ".config"
    return config_home / "gitok" / CONFIG_FILENAME


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file to use, or None.

    A ``GITOK_CONFIG`` that points nowhere disables discovery entirely.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

    user_file = user_config_path()
    return user_file if user_file.is_file() else None
