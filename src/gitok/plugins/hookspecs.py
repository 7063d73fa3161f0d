"""Pluggy hook specifications for gitok lifecycle events.

Hooks run synchronously after the primary operation has succeeded.
``post_unlock`` implementations may return advisory messages that are
shown to the operator as warnings.
"""

from __future__ import annotations

from pathlib import Path

import pluggy

hookspec = pluggy.HookspecMarker("gitok")


class GitokHookSpec:
    """Hook specifications for the gitok plugin system."""

    @hookspec
    def post_store(self, domain: str, username: str, path: str) -> None:
        """Called after a token has been encrypted into the store."""

    @hookspec
    def post_unlock(
        self,
        domain: str,
        username: str,
        name: str | None,
        email: str | None,
        cwd: Path,
    ) -> list[str] | None:
        """Called after a credential has been approved. Return advisory messages."""

    @hookspec
    def post_remove(self, domain: str, username: str) -> None:
        """Called after a record has been removed."""
