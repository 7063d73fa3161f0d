"""Built-in advisory checks run after a credential is approved.

Two non-fatal checks:

* the last commit in the enclosing worktree was authored by someone other
  than the identity stored with the token;
* git's credential helper is not the in-memory cache, so the approved
  credential will not be remembered.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pluggy

from gitok.config.models import AdvisoriesConfig
from gitok.infrastructure.git import GitClient, find_worktree, is_cache_helper

hookimpl = pluggy.HookimplMarker("gitok")

logger = logging.getLogger(__name__)


class AdvisoryPlugin:
    """Emits warnings about author identity and credential caching."""

    def __init__(self, git: GitClient, config: AdvisoriesConfig | None = None) -> None:
        self._git = git
        self._config = config or AdvisoriesConfig()

    @hookimpl
    def post_unlock(
        self,
        domain: str,
        username: str,
        name: str | None,
        email: str | None,
        cwd: Path,
    ) -> list[str]:
        advisories: list[str] = []
        if self._config.author_mismatch:
            mismatch = self._author_mismatch(name, email, cwd)
            if mismatch:
                advisories.append(mismatch)
        if self._config.cache_helper:
            helper = self._git.active_helper()
            if not is_cache_helper(helper):
                current = helper or "none"
                advisories.append(
                    f"Credential helper is '{current}', not the cache; "
                    "run 'gitok cache enable' so the token is remembered"
                )
        return advisories

    def _author_mismatch(self, name: str | None, email: str | None, cwd: Path) -> str | None:
        if not name and not email:
            return None
        worktree = find_worktree(cwd)
        if worktree is None:
            return None
        author = self._git.last_commit_author(worktree)
        if author is None:
            return None

        author_name, author_email = author
        if (name and name != author_name) or (email and email != author_email):
            logger.debug("Last commit author differs from stored identity in %s", worktree)
            return (
                f"Last commit in {worktree} was authored by {author_name} <{author_email}>, "
                f"not {name or author_name} <{email or author_email}>; "
                "use 'gitok unlock --redo-last-commit' to fix it"
            )
        return None
