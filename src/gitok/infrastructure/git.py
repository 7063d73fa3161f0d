"""Git subprocess client — credential approval and host identity calls.

Every call shells out to the ``git`` executable. Failures surface as
:class:`~gitok.domain.errors.GitCommandError` carrying git's exit code so
the CLI can propagate it. Read-only queries used for advisories return
None instead of raising.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from gitok.domain.errors import ApprovalError, GitCommandError, MissingDependencyError

logger = logging.getLogger(__name__)

CACHE_HELPER = "cache"


def find_worktree(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) to the nearest directory holding ``.git``.

    ``.git`` may be a directory or a file (linked worktrees, submodules).
    Stops at the filesystem root.
    """
    current = (start or Path.cwd()).resolve()
    while True:
        if (current / ".git").exists():
            return current
        parent = current.parent
        if parent == current:
            return None
        current = parent


def is_cache_helper(helper: str | None) -> bool:
    """Whether a ``credential.helper`` value names git's in-memory cache."""
    if not helper:
        return False
    program = helper.split()[0]
    return program == CACHE_HELPER or program.endswith("git-credential-cache")


class GitClient:
    """Thin wrapper over the git commands gitok needs."""

    def __init__(self, executable: str = "git") -> None:
        self._executable = executable

    def ensure_available(self) -> None:
        """Raise :class:`MissingDependencyError` if git is not on ``PATH``."""
        if shutil.which(self._executable) is None:
            msg = f"'{self._executable}' executable not found on PATH"
            raise MissingDependencyError(msg)

    def _run_git(
        self,
        *args: str,
        cwd: Path | None = None,
        stdin: str | None = None,
        check: bool = True,
    ) -> subprocess.CompletedProcess[str]:
        """Run a git command. Raises :class:`GitCommandError` on non-zero exit."""
        try:
            result = subprocess.run(
                [self._executable, *args],
                cwd=cwd,
                input=stdin,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise MissingDependencyError(f"Could not run git: {exc}") from exc
        if check and result.returncode != 0:
            msg = f"git {args[0]} failed with exit code {result.returncode}"
            raise GitCommandError(msg, returncode=result.returncode, stderr=result.stderr.strip())
        return result

    # ------------------------------------------------------------------
    # Credential subsystem
    # ------------------------------------------------------------------

    def approve(self, url: str, username: str, password: str) -> None:
        """Tell git's credential helpers that this credential is valid."""
        if any(ch in value for value in (url, username, password) for ch in "\n\r\x00"):
            raise ApprovalError(f"Credential for {url!r} contains a line break", returncode=1)
        payload = f"url={url}\nusername={username}\npassword={password}\n\n"
        try:
            self._run_git("credential", "approve", stdin=payload)
        except GitCommandError as exc:
            raise ApprovalError(
                f"git credential approve failed for {url}",
                returncode=exc.returncode,
                stderr=exc.stderr,
            ) from exc
        logger.debug("Approved credential for %s as %s", url, username)

    def credential_helpers(self) -> list[str]:
        """All configured ``credential.helper`` values, in precedence order."""
        try:
            result = self._run_git("config", "--get-all", "credential.helper", check=False)
        except MissingDependencyError:
            return []
        if result.returncode != 0:
            return []
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def active_helper(self) -> str | None:
        """The effective credential helper, or None when none is configured."""
        helpers = self.credential_helpers()
        return helpers[-1] if helpers else None

    def enable_cache(self, timeout: int) -> str:
        """Replace every global credential helper with git's in-memory cache."""
        helper = f"{CACHE_HELPER} --timeout={timeout}"
        self._run_git("config", "--global", "--replace-all", "credential.helper", helper)
        return helper

    # ------------------------------------------------------------------
    # Identity and commits
    # ------------------------------------------------------------------

    def set_identity(self, name: str | None, email: str | None) -> list[str]:
        """Set global ``user.name`` / ``user.email`` for the non-empty values.

        Returns the config keys that were written.
        """
        written: list[str] = []
        for key, value in (("user.name", name), ("user.email", email)):
            if value:
                self._run_git("config", "--global", key, value)
                written.append(key)
        return written

    def last_commit_author(self, worktree: Path) -> tuple[str, str] | None:
        """``(name, email)`` of HEAD's author, or None without commits."""
        try:
            result = self._run_git("log", "-1", "--format=%an%x00%ae", cwd=worktree, check=False)
        except MissingDependencyError:
            return None
        if result.returncode != 0 or "\x00" not in result.stdout:
            return None
        name, email = result.stdout.rstrip("\n").split("\x00", 1)
        return name, email

    def amend_reset_author(self, worktree: Path) -> None:
        """Rewrite HEAD's author to the current identity, keeping the message."""
        self._run_git("commit", "--amend", "--no-edit", "--reset-author", cwd=worktree)
