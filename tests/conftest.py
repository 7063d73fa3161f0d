"""Shared pytest fixtures and test doubles for gitok tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner, Result

from gitok.config.settings import GitokSettings
from gitok.domain.errors import ApprovalError, GitCommandError
from gitok.infrastructure.keystore import Keystore
from gitok.services.prompts import PromptField
from gitok.services.telemetry import disable_telemetry

_GIT_IDENTITY_VARS = (
    "GIT_AUTHOR_NAME",
    "GIT_AUTHOR_EMAIL",
    "GIT_COMMITTER_NAME",
    "GIT_COMMITTER_EMAIL",
    "GIT_DIR",
    "GIT_WORK_TREE",
)


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point HOME, git's global config, and the store at the temp directory.

    Every test runs from ``tmp_path/work`` with a fast KDF.
    """
    home = tmp_path / "home"
    home.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(home / ".gitconfig"))
    monkeypatch.setenv("GIT_TERMINAL_PROMPT", "0")
    monkeypatch.setenv("GITOK_STORE__ROOT", str(tmp_path / "store"))
    monkeypatch.setenv("GITOK_CRYPTO__KDF_ITERATIONS", "1000")
    monkeypatch.delenv("GITOK_CONFIG", raising=False)
    for var in _GIT_IDENTITY_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(work)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """Telemetry is a context variable; --verbose runs must not leak into later tests."""
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def store_root(tmp_path: Path) -> Path:
    return tmp_path / "store"


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    return tmp_path / "work"


@pytest.fixture
def settings(work_dir: Path) -> GitokSettings:
    return GitokSettings.from_cli(cwd=work_dir)


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class FakeGit:
    """Records git calls instead of running git."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.available = True
        self.approve_returncode = 0
        self.helpers: list[str] = ["cache --timeout=3600"]
        self.author: tuple[str, str] | None = None
        self.amend_returncode = 0

    def ensure_available(self) -> None:
        from gitok.domain.errors import MissingDependencyError

        if not self.available:
            raise MissingDependencyError("'git' executable not found on PATH")

    def approve(self, url: str, username: str, password: str) -> None:
        self.calls.append(("approve", url, username, password))
        if self.approve_returncode:
            raise ApprovalError(
                f"git credential approve failed for {url}",
                returncode=self.approve_returncode,
                stderr="fatal: helper crashed",
            )

    def credential_helpers(self) -> list[str]:
        return list(self.helpers)

    def active_helper(self) -> str | None:
        return self.helpers[-1] if self.helpers else None

    def enable_cache(self, timeout: int) -> str:
        helper = f"cache --timeout={timeout}"
        self.calls.append(("enable_cache", timeout))
        self.helpers = [helper]
        return helper

    def set_identity(self, name: str | None, email: str | None) -> list[str]:
        self.calls.append(("set_identity", name, email))
        return [k for k, v in (("user.name", name), ("user.email", email)) if v]

    def last_commit_author(self, worktree: Path) -> tuple[str, str] | None:
        return self.author

    def amend_reset_author(self, worktree: Path) -> None:
        self.calls.append(("amend", worktree))
        if self.amend_returncode:
            raise GitCommandError(
                "git commit failed", returncode=self.amend_returncode, stderr="nothing to amend"
            )

    def call_names(self) -> list[str]:
        return [c[0] for c in self.calls]


class ScriptedPrompter:
    """Answers prompts from a script and records the order they were asked in."""

    def __init__(
        self,
        answers: dict[str, str] | None = None,
        *,
        choice: str | None = None,
    ) -> None:
        self.answers = answers or {}
        self.choice = choice
        self.events: list[tuple[str, str]] = []

    def ask(self, field: PromptField) -> str:
        self.events.append(("ask", field.label))
        if field.label in self.answers:
            return self.answers[field.label]
        return field.default or ""

    def choose(self, label: str, choices: list[str]) -> str | None:
        self.events.append(("choose", ",".join(choices)))
        return self.choice

    def notify(self, message: str) -> None:
        self.events.append(("notify", message))

    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.events]


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()


@pytest.fixture
def keystore(settings: GitokSettings, fake_git: FakeGit, work_dir: Path) -> Keystore:
    """Keystore over the temp store with a recording git client and plugins loaded."""
    ks = Keystore(settings, git=fake_git, cwd=work_dir)  # type: ignore[arg-type]
    ks.init_plugins()
    return ks


@pytest.fixture
def seed(keystore: Keystore) -> Callable[..., Path]:
    """Create a record directly through the token store."""

    def _seed(
        domain: str,
        username: str,
        token: str = "tok123",
        *,
        passphrase: str = "pw",
        name: str | None = None,
        email: str | None = None,
    ) -> Path:
        return keystore.store.create(
            domain,
            username,
            token,
            passphrase=passphrase,
            name=name,
            email=email,
            force=True,
        )

    return _seed


@pytest.fixture
def scripted() -> type[ScriptedPrompter]:
    """The scripted prompter class (test modules cannot import conftest directly)."""
    return ScriptedPrompter


@pytest.fixture
def gitok(cli_runner: CliRunner) -> Callable[..., Result]:
    """Invoke the root CLI with optional stdin lines."""
    from gitok.cli import cli

    def _invoke(*args: str, input: str | None = None) -> Result:
        return cli_runner.invoke(cli, list(args), input=input)

    return _invoke


@pytest.fixture
def cli_store(gitok: Callable[..., Result]) -> Callable[..., Result]:
    """Store a record through the CLI with passphrase ``pw`` and no identity prompts."""

    def _store(username: str, token: str = "tok123", domain: str = "github.com") -> Result:
        result = gitok(
            "store", username, token, "--domain", domain, "--only-token", input="pw\npw\n"
        )
        assert result.exit_code == 0, result.output
        return result

    return _store
