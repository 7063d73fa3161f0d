"""Tests for the built-in advisory plugin."""

from __future__ import annotations

from pathlib import Path

import pytest

from gitok.config.models import AdvisoriesConfig
from gitok.plugins.builtins.advisories import AdvisoryPlugin


@pytest.fixture
def repo_dir(work_dir: Path) -> Path:
    (work_dir / ".git").mkdir()
    return work_dir


def _advise(plugin: AdvisoryPlugin, cwd: Path, name=None, email=None) -> list[str]:  # noqa: ANN001
    return plugin.post_unlock(
        domain="github.com", username="adam", name=name, email=email, cwd=cwd
    )


class TestCacheHelper:
    def test_cache_helper_is_quiet(self, fake_git, work_dir) -> None:
        assert _advise(AdvisoryPlugin(fake_git), work_dir) == []

    def test_no_helper(self, fake_git, work_dir) -> None:
        fake_git.helpers = []
        [message] = _advise(AdvisoryPlugin(fake_git), work_dir)
        assert "'none'" in message
        assert "gitok cache enable" in message

    def test_other_helper(self, fake_git, work_dir) -> None:
        fake_git.helpers = ["cache", "osxkeychain"]
        [message] = _advise(AdvisoryPlugin(fake_git), work_dir)
        assert "'osxkeychain'" in message

    def test_disabled(self, fake_git, work_dir) -> None:
        fake_git.helpers = []
        plugin = AdvisoryPlugin(fake_git, AdvisoriesConfig(cache_helper=False))
        assert _advise(plugin, work_dir) == []


class TestAuthorMismatch:
    def test_mismatch_in_worktree(self, fake_git, repo_dir) -> None:
        fake_git.author = ("Eve", "eve@example.com")
        [message] = _advise(AdvisoryPlugin(fake_git), repo_dir, "Adam", "adam@example.com")
        assert "Eve <eve@example.com>" in message
        assert "Adam <adam@example.com>" in message
        assert "--redo-last-commit" in message

    def test_email_only_compares_email(self, fake_git, repo_dir) -> None:
        fake_git.author = ("Whoever", "adam@example.com")
        assert _advise(AdvisoryPlugin(fake_git), repo_dir, email="adam@example.com") == []

    def test_nested_directory_finds_worktree(self, fake_git, repo_dir) -> None:
        nested = repo_dir / "src" / "pkg"
        nested.mkdir(parents=True)
        fake_git.author = ("Eve", "eve@example.com")
        assert len(_advise(AdvisoryPlugin(fake_git), nested, "Adam")) == 1

    def test_outside_worktree(self, fake_git, work_dir) -> None:
        fake_git.author = ("Eve", "eve@example.com")
        assert _advise(AdvisoryPlugin(fake_git), work_dir, "Adam") == []

    def test_no_commits(self, fake_git, repo_dir) -> None:
        assert _advise(AdvisoryPlugin(fake_git), repo_dir, "Adam") == []

    def test_no_stored_identity(self, fake_git, repo_dir) -> None:
        fake_git.author = ("Eve", "eve@example.com")
        assert _advise(AdvisoryPlugin(fake_git), repo_dir) == []

    def test_disabled(self, fake_git, repo_dir) -> None:
        fake_git.author = ("Eve", "eve@example.com")
        plugin = AdvisoryPlugin(fake_git, AdvisoriesConfig(author_mismatch=False))
        assert _advise(plugin, repo_dir, "Adam") == []
