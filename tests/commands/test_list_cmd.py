"""Tests for the list command."""

from __future__ import annotations

import json


class TestList:
    def test_empty(self, gitok) -> None:
        result = gitok("list")
        assert result.exit_code == 0
        assert "No tokens stored." in result.stdout

    def test_table(self, gitok, cli_store) -> None:
        cli_store("adam", domain="github.com")
        cli_store("eve", domain="gitlab.com")

        result = gitok("list")

        assert result.exit_code == 0
        assert "adam" in result.stdout
        assert "gitlab.com" in result.stdout
        assert "tok123" not in result.stdout

    def test_json(self, gitok, cli_store) -> None:
        cli_store("adam")
        data = json.loads(gitok("--json", "list").stdout)["data"]
        assert data["count"] == 1
        assert data["items"] == [{"domain": "github.com", "username": "adam", "has_token": True}]

    def test_store_dir_option(self, gitok, tmp_path) -> None:
        other = tmp_path / "elsewhere"
        (other / "example.org" / "zoe").mkdir(parents=True)
        result = gitok("--json", "--store-dir", str(other), "list")
        payload = json.loads(result.stdout)
        assert payload["data"]["root"] == str(other)
        assert payload["data"]["items"][0]["username"] == "zoe"
