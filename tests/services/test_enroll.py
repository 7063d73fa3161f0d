"""Tests for EnrollService — the token creation flow."""

from __future__ import annotations

import pluggy

from gitok.config.settings import GitokSettings
from gitok.infrastructure.keystore import Keystore
from gitok.services.enroll import EnrollService

hookimpl = pluggy.HookimplMarker("gitok")

_ANSWERS = {
    "Domain": "github.com",
    "Name (optional)": "Adam",
    "Email (optional)": "adam@example.com",
    "Passphrase": "pw",
}


class TestStore:
    def test_round_trip(self, keystore, scripted) -> None:
        result = EnrollService(keystore, scripted(_ANSWERS)).store("adam", "tok123")

        assert result.ok, result.error
        assert result.data["domain"] == "github.com"
        assert result.data["overwritten"] is False
        assert keystore.store.read_token("github.com", "adam", "pw") == "tok123"
        identity = keystore.store.read_optional("github.com", "adam")
        assert (identity.name, identity.email) == ("Adam", "adam@example.com")

    def test_prompt_order(self, keystore, scripted) -> None:
        prompter = scripted(_ANSWERS)
        EnrollService(keystore, prompter).store("adam", "tok123")
        assert [label for _, label in prompter.events] == [
            "Domain",
            "Name (optional)",
            "Email (optional)",
            "Passphrase",
        ]

    def test_domain_defaults_to_configured(self, keystore, scripted) -> None:
        answers = {k: v for k, v in _ANSWERS.items() if k != "Domain"}
        result = EnrollService(keystore, scripted(answers)).store("adam", "tok123")
        assert result.data["domain"] == "github.com"

    def test_arguments_skip_prompts(self, keystore, scripted) -> None:
        prompter = scripted()
        result = EnrollService(keystore, prompter).store(
            "adam",
            "tok123",
            domain="gitlab.com",
            name="Adam",
            email="adam@example.com",
            passphrase="pw",
        )
        assert result.ok
        assert prompter.events == []
        assert result.data["path"].endswith("gitlab.com/adam")

    def test_blank_identity_is_not_written(self, keystore, scripted, store_root) -> None:
        answers = {"Domain": "github.com", "Passphrase": "pw"}
        result = EnrollService(keystore, scripted(answers)).store("adam", "tok123")
        assert result.ok
        record = store_root / "github.com" / "adam"
        assert sorted(p.name for p in record.iterdir()) == ["token"]
        assert "name" not in result.data

    def test_only_token_skips_identity(self, keystore, scripted) -> None:
        prompter = scripted(_ANSWERS)
        EnrollService(keystore, prompter).store("adam", "tok123", only_token=True)
        assert [label for _, label in prompter.events] == ["Domain", "Passphrase"]

    def test_empty_token_rejected(self, keystore, scripted) -> None:
        prompter = scripted(_ANSWERS)
        result = EnrollService(keystore, prompter).store("adam", "")
        assert result.error.code == "BAD_ARGUMENTS"
        assert prompter.events == []

    def test_invalid_domain(self, keystore, scripted) -> None:
        answers = {**_ANSWERS, "Domain": "../etc"}
        result = EnrollService(keystore, scripted(answers)).store("adam", "tok123")
        assert result.error.code == "BAD_ARGUMENTS"

    def test_multiline_token_rejected(self, keystore, scripted) -> None:
        prompter = scripted(_ANSWERS)
        result = EnrollService(keystore, prompter).store("adam", "tok\nurl=https://evil.example")
        assert result.error.code == "BAD_ARGUMENTS"
        assert prompter.events == []

    def test_encryption_failure_can_be_retried(self, keystore) -> None:
        service = EnrollService(keystore)

        first = service.store("adam", "tok123", domain="github.com", passphrase="")
        assert first.error.code == "ENCRYPTION_FAILED"
        assert not keystore.index.find("adam").found

        second = service.store("adam", "tok123", domain="github.com", passphrase="pw")
        assert second.ok, second.error
        assert keystore.store.read_token("github.com", "adam", "pw") == "tok123"

    def test_unusable_store_root(self, fake_git, work_dir, tmp_path, monkeypatch) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        monkeypatch.setenv("GITOK_STORE__ROOT", str(blocker / "store"))
        keystore = Keystore(GitokSettings.from_cli(cwd=work_dir), git=fake_git, cwd=work_dir)

        result = EnrollService(keystore).store(
            "adam", "tok123", domain="github.com", passphrase="pw"
        )

        assert result.error.code == "ENCRYPTION_FAILED"
        assert "Could not create" in result.error.message

    def test_empty_passphrase(self, keystore, scripted) -> None:
        answers = {**_ANSWERS, "Passphrase": ""}
        result = EnrollService(keystore, scripted(answers)).store("adam", "tok123")
        assert result.error.code == "BAD_ARGUMENTS"
        assert not keystore.store.exists("github.com", "adam")


class TestOverwrite:
    def test_existing_record_fails_before_passphrase(self, keystore, seed, scripted) -> None:
        seed("github.com", "adam", "old")
        prompter = scripted(_ANSWERS)

        result = EnrollService(keystore, prompter).store("adam", "new")

        assert result.error.code == "ALREADY_EXISTS"
        assert ("ask", "Passphrase") not in prompter.events
        assert keystore.store.read_token("github.com", "adam", "pw") == "old"

    def test_existing_username_is_announced(self, keystore, seed, scripted) -> None:
        seed("gitlab.com", "adam")
        prompter = scripted(_ANSWERS)
        result = EnrollService(keystore, prompter).store("adam", "tok123")
        assert result.ok
        assert prompter.events[0] == ("notify", "'adam' is already stored under: gitlab.com")

    def test_announcement_becomes_warning_without_prompter(self, keystore, seed) -> None:
        seed("gitlab.com", "adam")
        result = EnrollService(keystore).store(
            "adam", "tok123", domain="github.com", passphrase="pw"
        )
        assert result.ok
        assert result.warnings == ["'adam' is already stored under: gitlab.com"]

    def test_force_replaces_token(self, keystore, seed, scripted) -> None:
        seed("github.com", "adam", "old", name="Old")
        result = EnrollService(keystore, scripted(_ANSWERS)).store("adam", "new", force=True)

        assert result.ok
        assert result.data["overwritten"] is True
        assert keystore.store.read_token("github.com", "adam", "pw") == "new"
        assert keystore.store.read_optional("github.com", "adam").name == "Adam"

    def test_force_with_blank_identity_keeps_old_values(self, keystore, seed, scripted) -> None:
        seed("github.com", "adam", "old", name="Old", email="old@example.com")
        answers = {"Domain": "github.com", "Passphrase": "new-pw"}

        result = EnrollService(keystore, scripted(answers)).store("adam", "new", force=True)

        assert result.ok
        identity = keystore.store.read_optional("github.com", "adam")
        assert (identity.name, identity.email) == ("Old", "old@example.com")
        assert keystore.store.read_token("github.com", "adam", "new-pw") == "new"

    def test_same_username_other_domain_is_independent(self, keystore, seed, scripted) -> None:
        seed("gitlab.com", "adam", "gl")
        EnrollService(keystore, scripted(_ANSWERS)).store("adam", "gh")
        assert keystore.store.read_token("gitlab.com", "adam", "pw") == "gl"
        assert keystore.store.read_token("github.com", "adam", "pw") == "gh"


class TestEvents:
    def test_post_store_hook(self, keystore, scripted) -> None:
        seen: list[tuple[str, str]] = []

        class StoreRecorder:
            @hookimpl
            def post_store(self, domain: str, username: str, path: str) -> None:
                seen.append((domain, username))

        keystore.plugin_manager.register_plugin(StoreRecorder(), name="recorder")
        EnrollService(keystore, scripted(_ANSWERS)).store("adam", "tok123")
        assert seen == [("github.com", "adam")]
