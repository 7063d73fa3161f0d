"""UnlockService — decrypt a stored token and hand it to git's credential cache.

Pipeline: RESOLVE → IDENTITY → DECRYPT → APPROVE → ADVISE

The domain is resolved (and any ambiguity settled with the operator)
before the passphrase prompt, so a doomed lookup never costs a passphrase.
Each stage is a single attempt; any failure ends the invocation.
"""

from __future__ import annotations

import logging
from pathlib import Path

from gitok.domain.errors import GitCommandError, GitokError
from gitok.infrastructure.git import find_worktree
from gitok.services.base import BaseService, _Failure
from gitok.services.prompts import PromptField
from gitok.services.result import ServiceResult
from gitok.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

PASSPHRASE_FIELD = PromptField(label="Passphrase", secret=True)


class UnlockService(BaseService):
    """The decrypt-and-approve flow."""

    @traced
    def unlock(
        self,
        username: str,
        *,
        domain: str | None = None,
        passphrase: str | None = None,
        only_token: bool = False,
        redo_last_commit: bool = False,
    ) -> ServiceResult:
        """Decrypt *username*'s token and approve it for ``https://{domain}``.

        Args:
            username: Stored username to look up across all domains.
            domain: Explicit domain; skips the ambiguity prompt.
            passphrase: Passphrase to use instead of prompting.
            only_token: Skip setting git's global user.name/user.email.
            redo_last_commit: Amend HEAD with the refreshed author afterwards.
        """
        op = "unlock"
        warnings: list[str] = []
        git = self._keystore.git
        store = self._keystore.store

        # ── RESOLVE ──────────────────────────────────────────
        try:
            git.ensure_available()
            with trace_span("resolve"):
                domain = self._resolve_domain(op, username, domain)
        except _Failure as failure:
            return failure.result
        except GitokError as exc:
            return self._from_exception(op, exc)

        identity = store.read_optional(domain, username)
        url = f"https://{domain}"

        try:
            # ── IDENTITY ─────────────────────────────────────
            identity_keys: list[str] = []
            if not only_token and not identity.empty:
                with trace_span("set_identity"):
                    identity_keys = git.set_identity(identity.name, identity.email)

            # ── DECRYPT ──────────────────────────────────────
            if passphrase is None:
                passphrase = self._ask(op, PASSPHRASE_FIELD)
            with trace_span("decrypt"):
                token = store.read_token(domain, username, passphrase)

            # ── APPROVE ──────────────────────────────────────
            with trace_span("approve"):
                git.approve(url, username, token)
        except _Failure as failure:
            return failure.result
        except GitokError as exc:
            return self._from_exception(op, exc)

        logger.info("Approved %s for %s", username, url)
        data: dict[str, object] = {
            "domain": domain,
            "username": username,
            "url": url,
            "token": token,
            **identity.to_dict(),
        }
        if identity_keys:
            data["identity_set"] = identity_keys

        # ── ADVISE ───────────────────────────────────────────
        cwd = self._keystore.cwd
        if redo_last_commit:
            amended = self._redo_last_commit(cwd, warnings)
            if amended:
                data["amended"] = amended

        for advisories in self._dispatch_event(
            "post_unlock",
            {
                "domain": domain,
                "username": username,
                "name": identity.name,
                "email": identity.email,
                "cwd": cwd,
            },
            warnings,
        ):
            warnings.extend(advisories)

        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def _redo_last_commit(self, cwd: Path, warnings: list[str]) -> str | None:
        """Amend HEAD with the current identity; problems become warnings."""
        worktree = find_worktree(cwd)
        if worktree is None:
            warnings.append("Not inside a git working tree; last commit was not amended")
            return None
        try:
            with trace_span("amend"):
                self._keystore.git.amend_reset_author(worktree)
        except GitCommandError as exc:
            warnings.append(f"Could not amend the last commit in {worktree}: {exc.stderr or exc}")
            return None
        return str(worktree)
