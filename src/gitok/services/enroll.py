"""EnrollService — encrypt a token into the store.

Pipeline: LOOKUP → TARGET → GUARD → DETAILS → ENCRYPT

The overwrite guard runs before any passphrase prompt.
"""

from __future__ import annotations

import logging

from gitok.domain.errors import GitokError
from gitok.services.base import BaseService, _Failure
from gitok.services.prompts import PromptField, collect
from gitok.services.result import ServiceResult
from gitok.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

IDENTITY_FIELDS: dict[str, PromptField] = {
    "name": PromptField(label="Name (optional)", default="", required=False),
    "email": PromptField(label="Email (optional)", default="", required=False),
}

NEW_PASSPHRASE_FIELD = PromptField(label="Passphrase", secret=True, confirm=True)


class EnrollService(BaseService):
    """The token creation flow."""

    @traced
    def store(
        self,
        username: str,
        token: str,
        *,
        domain: str | None = None,
        name: str | None = None,
        email: str | None = None,
        passphrase: str | None = None,
        force: bool = False,
        only_token: bool = False,
    ) -> ServiceResult:
        """Encrypt *token* for ``(domain, username)``.

        Values passed as arguments skip their prompt. With *only_token*, the
        name/email prompts are skipped and stored identity is left as is.
        """
        op = "store"
        warnings: list[str] = []
        keystore = self._keystore

        if not token:
            return self._fail(op, "BAD_ARGUMENTS", "Token must not be empty")
        if "\n" in token or "\r" in token or "\x00" in token:
            return self._fail(op, "BAD_ARGUMENTS", "Token must be a single line")

        # ── LOOKUP ───────────────────────────────────────────
        match = keystore.index.find(username)
        if match.found:
            existing = ", ".join(match.domains)
            message = f"'{username}' is already stored under: {existing}"
            if self._prompter is not None:
                self._prompter.notify(message)
            else:
                warnings.append(message)

        try:
            # ── TARGET ───────────────────────────────────────
            if domain is None:
                domain = self._ask(
                    op,
                    PromptField(label="Domain", default=keystore.settings.store.default_domain),
                ).strip()

            # ── GUARD ────────────────────────────────────────
            if keystore.store.exists(domain, username) and not force:
                return self._fail(
                    op,
                    "ALREADY_EXISTS",
                    f"A token for '{username}' at {domain} already exists; use --force",
                    domain=domain,
                )

            # ── DETAILS ──────────────────────────────────────
            identity = {"name": name or "", "email": email or ""}
            if not only_token and self._prompter is not None:
                identity = collect(
                    self._prompter, IDENTITY_FIELDS, {"name": name, "email": email}
                )
            if passphrase is None:
                passphrase = self._ask(op, NEW_PASSPHRASE_FIELD)

            # ── ENCRYPT ──────────────────────────────────────
            with trace_span("encrypt"):
                path = keystore.store.create(
                    domain,
                    username,
                    token,
                    passphrase=passphrase,
                    name=identity["name"] or None,
                    email=identity["email"] or None,
                    force=force,
                )
        except _Failure as failure:
            return failure.result
        except GitokError as exc:
            return self._from_exception(op, exc)

        self._dispatch_event(
            "post_store",
            {"domain": domain, "username": username, "path": str(path)},
            warnings,
        )

        data: dict[str, object] = {
            "domain": domain,
            "username": username,
            "path": str(path),
            "overwritten": match.found and domain in match.domains,
        }
        data.update({k: v for k, v in identity.items() if v})
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)
