"""ManageService — remove and list records, configure git's credential cache."""

from __future__ import annotations

import logging

from gitok.domain.errors import GitokError
from gitok.infrastructure.git import is_cache_helper
from gitok.services.base import BaseService, _Failure
from gitok.services.result import ServiceResult
from gitok.services.telemetry import traced

logger = logging.getLogger(__name__)


class ManageService(BaseService):
    """Store maintenance and cache configuration."""

    @traced
    def remove(self, username: str, *, domain: str | None = None) -> ServiceResult:
        """Delete the record for *username*, asking which domain when ambiguous."""
        op = "remove"
        warnings: list[str] = []
        try:
            domain = self._resolve_domain(op, username, domain)
            path = self._keystore.store.remove(domain, username)
        except _Failure as failure:
            return failure.result
        except GitokError as exc:
            return self._from_exception(op, exc)

        self._dispatch_event("post_remove", {"domain": domain, "username": username}, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"domain": domain, "username": username, "path": str(path)},
            warnings=warnings,
        )

    @traced
    def list_records(self) -> ServiceResult:
        """Every stored record with its optional identity (no decryption)."""
        records = self._keystore.index.records()
        warnings = [
            f"{r.username} at {r.domain} has no token artifact" for r in records if not r.has_token
        ]
        return ServiceResult(
            ok=True,
            op="list",
            data={
                "root": str(self._keystore.root),
                "count": len(records),
                "items": [r.to_dict() for r in records],
            },
            warnings=warnings,
        )

    @traced
    def enable_cache(self, timeout: int | None = None) -> ServiceResult:
        """Set git's global credential helper to the in-memory cache."""
        op = "cache_enable"
        timeout = timeout or self._keystore.settings.cache.timeout
        git = self._keystore.git
        try:
            git.ensure_available()
            helper = git.enable_cache(timeout)
        except GitokError as exc:
            result = self._from_exception(op, exc)
            if result.error and result.error.code == "GIT_FAILED":
                return self._fail(op, "CONFIG_FAILED", str(exc), **result.error.detail)
            return result

        logger.info("Credential cache enabled with timeout %ss", timeout)
        return ServiceResult(ok=True, op=op, data={"helper": helper, "timeout": timeout})

    @traced
    def cache_status(self) -> ServiceResult:
        """Report the active credential helper."""
        op = "cache_status"
        git = self._keystore.git
        try:
            git.ensure_available()
        except GitokError as exc:
            return self._from_exception(op, exc)

        helper = git.active_helper()
        warnings: list[str] = []
        cached = is_cache_helper(helper)
        if not cached:
            warnings.append("Credential cache is not enabled; run 'gitok cache enable'")
        return ServiceResult(
            ok=True,
            op=op,
            data={"helper": helper or "none", "cache_enabled": cached},
            warnings=warnings,
        )
