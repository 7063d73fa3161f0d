"""BaseService — foundation for all gitok services.

Every service receives a :class:`Keystore` at construction time, plus the
:class:`Prompter` for flows that talk to the operator.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from gitok.domain.errors import GitCommandError, GitokError
from gitok.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from gitok.infrastructure.keystore import Keystore
    from gitok.services.prompts import Prompter, PromptField

logger = logging.getLogger(__name__)


class _Failure(Exception):
    """Internal short-circuit carrying a failed ServiceResult."""

    def __init__(self, result: ServiceResult) -> None:
        super().__init__(result.error.message if result.error else result.op)
        self.result = result


class BaseService:
    """Shared plumbing: error translation, domain resolution, and event dispatch."""

    def __init__(self, keystore: Keystore, prompter: Prompter | None = None) -> None:
        self._keystore = keystore
        self._prompter = prompter

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    @staticmethod
    def _fail(op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail),
        )

    @classmethod
    def _from_exception(cls, op: str, exc: GitokError) -> ServiceResult:
        """Translate an infrastructure exception into a failed result."""
        detail: dict[str, Any] = {}
        if isinstance(exc, GitCommandError):
            detail["exit_code"] = exc.returncode
            if exc.stderr:
                detail["stderr"] = exc.stderr
        return cls._fail(op, exc.code, str(exc), **detail)

    # ------------------------------------------------------------------
    # Domain resolution shared by unlock and remove
    # ------------------------------------------------------------------

    def _resolve_domain(self, op: str, username: str, domain: str | None) -> str:
        """Pick the record's domain from the index, prompting on ambiguity.

        Raises :class:`_Failure` with USER_NOT_FOUND, DOMAIN_NOT_FOUND, or
        AMBIGUOUS_USER.
        """
        match = self._keystore.index.find(username)
        if not match.found:
            raise _Failure(
                self._fail(op, "USER_NOT_FOUND", f"No token stored for user '{username}'")
            )

        if domain is None:
            if match.domain is not None:
                return match.domain
            choices = list(match.domains)
            if self._prompter is not None:
                domain = self._prompter.choose(
                    f"'{username}' exists under several domains", choices
                )
            if domain is None:
                raise _Failure(
                    self._fail(
                        op,
                        "AMBIGUOUS_USER",
                        f"'{username}' exists under {', '.join(choices)}; pass --domain",
                        domains=choices,
                    )
                )

        if domain not in match.domains:
            raise _Failure(
                self._fail(
                    op,
                    "DOMAIN_NOT_FOUND",
                    f"No token stored for '{username}' at {domain}",
                    domains=list(match.domains),
                )
            )
        return domain

    def _ask(self, op: str, field: PromptField) -> str:
        """Prompt for a single value; fails with BAD_ARGUMENTS without a prompter."""
        if self._prompter is None:
            raise _Failure(self._fail(op, "BAD_ARGUMENTS", f"{field.label} is required"))
        value = self._prompter.ask(field)
        if field.required and not value:
            raise _Failure(self._fail(op, "BAD_ARGUMENTS", f"{field.label} must not be empty"))
        return value

    # ------------------------------------------------------------------
    # Plugin events
    # ------------------------------------------------------------------

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> list[Any]:
        """Call a plugin hook and return the non-None results.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        pm = self._keystore.plugin_manager
        if pm is None:
            return []
        try:
            results = getattr(pm.hook, hook_name)(**payload)
        except Exception:
            logger.debug("Plugin hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")
            return []
        return [r for r in results if r is not None]
