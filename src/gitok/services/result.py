"""What every service method returns.

Expected failures are values, not exceptions: services hand back
``ServiceResult(ok=False, error=...)`` and the CLI decides how to print it
and which exit status to use.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Machine-readable failure: a stable ``code``, a human ``message``, extra ``detail``.

    ``detail["exit_code"]`` overrides the default process exit status of 1;
    approval failures carry git's own status there.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one operation (``op`` is e.g. ``"unlock"`` or ``"cache_enable"``).

    ``warnings`` are non-fatal and may accompany a success; ``meta`` holds
    the telemetry span tree under ``--verbose``.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @property
    def exit_code(self) -> int:
        if self.ok:
            return 0
        code = self.error.detail.get("exit_code") if self.error else None
        return code if isinstance(code, int) and code > 0 else 1
