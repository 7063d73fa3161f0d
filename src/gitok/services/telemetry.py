"""Timing spans for ``--verbose`` runs.

``@traced`` opens a root span around a service method, ``trace_span`` opens
child spans for the stages inside it. When the method returns a
:class:`ServiceResult`, the finished tree is attached as ``meta["telemetry"]``.
Both are a single ContextVar lookup when telemetry is off.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from gitok.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("gitok_telemetry_enabled", default=False)
_active: ContextVar[Span | None] = ContextVar("gitok_active_span", default=None)

_P = ParamSpec("_P")
_R = TypeVar("_R")


@dataclass
class Span:
    name: str
    children: list[Span] = field(default_factory=list)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def end(self) -> None:
        self.finished = time.perf_counter()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@contextmanager
def _activate(span: Span) -> Iterator[Span]:
    token = _active.set(span)
    try:
        yield span
    finally:
        span.end()
        _active.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a stage as a child of the active span; yields None outside a trace."""
    parent = _active.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    child = Span(name)
    parent.children.append(child)
    with _activate(child):
        yield child


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Run *func* under a root span and attach the tree to its ServiceResult."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Span(func.__qualname__)
        ok = False
        try:
            with _activate(root):
                result = func(*args, **kwargs)
            ok = not isinstance(result, ServiceResult) or result.ok
        finally:
            structlog.get_logger("gitok.telemetry").debug(
                "span.complete",
                span_name=root.name,
                duration_ms=round(root.duration_ms, 2),
                ok=ok,
                children=len(root.children),
            )

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": root.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
