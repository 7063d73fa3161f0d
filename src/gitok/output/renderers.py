"""Human-readable rendering of ServiceResult, one renderer per operation.

:func:`render_result` looks the renderer up by ``result.op``; operations
without a dedicated renderer print their data as ``key: value`` lines.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from gitok.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from gitok.services.result import ServiceResult

Renderer = Callable[["ServiceResult", "Console"], None]

_VALUE_STYLES = {
    "domain": "gitok.domain",
    "url": "gitok.domain",
    "path": "gitok.path",
    "root": "gitok.path",
    "token": "gitok.secret",
}

_MUTATION_KEYS = ("domain", "username", "path", "name", "email", "overwritten", "helper", "timeout")


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Plain text (styled on a terminal) for *result*; ``verbose`` adds details."""
    console = create_console()
    if not result.ok:
        _render_error(result, console, verbose=verbose)
    else:
        _RENDERERS.get(result.op, _render_fields)(result, console)
        if verbose and result.meta:
            _render_meta(result.meta, console)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """One line for ``--quiet``; a successful unlock prints only the token."""
    if not result.ok:
        message = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {message}"
    if result.op == "unlock":
        return str(result.data.get("token", ""))
    return f"OK: {result.op}"


# ── building blocks ──────────────────────────────────────────────────


def _ok_line(console: Console, *parts: str | tuple[str, str]) -> None:
    console.print(Text.assemble(("OK", "gitok.ok"), *parts))


def _field(console: Console, key: str, value: Any) -> None:
    text = json.dumps(value) if isinstance(value, (dict, list)) else str(value)
    console.print(
        Text.assemble((f"  {key}: ", "gitok.key"), (text, _VALUE_STYLES.get(key, "")))
    )


def _render_meta(meta: dict[str, Any], console: Console) -> None:
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in meta.items():
        if key == "telemetry":
            _render_span(value, console, depth=2)
        else:
            console.print(Text(f"    {key}: {value}"))


def _render_span(span: dict[str, Any], console: Console, *, depth: int) -> None:
    console.print(Text(f"{'  ' * depth}{span.get('name', '?')}  {span.get('duration_ms', 0)}ms"))
    for child in span.get("children", []):
        _render_span(child, console, depth=depth + 1)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    err = result.error
    console.print(
        Text.assemble(
            ("ERROR", "gitok.error"),
            (f"  {result.op}", "gitok.op"),
            f": {err.message if err else 'Unknown error'}",
        )
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in err.detail.items():
            console.print(Text(f"    {key}: {value}"))


# ── per-operation renderers ──────────────────────────────────────────


def _render_unlock(result: ServiceResult, console: Console) -> None:
    """The approval line, stored identity, and the token exactly once."""
    data = result.data
    _ok_line(
        console,
        f"  {data.get('username')} approved for ",
        (str(data.get("url")), "gitok.domain"),
    )
    for key in ("name", "email", "amended"):
        if key in data:
            _field(console, key, data[key])
    _field(console, "token", data.get("token", ""))


def _render_mutation(result: ServiceResult, console: Console) -> None:
    _ok_line(console, (f"  {result.op}", "gitok.op"))
    for key in _MUTATION_KEYS:
        if key in result.data:
            _field(console, key, result.data[key])


def _render_list(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    if not items:
        _ok_line(console, (f"  {result.op}", "gitok.op"))
        _field(console, "root", result.data.get("root", ""))
        console.print("  No tokens stored.")
        return

    table = Table(box=None, pad_edge=False, header_style="bold")
    for column in ("DOMAIN", "USERNAME", "NAME", "EMAIL", "TOKEN"):
        table.add_column(column, style="gitok.domain" if column == "DOMAIN" else None)
    for item in items:
        table.add_row(
            item["domain"],
            item["username"],
            item.get("name", ""),
            item.get("email", ""),
            "yes" if item.get("has_token") else "missing",
        )
    console.print(table)


def _render_fields(result: ServiceResult, console: Console) -> None:
    _ok_line(console, (f"  {result.op}", "gitok.op"))
    for key, value in result.data.items():
        _field(console, key, value)


_RENDERERS: dict[str, Renderer] = {
    "unlock": _render_unlock,
    "store": _render_mutation,
    "remove": _render_mutation,
    "cache_enable": _render_mutation,
    "list": _render_list,
}
