"""
CLI utility helpers: context management and output formatting.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from iam_app.core.errors import IamAppError
from iam_app.core.logging import LogContext
from iam_app.ops.context import OperationContext
from iam_app.ops.result import OperationResult

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


# ── Context helper ───────────────────────────────────────────────────────


@contextmanager
def make_context(
    database: str | None = None,
    *,
    dry_run: bool = False,
) -> Iterator[OperationContext]:
    """Connect to the configured server and yield an ``OperationContext``.

    The driver is closed when the block exits.  Configuration and connection
    failures end the command with exit status 1.
    """
    from iam_app.core.settings import get_settings
    from iam_app.core.typedb_driver import open_driver

    try:
        settings = get_settings()
        driver = open_driver(settings)
    except IamAppError as exc:
        fail(exc.code, exc.message)

    try:
        ctx = OperationContext(
            driver=driver,
            settings=settings,
            database=database or settings.database,
            caller="cli",
            dry_run=dry_run,
        )
        with LogContext(database=ctx.database, request_id=ctx.request_id, caller=ctx.caller):
            yield ctx
    finally:
        driver.close()


# ── Output helpers ───────────────────────────────────────────────────────


def fail(code: str, message: str) -> None:
    """Print an error to stderr and exit with status 1."""
    err_console.print(f"[bold red]Error[/bold red] ({code}): {escape(message)}", soft_wrap=True)
    raise typer.Exit(code=1)


def ensure_ok(result: OperationResult) -> Any:
    """Return ``result.data``, or report the error and exit 1."""
    if not result.success:
        err = result.error
        fail(err.code if err else "ERROR", err.message if err else "Unknown error")
    for warning in result.warnings:
        console.print(f"[yellow]{escape(warning)}[/yellow]", soft_wrap=True)
    return result.data


def _to_dict(obj: Any) -> dict[str, Any]:
    """Convert dataclass / dict to plain dict."""
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    return {"value": obj}


def print_json(result: OperationResult) -> None:
    """Render a result as JSON; failures still exit 1."""
    data = result.data
    payload = result.to_dict()
    if data is not None:
        payload["data"] = [_to_dict(d) for d in data] if isinstance(data, list | tuple) else _to_dict(data)
    console.print_json(json.dumps(payload, default=str))
    if not result.success:
        raise typer.Exit(code=1)


def print_table(items: list, *, title: str = "") -> None:
    """Render a list of dataclasses/dicts as a Rich table."""
    if not items:
        console.print("[dim]No items.[/dim]")
        return
    first = _to_dict(items[0])
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in first:
        table.add_column(col, overflow="fold")
    for item in items:
        table.add_row(*(str(v) for v in _to_dict(item).values()))
    console.print(table)
