"""
CLI: ``iam-app config``: configuration inspection.
"""

from __future__ import annotations

import typer

from iam_app.cli.utils import console, fail

app = typer.Typer(no_args_is_help=True)

_SECRET_FIELDS = {"password"}


@app.command("show")
def show_config(
    format: str = typer.Option("table", "--format", "-f", help="Output format: table, json, env"),
) -> None:
    """Show the effective configuration (password masked)."""
    from rich.table import Table

    from iam_app.core.errors import ConfigError
    from iam_app.core.settings import get_settings

    try:
        settings = get_settings()
    except ConfigError as exc:
        fail(exc.code, exc.message)

    values = {
        key: ("****" if key in _SECRET_FIELDS else value)
        for key, value in settings.model_dump(mode="json").items()
    }

    if format == "json":
        import json

        console.print_json(json.dumps(values))
        return

    if format == "env":
        for key, value in sorted(values.items()):
            console.print(f"IAM_{key.upper()}={'' if value is None else value}")
        return

    table = Table(title="Configuration")
    table.add_column("Setting")
    table.add_column("Value", overflow="fold")
    for key, value in values.items():
        table.add_row(key, str(value))
    console.print(table)
