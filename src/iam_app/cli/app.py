"""
Root Typer application for iam-app.

Run with no sub-command to play the whole walkthrough: connect, set up the
sample database, check it, and run the six canned requests.
"""

from __future__ import annotations

import typer
from typer import Typer

from iam_app.cli.utils import fail, make_context

app = Typer(
    name="iam-app",
    help="iam-app: TypeDB IAM sample walkthrough.",
    invoke_without_command=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from iam_app import __version__

        typer.echo(f"iam-app {__version__}")
        raise typer.Exit()


def _configure_logging(log_level: str | None) -> None:
    from iam_app.core.errors import ConfigError
    from iam_app.core.logging import configure_logging
    from iam_app.core.settings import LOG_LEVELS, get_settings

    try:
        settings = get_settings()
    except ConfigError as exc:
        fail(exc.code, exc.message)
    if log_level is not None and log_level.upper() not in LOG_LEVELS:
        fail("CONFIG", f"--log-level must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")
    configure_logging(
        level=log_level or settings.log_level,
        json_format=settings.log_format == "json",
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Override IAM_LOG_LEVEL."),
) -> None:
    """iam-app CLI: set up the IAM sample database and query it."""
    _configure_logging(log_level)
    if ctx.invoked_subcommand is None:
        from iam_app.cli import walkthrough

        with make_context() as op_ctx:
            walkthrough.run(op_ctx)


@app.command("run")
def run(
    reset: bool = typer.Option(False, "--reset", "-r", help="Replace an existing database without asking"),
    database: str | None = typer.Option(None, "--database", "-d", help="Database name"),
) -> None:
    """Run the full walkthrough."""
    from iam_app.cli import walkthrough

    with make_context(database) as op_ctx:
        walkthrough.run(op_ctx, reset=reset)


# ── Sub-command registration ─────────────────────────────────────────────

from iam_app.cli.config import app as config_app  # noqa: E402
from iam_app.cli.db import app as db_app  # noqa: E402
from iam_app.cli.query import app as query_app  # noqa: E402

app.add_typer(db_app, name="db", help="Create, check and drop the sample database.")
app.add_typer(query_app, name="query", help="Run one of the canned queries.")
app.add_typer(config_app, name="config", help="Configuration inspection.")
