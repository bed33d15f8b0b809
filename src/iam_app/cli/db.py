"""
CLI: ``iam-app db``: database management commands.
"""

from __future__ import annotations

import typer

from iam_app.cli.utils import make_context, print_json

app = typer.Typer(no_args_is_help=True)


@app.command()
def setup(
    reset: bool = typer.Option(False, "--reset", "-r", help="Replace an existing database"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Answer yes to the replace prompt"),
    database: str | None = typer.Option(None, "--database", "-d", help="Database name"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview without changes"),
) -> None:
    """Create and seed the database, then check it."""
    from iam_app.cli import walkthrough

    with make_context(database, dry_run=dry_run) as ctx:
        walkthrough.setup(ctx, reset=reset, assume_yes=yes)


@app.command()
def check(
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Check that the seeded dataset has the expected number of users."""
    from iam_app.cli import walkthrough
    from iam_app.ops.database import check_database

    with make_context(database) as ctx:
        if json_out:
            print_json(check_database(ctx))
            return
        walkthrough.check(ctx)


@app.command()
def drop(
    database: str | None = typer.Option(None, "--database", "-d"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    dry_run: bool = typer.Option(False, "--dry-run"),
) -> None:
    """Delete the database if it exists."""
    from iam_app.cli import walkthrough

    with make_context(database, dry_run=dry_run) as ctx:
        if not yes and not dry_run and not typer.confirm(f"Delete database {ctx.database}?"):
            raise typer.Abort()
        walkthrough.drop(ctx)
