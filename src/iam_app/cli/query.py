"""
CLI: ``iam-app query``: the canned queries, one at a time.
"""

from __future__ import annotations

import typer

from iam_app.cli.utils import make_context, print_json, print_table

app = typer.Typer(no_args_is_help=True)


@app.command("users")
def users(
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
    table: bool = typer.Option(False, "--table", help="Render as a table"),
) -> None:
    """Fetch all users with their full names and emails."""
    from iam_app.cli import walkthrough
    from iam_app.cli.utils import ensure_ok
    from iam_app.ops.queries import fetch_all_users

    with make_context(database) as ctx:
        if json_out:
            print_json(fetch_all_users(ctx))
        elif table:
            print_table(ensure_ok(fetch_all_users(ctx)), title="Users")
        else:
            walkthrough.fetch_users(ctx)


@app.command("add-user")
def add_user(
    name: str = typer.Argument(..., help="Full name"),
    email: str = typer.Argument(..., help="E-mail address"),
    database: str | None = typer.Option(None, "--database", "-d"),
) -> None:
    """Insert a new person."""
    from iam_app.cli import walkthrough

    with make_context(database) as ctx:
        walkthrough.add_user(ctx, name, email)


@app.command("files")
def files(
    name: str = typer.Argument(..., help="Full name of the user"),
    infer: bool = typer.Option(False, "--infer", help="Enable rule inference"),
    database: str | None = typer.Option(None, "--database", "-d"),
) -> None:
    """List the files a user has access to view."""
    from iam_app.cli import walkthrough

    with make_context(database) as ctx:
        walkthrough.files_by_user(ctx, name, inference=infer)


@app.command("move-file")
def move_file(
    old_path: str = typer.Argument(...),
    new_path: str = typer.Argument(...),
    database: str | None = typer.Option(None, "--database", "-d"),
) -> None:
    """Change the path of a file."""
    from iam_app.cli import walkthrough

    with make_context(database) as ctx:
        walkthrough.move_file(ctx, old_path, new_path)


@app.command("delete-file")
def delete_file(
    path: str = typer.Argument(...),
    database: str | None = typer.Option(None, "--database", "-d"),
) -> None:
    """Delete the file with the given path."""
    from iam_app.cli import walkthrough

    with make_context(database) as ctx:
        walkthrough.remove_file(ctx, path)
