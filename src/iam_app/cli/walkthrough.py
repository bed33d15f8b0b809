"""
Narrated steps of the IAM walkthrough.

Each step calls one operation, prints what happened, and exits with status 1
on the first failure.  The ``db`` and ``query`` sub-commands reuse these
steps so a single command prints exactly what the full walkthrough prints
for that step.
"""

from __future__ import annotations

import typer
from rich.markup import escape

from iam_app.cli.utils import console, ensure_ok, err_console
from iam_app.core.errors import ErrorCategory
from iam_app.ops import database, queries
from iam_app.ops.context import OperationContext
from iam_app.ops.requests import (
    DatabaseSetupRequest,
    DeleteFileRequest,
    FilesByUserRequest,
    InsertUserRequest,
    UpdateFilePathRequest,
)
from iam_app.ops.responses import (
    DatabaseCheckResult,
    FilesByUser,
    PathUpdateResult,
    UserRecord,
)
from iam_app.ops.result import OperationResult

NEW_USER_NAME = "Jack Keeper"
NEW_USER_EMAIL = "jk@typedb.com"
KNOWN_USER = "Kevin Morrison"
OLD_PATH = "lzfkn.java"
NEW_PATH = "lzfkn2.java"

REQUEST_COUNT = 6


def _say(text: str, **kwargs) -> None:
    console.print(text, markup=False, soft_wrap=True, **kwargs)


# ── Database ─────────────────────────────────────────────────────────────


def setup(ctx: OperationContext, *, reset: bool = False, assume_yes: bool = False) -> None:
    """Create the database, or replace / reuse an existing one, then check it."""
    _say(f"Setting up the database: {ctx.database}")
    exists = ensure_ok(database.database_exists(ctx))

    replace = False
    if exists:
        if reset or assume_yes:
            replace = True
        elif not ctx.dry_run:
            replace = typer.confirm(
                "Found a pre-existing database. Do you want to replace it? (Y/N)",
                default=False,
                show_default=False,
                prompt_suffix=" ",
            )
        if replace:
            _say("Replacing an existing database...")
        else:
            _say("Reusing an existing database.")
    else:
        _say(f"Creating new database: {ctx.database}")

    result = ensure_ok(database.setup_database(ctx, DatabaseSetupRequest(replace_existing=replace)))
    if result.dry_run:
        console.print(f"[dim]Dry run: database would be {result.action}.[/dim]")
        return
    if result.action != "reused":
        _say("Schema setup complete.")
        _say("Dataset setup complete.")

    check(ctx)


def check(ctx: OperationContext) -> DatabaseCheckResult:
    """Verify the seeded dataset; exits 1 when the user count is off."""
    _say("Testing the database...", end="")
    result: DatabaseCheckResult = ensure_ok(database.check_database(ctx))
    if result.passed:
        _say("Passed")
        return result
    _say(f"Failed with the result: {result.user_count}\nExpected result: {result.expected}.")
    raise typer.Exit(code=1)


def drop(ctx: OperationContext) -> None:
    if ctx.dry_run:
        result = ensure_ok(database.drop_database(ctx))
        outcome = "deleted" if result.deleted else "left alone, it does not exist"
        console.print(f"[dim]Dry run: database would be {outcome}.[/dim]")
        return
    _say("Deleting an existing database...", end="")
    result = ensure_ok(database.drop_database(ctx))
    _say("OK" if result.deleted else "not found")


# ── Queries ──────────────────────────────────────────────────────────────


def _data_miss(result: OperationResult) -> bool:
    """Report a no-match / ambiguous-match failure on stderr instead of exiting."""
    err = result.error
    if result.success or err is None or err.category != ErrorCategory.DATA:
        return False
    err_console.print(f"[bold red]Error[/bold red] ({err.code}): {escape(err.message)}", soft_wrap=True)
    return True


def fetch_users(ctx: OperationContext) -> list[UserRecord]:
    users: list[UserRecord] = ensure_ok(queries.fetch_all_users(ctx))
    for i, user in enumerate(users, start=1):
        _say(f"User #{i}: {user.full_name}, {user.email}")
    return users


def add_user(ctx: OperationContext, name: str, email: str) -> list[UserRecord]:
    added: list[UserRecord] = ensure_ok(queries.insert_new_user(ctx, InsertUserRequest(name=name, email=email)))
    for user in added:
        _say(f"Added new user. Name: {user.full_name}, E-mail: {user.email}")
    return added


def files_by_user(
    ctx: OperationContext, name: str, *, inference: bool = False, strict: bool = True
) -> FilesByUser | None:
    outcome = queries.get_files_by_user(ctx, FilesByUserRequest(name=name, inference=inference))
    if not strict and _data_miss(outcome):
        return None
    result: FilesByUser = ensure_ok(outcome)
    for i, path in enumerate(result.files, start=1):
        _say(f"File #{i}: {path}")
    return result


def move_file(ctx: OperationContext, old_path: str, new_path: str) -> PathUpdateResult:
    result: PathUpdateResult = ensure_ok(
        queries.update_file_path(ctx, UpdateFilePathRequest(old_path=old_path, new_path=new_path))
    )
    if result.updated > 0:
        _say(f"Total number of paths updated: {result.updated}.")
    else:
        _say("No matched paths: nothing to update.")
    return result


def remove_file(ctx: OperationContext, path: str, *, strict: bool = True) -> None:
    outcome = queries.delete_file(ctx, DeleteFileRequest(path=path))
    if not strict and _data_miss(outcome):
        return
    ensure_ok(outcome)
    _say("The file has been deleted.")


# ── Full walkthrough ─────────────────────────────────────────────────────


def _request(number: int, text: str) -> None:
    _say(f"\nRequest {number} of {REQUEST_COUNT}: {text}")


def run_requests(ctx: OperationContext) -> None:
    """Run the six canned requests in order.

    A request that matches no user or file, or more than one, is reported
    on stderr and the walkthrough moves on; driver errors still end it.
    """
    _request(1, "Fetch all users as JSON objects with full names and emails")
    fetch_users(ctx)

    _request(2, f"Add a new user with the full-name {NEW_USER_NAME} and email {NEW_USER_EMAIL}")
    add_user(ctx, NEW_USER_NAME, NEW_USER_EMAIL)

    _request(3, f"Find all files that the user {KNOWN_USER} has access to view (no inference)")
    files_by_user(ctx, KNOWN_USER, inference=False, strict=False)

    _request(4, f"Find all files that the user {KNOWN_USER} has access to view (with inference)")
    files_by_user(ctx, KNOWN_USER, inference=True, strict=False)

    _request(5, f"Update the path of a file from {OLD_PATH} to {NEW_PATH}")
    move_file(ctx, OLD_PATH, NEW_PATH)

    _request(6, f"Delete the file with path {NEW_PATH}")
    remove_file(ctx, NEW_PATH, strict=False)


def run(ctx: OperationContext, *, reset: bool = False, assume_yes: bool = False) -> None:
    setup(ctx, reset=reset, assume_yes=assume_yes)
    run_requests(ctx)


__all__ = [
    "setup",
    "check",
    "drop",
    "fetch_users",
    "add_user",
    "files_by_user",
    "move_file",
    "remove_file",
    "run_requests",
    "run",
]
