"""
Canned query operations.

Each operation opens its own data session and transaction, runs one of
the walkthrough queries, and returns typed results.  Write operations
commit only when they changed something.
"""

from __future__ import annotations

from typing import Any

from iam_app.core import typeql
from iam_app.core.errors import AmbiguousMatchError, NotFoundError
from iam_app.core.logging import get_logger
from iam_app.core.protocols import SessionMode, TransactionKind
from iam_app.ops.context import OperationContext
from iam_app.ops.requests import (
    DeleteFileRequest,
    FilesByUserRequest,
    InsertUserRequest,
    UpdateFilePathRequest,
)
from iam_app.ops.responses import (
    FileDeleteResult,
    FilesByUser,
    PathUpdateResult,
    UserRecord,
)
from iam_app.ops.result import OperationResult, failure_from, start_timer

logger = get_logger(__name__)

NO_FILES_HINT = "No files found. Try enabling inference."


def fetch_all_users(ctx: OperationContext) -> OperationResult[list[UserRecord]]:
    """Fetch every user with their full name and email."""
    timer = start_timer()
    try:
        with ctx.driver.session(ctx.database, SessionMode.DATA) as session:
            with session.transaction(TransactionKind.READ) as tx:
                documents = tx.fetch(typeql.FETCH_USERS)
    except Exception as exc:
        return failure_from(exc, elapsed_ms=timer.elapsed_ms)

    users = [_user_from_document(doc.get("u", {})) for doc in documents]
    return OperationResult.ok(users, elapsed_ms=timer.elapsed_ms)


def insert_new_user(ctx: OperationContext, request: InsertUserRequest) -> OperationResult[list[UserRecord]]:
    """Insert a person and return what the insert reported back."""
    timer = start_timer()
    query = typeql.insert_user(request.name, request.email)
    try:
        with ctx.driver.session(ctx.database, SessionMode.DATA) as session:
            with session.transaction(TransactionKind.WRITE) as tx:
                rows = tx.insert(query)
                tx.commit()
    except Exception as exc:
        return failure_from(exc, elapsed_ms=timer.elapsed_ms)

    users = [UserRecord(full_name=row["fn"], email=row["e"]) for row in rows]
    logger.info("user_inserted", database=ctx.database, count=len(users))
    return OperationResult.ok(users, elapsed_ms=timer.elapsed_ms)


def get_files_by_user(ctx: OperationContext, request: FilesByUserRequest) -> OperationResult[FilesByUser]:
    """List the paths of files the named user may view.

    The name must match exactly one user.  With ``inference`` the server's
    rules may derive extra view permissions.
    """
    timer = start_timer()
    warnings: list[str] = []
    try:
        with ctx.driver.session(ctx.database, SessionMode.DATA) as session:
            with session.transaction(TransactionKind.READ, infer=request.inference) as tx:
                users = tx.get(typeql.match_user_by_name(request.name))
                if len(users) > 1:
                    raise AmbiguousMatchError("Found more than one user with that name.").with_context(
                        database=ctx.database, user=request.name
                    )
                if not users:
                    raise NotFoundError("No users found with that name.").with_context(
                        database=ctx.database, user=request.name
                    )
                rows = tx.get(typeql.files_viewable_by(request.name))
    except Exception as exc:
        return failure_from(exc, elapsed_ms=timer.elapsed_ms)

    files = [row["fp"] for row in rows]
    if not files and not request.inference:
        warnings.append(NO_FILES_HINT)
    return OperationResult.ok(
        FilesByUser(user=request.name, inference=request.inference, files=files),
        warnings=warnings,
        elapsed_ms=timer.elapsed_ms,
    )


def update_file_path(ctx: OperationContext, request: UpdateFilePathRequest) -> OperationResult[PathUpdateResult]:
    """Replace a file's path; commits only if at least one path matched."""
    timer = start_timer()
    query = typeql.update_path(request.old_path, request.new_path)
    try:
        with ctx.driver.session(ctx.database, SessionMode.DATA) as session:
            with session.transaction(TransactionKind.WRITE) as tx:
                updated = len(tx.update(query))
                if updated > 0:
                    tx.commit()
    except Exception as exc:
        return failure_from(exc, elapsed_ms=timer.elapsed_ms)

    logger.info("paths_updated", database=ctx.database, old_path=request.old_path, updated=updated)
    return OperationResult.ok(
        PathUpdateResult(old_path=request.old_path, new_path=request.new_path, updated=updated),
        elapsed_ms=timer.elapsed_ms,
    )


def delete_file(ctx: OperationContext, request: DeleteFileRequest) -> OperationResult[FileDeleteResult]:
    """Delete the file with the given path.

    Exactly one file must match; otherwise nothing is deleted.
    """
    timer = start_timer()
    try:
        with ctx.driver.session(ctx.database, SessionMode.DATA) as session:
            with session.transaction(TransactionKind.WRITE) as tx:
                matches = tx.get(typeql.match_file(request.path))
                if len(matches) > 1:
                    raise AmbiguousMatchError(
                        "Matched more than one file with the same path. No files were deleted."
                    ).with_context(database=ctx.database, path=request.path)
                if not matches:
                    raise NotFoundError("No files matched in the database. No files were deleted.").with_context(
                        database=ctx.database, path=request.path
                    )
                tx.delete(typeql.delete_file(request.path))
                tx.commit()
    except Exception as exc:
        return failure_from(exc, elapsed_ms=timer.elapsed_ms)

    logger.info("file_deleted", database=ctx.database, path=request.path)
    return OperationResult.ok(FileDeleteResult(path=request.path, deleted=True), elapsed_ms=timer.elapsed_ms)


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _first_value(document: dict[str, Any], attribute: str) -> str:
    """First value of *attribute* in a fetch answer, or ``""``."""
    values = document.get(attribute) or []
    if not values:
        return ""
    return str(values[0].get("value", ""))


def _user_from_document(document: dict[str, Any]) -> UserRecord:
    return UserRecord(
        full_name=_first_value(document, "full-name"),
        email=_first_value(document, "email"),
    )
