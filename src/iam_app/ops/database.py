"""
Database operations.

Create, seed, replace, check and drop the sample database.  The schema and
data files are each read as one query string and submitted verbatim: the
schema through a ``define`` in a schema session, the data through a single
``insert`` in a data session.
"""

from __future__ import annotations

from pathlib import Path

from iam_app.core.errors import IamAppError, NotFoundError, QueryError
from iam_app.core.logging import get_logger
from iam_app.core.protocols import SessionMode, TransactionKind
from iam_app.core.typeql import COUNT_USERS, read_query_file
from iam_app.ops.context import OperationContext
from iam_app.ops.requests import DatabaseSetupRequest
from iam_app.ops.responses import (
    DatabaseCheckResult,
    DatabaseDropResult,
    DatabaseSetupResult,
)
from iam_app.ops.result import OperationResult, failure_from, start_timer

logger = get_logger(__name__)


def database_exists(ctx: OperationContext) -> OperationResult[bool]:
    """Report whether ``ctx.database`` exists on the server."""
    timer = start_timer()
    try:
        exists = ctx.driver.database_exists(ctx.database)
    except Exception as exc:
        return failure_from(exc, elapsed_ms=timer.elapsed_ms)
    return OperationResult.ok(exists, elapsed_ms=timer.elapsed_ms)


def load_schema(ctx: OperationContext, path: Path | str) -> OperationResult[str]:
    """Run the schema file as one ``define`` query and commit."""
    timer = start_timer()
    try:
        _define_schema(ctx, read_query_file(path))
    except Exception as exc:
        return failure_from(exc, elapsed_ms=timer.elapsed_ms)
    return OperationResult.ok(str(path), elapsed_ms=timer.elapsed_ms)


def load_dataset(ctx: OperationContext, path: Path | str) -> OperationResult[int]:
    """Run the data file as one ``insert`` query and commit.

    The payload is the number of answers the insert produced.
    """
    timer = start_timer()
    try:
        inserted = _insert_dataset(ctx, read_query_file(path))
    except Exception as exc:
        return failure_from(exc, elapsed_ms=timer.elapsed_ms)
    return OperationResult.ok(inserted, elapsed_ms=timer.elapsed_ms)


def create_database(
    ctx: OperationContext,
    request: DatabaseSetupRequest | None = None,
) -> OperationResult[DatabaseSetupResult]:
    """Create ``ctx.database``, load the schema, then load the dataset."""
    request = request or DatabaseSetupRequest()
    timer = start_timer()
    schema_file, data_file = _files(ctx, request)

    if ctx.dry_run:
        return OperationResult.ok(
            DatabaseSetupResult(ctx.database, "created", str(schema_file), str(data_file), dry_run=True),
            elapsed_ms=timer.elapsed_ms,
        )

    try:
        _create(ctx, read_query_file(schema_file), read_query_file(data_file))
    except Exception as exc:
        return failure_from(exc, elapsed_ms=timer.elapsed_ms)
    return OperationResult.ok(
        DatabaseSetupResult(ctx.database, "created", str(schema_file), str(data_file)),
        elapsed_ms=timer.elapsed_ms,
    )


def setup_database(
    ctx: OperationContext,
    request: DatabaseSetupRequest | None = None,
) -> OperationResult[DatabaseSetupResult]:
    """Make sure ``ctx.database`` exists and is seeded.

    * missing database: created and seeded;
    * existing database with ``replace_existing``: dropped, then created and seeded;
    * existing database otherwise: reused untouched.
    """
    request = request or DatabaseSetupRequest()
    timer = start_timer()
    schema_file, data_file = _files(ctx, request)

    try:
        exists = ctx.driver.database_exists(ctx.database)
        if not exists:
            action = "created"
        elif request.replace_existing:
            action = "replaced"
        else:
            action = "reused"

        if ctx.dry_run:
            return OperationResult.ok(
                DatabaseSetupResult(ctx.database, action, str(schema_file), str(data_file), dry_run=True),
                elapsed_ms=timer.elapsed_ms,
            )

        if action == "reused":
            logger.info("database_reused", database=ctx.database)
        else:
            # Both files are read before an existing database is touched.
            define_query = read_query_file(schema_file)
            insert_query = read_query_file(data_file)
            if action == "replaced":
                ctx.driver.delete_database(ctx.database)
                logger.info("database_deleted", database=ctx.database)
            _create(ctx, define_query, insert_query)

        if not ctx.driver.database_exists(ctx.database):
            raise NotFoundError("Failed to find the database after creation.").with_context(
                database=ctx.database
            )
    except Exception as exc:
        return failure_from(exc, elapsed_ms=timer.elapsed_ms)

    return OperationResult.ok(
        DatabaseSetupResult(ctx.database, action, str(schema_file), str(data_file)),
        elapsed_ms=timer.elapsed_ms,
    )


def check_database(ctx: OperationContext) -> OperationResult[DatabaseCheckResult]:
    """Count users in a read transaction and compare with the expected count.

    A mismatch is still a successful operation; the payload's ``passed``
    property tells the caller whether the check held.
    """
    timer = start_timer()
    try:
        with ctx.driver.session(ctx.database, SessionMode.DATA) as session:
            with session.transaction(TransactionKind.READ) as tx:
                answer = tx.get_aggregate(COUNT_USERS)
        if answer is None:
            raise QueryError("Query execution failed.").with_context(
                database=ctx.database, query=COUNT_USERS
            )
        count = int(answer)
    except Exception as exc:
        return failure_from(exc, elapsed_ms=timer.elapsed_ms)

    expected = ctx.settings.expected_user_count
    if count != expected:
        logger.warning("database_check_failed", database=ctx.database, user_count=count, expected=expected)
    return OperationResult.ok(
        DatabaseCheckResult(ctx.database, count, expected),
        elapsed_ms=timer.elapsed_ms,
    )


def drop_database(ctx: OperationContext) -> OperationResult[DatabaseDropResult]:
    """Delete ``ctx.database`` if it exists."""
    timer = start_timer()
    try:
        exists = ctx.driver.database_exists(ctx.database)
        if ctx.dry_run:
            return OperationResult.ok(
                DatabaseDropResult(ctx.database, deleted=exists, dry_run=True),
                elapsed_ms=timer.elapsed_ms,
            )
        if exists:
            ctx.driver.delete_database(ctx.database)
            logger.info("database_deleted", database=ctx.database)
    except Exception as exc:
        return failure_from(exc, elapsed_ms=timer.elapsed_ms)
    return OperationResult.ok(DatabaseDropResult(ctx.database, deleted=exists), elapsed_ms=timer.elapsed_ms)


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _files(ctx: OperationContext, request: DatabaseSetupRequest) -> tuple[Path, Path]:
    return (
        Path(request.schema_file or ctx.settings.schema_file),
        Path(request.data_file or ctx.settings.data_file),
    )


def _create(ctx: OperationContext, define_query: str, insert_query: str) -> None:
    ctx.driver.create_database(ctx.database)
    logger.info("database_created", database=ctx.database)
    try:
        _define_schema(ctx, define_query)
        _insert_dataset(ctx, insert_query)
    except IamAppError:
        # Drop the half-seeded database so the next setup starts clean.
        try:
            ctx.driver.delete_database(ctx.database)
        except IamAppError as cleanup_exc:
            logger.warning("database_cleanup_failed", database=ctx.database, error=str(cleanup_exc))
        raise


def _define_schema(ctx: OperationContext, define_query: str) -> None:
    with ctx.driver.session(ctx.database, SessionMode.SCHEMA) as session:
        with session.transaction(TransactionKind.WRITE) as tx:
            tx.define(define_query)
            tx.commit()
    logger.info("schema_loaded", database=ctx.database)


def _insert_dataset(ctx: OperationContext, insert_query: str) -> int:
    with ctx.driver.session(ctx.database, SessionMode.DATA) as session:
        with session.transaction(TransactionKind.WRITE) as tx:
            answers = tx.insert(insert_query)
            tx.commit()
    logger.info("dataset_loaded", database=ctx.database, answers=len(answers))
    return len(answers)
