"""
Typed request objects for operations.

Each dataclass represents the *input* contract for a single operation
function.  Requests carry only validated, transport-agnostic data.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# ------------------------------------------------------------------ #
# Database operations
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class DatabaseSetupRequest:
    """Request for :func:`iam_app.ops.database.setup_database`.

    Attributes:
        replace_existing: Drop and recreate the database when it already
            exists.  When ``False`` an existing database is reused as is.
        schema_file: Overrides ``settings.schema_file``.
        data_file: Overrides ``settings.data_file``.
    """

    replace_existing: bool = False
    schema_file: Path | None = None
    data_file: Path | None = None


# ------------------------------------------------------------------ #
# Query operations
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class InsertUserRequest:
    """Request for :func:`iam_app.ops.queries.insert_new_user`."""

    name: str
    email: str


@dataclass(frozen=True, slots=True)
class FilesByUserRequest:
    """Request for :func:`iam_app.ops.queries.get_files_by_user`."""

    name: str
    inference: bool = False


@dataclass(frozen=True, slots=True)
class UpdateFilePathRequest:
    """Request for :func:`iam_app.ops.queries.update_file_path`."""

    old_path: str
    new_path: str


@dataclass(frozen=True, slots=True)
class DeleteFileRequest:
    """Request for :func:`iam_app.ops.queries.delete_file`."""

    path: str
