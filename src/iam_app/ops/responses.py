"""
Typed response objects for operations.

Each dataclass is the payload of a successful :class:`OperationResult`.
Responses carry only domain data, no CLI formatting.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# ------------------------------------------------------------------ #
# Database responses
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class DatabaseSetupResult:
    """Result payload for :func:`iam_app.ops.database.setup_database`.

    ``action`` is one of ``"created"``, ``"replaced"`` or ``"reused"``.
    """

    database: str
    action: str
    schema_file: str | None = None
    data_file: str | None = None
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class DatabaseCheckResult:
    """Result payload for :func:`iam_app.ops.database.check_database`."""

    database: str
    user_count: int
    expected: int

    @property
    def passed(self) -> bool:
        return self.user_count == self.expected


@dataclass(frozen=True, slots=True)
class DatabaseDropResult:
    """Result payload for :func:`iam_app.ops.database.drop_database`."""

    database: str
    deleted: bool
    dry_run: bool = False


# ------------------------------------------------------------------ #
# Query responses
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class UserRecord:
    """A user as returned by the fetch and insert queries."""

    full_name: str
    email: str


@dataclass(frozen=True, slots=True)
class FilesByUser:
    """Result payload for :func:`iam_app.ops.queries.get_files_by_user`."""

    user: str
    inference: bool
    files: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PathUpdateResult:
    """Result payload for :func:`iam_app.ops.queries.update_file_path`."""

    old_path: str
    new_path: str
    updated: int


@dataclass(frozen=True, slots=True)
class FileDeleteResult:
    """Result payload for :func:`iam_app.ops.queries.delete_file`."""

    path: str
    deleted: bool
