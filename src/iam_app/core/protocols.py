"""
Driver protocols used by the ops layer.

The ops functions never import ``typedb.driver`` directly.  They talk to a
:class:`GraphDriver`, which the production adapter
(:class:`iam_app.core.typedb_driver.TypeDBGraphDriver`) implements on top of
the TypeDB driver and which tests implement with an in-memory fake.

Architecture:
    ::

        GraphDriver                  (connection + database manager)
        ├── database_exists(name)
        ├── create_database(name)
        ├── delete_database(name)
        └── session(name, mode)   -> GraphSession
                └── transaction(kind, infer=False) -> GraphTransaction
                        ├── define / insert / get / get_aggregate
                        ├── fetch / update / delete
                        └── commit()

Every ``session`` / ``transaction`` is a context manager that closes its
handle on exit, including on error.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from enum import Enum
from typing import Any, Protocol, runtime_checkable

# One answer of a match query, keyed by variable name without the ``$``.
Row = dict[str, Any]


class SessionMode(str, Enum):
    """Schema sessions change types and rules; data sessions change instances."""

    SCHEMA = "schema"
    DATA = "data"


class TransactionKind(str, Enum):
    READ = "read"
    WRITE = "write"


@runtime_checkable
class GraphTransaction(Protocol):
    """An open transaction.  Query methods return fully materialised answers."""

    def define(self, query: str) -> None: ...

    def insert(self, query: str) -> list[Row]: ...

    def get(self, query: str) -> list[Row]: ...

    def get_aggregate(self, query: str) -> Any: ...

    def fetch(self, query: str) -> list[dict[str, Any]]: ...

    def update(self, query: str) -> list[Row]: ...

    def delete(self, query: str) -> None: ...

    def commit(self) -> None: ...


@runtime_checkable
class GraphSession(Protocol):
    def transaction(
        self, kind: TransactionKind, *, infer: bool = False
    ) -> AbstractContextManager[GraphTransaction]: ...


@runtime_checkable
class GraphDriver(Protocol):
    """An open connection to a graph database server."""

    def database_exists(self, name: str) -> bool: ...

    def create_database(self, name: str) -> None: ...

    def delete_database(self, name: str) -> None: ...

    def session(self, database: str, mode: SessionMode) -> AbstractContextManager[GraphSession]: ...

    def close(self) -> None: ...


__all__ = [
    "Row",
    "SessionMode",
    "TransactionKind",
    "GraphTransaction",
    "GraphSession",
    "GraphDriver",
]
