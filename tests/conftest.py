"""
Shared pytest fixtures and configuration for iam-app tests.

This module provides:
- ``FakeGraphDriver``: a scripted, in-memory ``GraphDriver`` so no TypeDB
  server is needed
- Settings isolated from the developer's environment and ``.env``
- An ``OperationContext`` wired to the fake driver
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
import structlog

from iam_app.core.errors import DatabaseError
from iam_app.core.protocols import SessionMode, TransactionKind
from iam_app.core.settings import IamAppSettings, clear_settings_cache
from iam_app.ops.context import OperationContext

_DEFAULT_ANSWERS: dict[str, Any] = {
    "define": None,
    "insert": [],
    "get": [],
    "get_aggregate": None,
    "fetch": [],
    "update": [],
    "delete": None,
}


@dataclass
class QueryCall:
    """One query submitted through a fake transaction."""

    method: str
    query: str
    database: str
    mode: SessionMode
    kind: TransactionKind
    infer: bool


class FakeTransaction:
    def __init__(self, driver: FakeGraphDriver, database: str, mode: SessionMode, kind: TransactionKind, infer: bool):
        self.driver = driver
        self.database = database
        self.mode = mode
        self.kind = kind
        self.infer = infer
        self.committed = False
        self.closed = False

    def _answer(self, method: str, query: str) -> Any:
        self.driver.calls.append(QueryCall(method, query.strip(), self.database, self.mode, self.kind, self.infer))
        queue = self.driver.answers.get(method)
        if queue:
            answer = queue.pop(0)
            if isinstance(answer, Exception):
                raise answer
            return answer
        return _DEFAULT_ANSWERS[method]

    def define(self, query: str) -> None:
        self._answer("define", query)

    def insert(self, query: str) -> list[dict[str, Any]]:
        return self._answer("insert", query)

    def get(self, query: str) -> list[dict[str, Any]]:
        return self._answer("get", query)

    def get_aggregate(self, query: str) -> Any:
        return self._answer("get_aggregate", query)

    def fetch(self, query: str) -> list[dict[str, Any]]:
        return self._answer("fetch", query)

    def update(self, query: str) -> list[dict[str, Any]]:
        return self._answer("update", query)

    def delete(self, query: str) -> None:
        self._answer("delete", query)

    def commit(self) -> None:
        self.committed = True
        self.driver.commits.append((self.database, self.mode))


class FakeSession:
    def __init__(self, driver: FakeGraphDriver, database: str, mode: SessionMode):
        self.driver = driver
        self.database = database
        self.mode = mode

    @contextmanager
    def transaction(self, kind: TransactionKind, *, infer: bool = False) -> Iterator[FakeTransaction]:
        tx = FakeTransaction(self.driver, self.database, self.mode, kind, infer)
        self.driver.transactions.append(tx)
        try:
            yield tx
        finally:
            tx.closed = True


@dataclass
class FakeGraphDriver:
    """Scripted ``GraphDriver``.

    ``queue(method, *answers)`` lines up answers per query method; an
    ``Exception`` answer is raised instead of returned.
    """

    databases: set[str] = field(default_factory=set)
    answers: dict[str, list[Any]] = field(default_factory=dict)
    calls: list[QueryCall] = field(default_factory=list)
    commits: list[tuple[str, SessionMode]] = field(default_factory=list)
    transactions: list[FakeTransaction] = field(default_factory=list)
    created: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    closed: bool = False

    def queue(self, method: str, *answers: Any) -> FakeGraphDriver:
        self.answers.setdefault(method, []).extend(answers)
        return self

    def queries(self, method: str) -> list[str]:
        return [c.query for c in self.calls if c.method == method]

    def database_exists(self, name: str) -> bool:
        return name in self.databases

    def create_database(self, name: str) -> None:
        if name in self.databases:
            raise DatabaseError(f"Database '{name}' already exists.", code="DBS2")
        self.databases.add(name)
        self.created.append(name)

    def delete_database(self, name: str) -> None:
        if name not in self.databases:
            raise DatabaseError(f"Database '{name}' does not exist.", code="DBS1")
        self.databases.discard(name)
        self.deleted.append(name)

    @contextmanager
    def session(self, database: str, mode: SessionMode) -> Iterator[FakeSession]:
        if database not in self.databases:
            raise DatabaseError(f"Database '{database}' does not exist.", code="DBS1")
        yield FakeSession(self, database, mode)

    def close(self) -> None:
        self.closed = True


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep ``IAM_*`` variables and a stray ``.env`` out of every test."""
    import os

    for key in list(os.environ):
        if key.startswith("IAM_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()
    # CLI tests point logging at CliRunner streams that close afterwards.
    structlog.reset_defaults()


@pytest.fixture()
def settings() -> IamAppSettings:
    return IamAppSettings()


@pytest.fixture()
def fake_driver() -> FakeGraphDriver:
    return FakeGraphDriver()


@pytest.fixture()
def seeded_driver(settings: IamAppSettings) -> FakeGraphDriver:
    """Fake driver on which the sample database already exists."""
    return FakeGraphDriver(databases={settings.database})


@pytest.fixture()
def ctx(fake_driver: FakeGraphDriver, settings: IamAppSettings) -> OperationContext:
    return OperationContext(driver=fake_driver, settings=settings, caller="test")


@pytest.fixture()
def seeded_ctx(seeded_driver: FakeGraphDriver, settings: IamAppSettings) -> OperationContext:
    return OperationContext(driver=seeded_driver, settings=settings, caller="test")


@pytest.fixture()
def dry_ctx(seeded_driver: FakeGraphDriver, settings: IamAppSettings) -> OperationContext:
    return OperationContext(driver=seeded_driver, settings=settings, caller="test", dry_run=True)
