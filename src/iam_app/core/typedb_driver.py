"""TypeDB driver adapter.

Wraps ``typedb.driver`` (2.x session API) to satisfy the
:class:`~iam_app.core.protocols.GraphDriver` protocol.

Driver handles stay inside this module.  Answers are materialised before
they leave a transaction, concepts are flattened to plain Python values, and
every :class:`typedb.driver.TypeDBDriverException` is re-raised as a
:class:`~iam_app.core.errors.DriverError` subclass carrying the driver's
error code.

``typedb.driver`` loads a native library, so it is imported lazily: only
commands that actually talk to a server pay for it.

Usage::

    from iam_app.core.settings import get_settings
    from iam_app.core.typedb_driver import open_driver

    with open_driver(get_settings()) as driver:
        with driver.session("sample_app_db", SessionMode.DATA) as session:
            with session.transaction(TransactionKind.READ) as tx:
                rows = tx.get("match $u isa user; get;")
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from iam_app.core.errors import (
    DatabaseError,
    DriverConnectionError,
    DriverError,
    QueryError,
)
from iam_app.core.logging import get_logger
from iam_app.core.protocols import Row, SessionMode, TransactionKind

if TYPE_CHECKING:
    from iam_app.core.settings import IamAppSettings

logger = get_logger(__name__)


@contextmanager
def _translate(error_cls: type[DriverError], message: str | None = None, **context: Any) -> Iterator[None]:
    """Re-raise driver exceptions raised inside the block as *error_cls*."""
    from typedb.driver import TypeDBDriverException

    try:
        yield
    except TypeDBDriverException as exc:
        error = error_cls.from_driver(exc, message)
        error.with_context(**context)
        logger.debug("driver_error", code=error.code, **error.context.to_dict())
        raise error from exc


def _flatten(concept: Any) -> Any:
    if concept.is_attribute():
        return concept.as_attribute().get_value()
    if concept.is_value():
        return concept.as_value().get()
    if concept.is_type():
        return concept.as_type().get_label().name
    return concept.as_thing().get_iid()


def _row(concept_map: Any) -> Row:
    return {var: _flatten(concept_map.get(var)) for var in concept_map.variables()}


class TypeDBTransaction:
    """Adapter: ``typedb.driver.TypeDBTransaction`` → ``GraphTransaction``."""

    def __init__(self, tx: Any, database: str) -> None:
        self._tx = tx
        self._database = database

    def _query(self, query: str) -> Any:
        return _translate(QueryError, None, database=self._database, query=query.strip())

    def define(self, query: str) -> None:
        with self._query(query):
            self._tx.query.define(query).resolve()

    def insert(self, query: str) -> list[Row]:
        with self._query(query):
            return [_row(cm) for cm in self._tx.query.insert(query)]

    def get(self, query: str) -> list[Row]:
        with self._query(query):
            return [_row(cm) for cm in self._tx.query.get(query)]

    def get_aggregate(self, query: str) -> Any:
        with self._query(query):
            value = self._tx.query.get_aggregate(query).resolve()
            return None if value is None else value.get()

    def fetch(self, query: str) -> list[dict[str, Any]]:
        with self._query(query):
            return list(self._tx.query.fetch(query))

    def update(self, query: str) -> list[Row]:
        with self._query(query):
            return [_row(cm) for cm in self._tx.query.update(query)]

    def delete(self, query: str) -> None:
        with self._query(query):
            self._tx.query.delete(query).resolve()

    def commit(self) -> None:
        with _translate(DatabaseError, "Transaction commit failed.", database=self._database):
            self._tx.commit()


class TypeDBSession:
    """Adapter: ``typedb.driver.TypeDBSession`` → ``GraphSession``."""

    def __init__(self, session: Any, database: str) -> None:
        self._session = session
        self._database = database

    @contextmanager
    def transaction(self, kind: TransactionKind, *, infer: bool = False) -> Iterator[TypeDBTransaction]:
        from typedb.driver import TransactionType, TypeDBOptions

        tx_type = TransactionType.WRITE if kind == TransactionKind.WRITE else TransactionType.READ
        with _translate(DatabaseError, "Transaction failed to start.", database=self._database):
            tx = self._session.transaction(tx_type, TypeDBOptions(infer=infer))
        try:
            yield TypeDBTransaction(tx, self._database)
        finally:
            if tx.is_open():
                tx.close()


class TypeDBGraphDriver:
    """Adapter: ``typedb.driver.TypeDBDriver`` → ``GraphDriver``."""

    def __init__(self, driver: Any) -> None:
        self._driver = driver

    # -- database manager --------------------------------------------------

    def database_exists(self, name: str) -> bool:
        with _translate(DatabaseError, database=name):
            return bool(self._driver.databases.contains(name))

    def create_database(self, name: str) -> None:
        with _translate(DatabaseError, "Database creation failed.", database=name):
            self._driver.databases.create(name)

    def delete_database(self, name: str) -> None:
        with _translate(DatabaseError, "Failed to delete the database.", database=name):
            self._driver.databases.get(name).delete()

    # -- sessions ----------------------------------------------------------

    @contextmanager
    def session(self, database: str, mode: SessionMode) -> Iterator[TypeDBSession]:
        from typedb.driver import SessionType

        session_type = SessionType.SCHEMA if mode == SessionMode.SCHEMA else SessionType.DATA
        with _translate(DatabaseError, "Failed to open a session.", database=database):
            session = self._driver.session(database, session_type)
        try:
            yield TypeDBSession(session, database)
        finally:
            if session.is_open():
                session.close()

    def close(self) -> None:
        if self._driver.is_open():
            self._driver.close()

    def __enter__(self) -> TypeDBGraphDriver:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def raw(self) -> Any:
        """Access the underlying ``TypeDBDriver``."""
        return self._driver

    def __repr__(self) -> str:
        return f"TypeDBGraphDriver({self._driver!r})"


def open_driver(settings: IamAppSettings) -> TypeDBGraphDriver:
    """Connect to the server described by *settings*.

    Core edition connects to a single server; cloud edition authenticates
    with the configured credentials.
    """
    from typedb.driver import TypeDB, TypeDBCredential, TypeDBDriverException

    try:
        if settings.is_cloud:
            credential = TypeDBCredential(
                settings.username,
                settings.password,
                tls_root_ca_path=str(settings.tls_root_ca_path) if settings.tls_root_ca_path else None,
                tls_enabled=settings.tls_enabled,
            )
            raw = TypeDB.cloud_driver([settings.address], credential)
        else:
            raw = TypeDB.core_driver(settings.address)
    except TypeDBDriverException as exc:
        error = DriverConnectionError.from_driver(
            exc, f"Failed to connect to TypeDB server at {settings.address}: {exc}"
        )
        error.with_context(edition=settings.edition.value, address=settings.address)
        raise error from exc

    logger.info("driver_connected", address=settings.address, edition=settings.edition.value)
    return TypeDBGraphDriver(raw)
