"""Tests for iam_app.core.errors: error hierarchy and driver code parsing."""

from iam_app.core.errors import (
    AmbiguousMatchError,
    DatabaseError,
    DriverConnectionError,
    DriverError,
    ErrorCategory,
    IamAppError,
    NotFoundError,
    QueryError,
    SchemaFileError,
)


class TestDefaults:
    def test_base_error(self):
        err = IamAppError("boom")
        assert err.code == "INTERNAL"
        assert err.category == ErrorCategory.INTERNAL
        assert str(err) == "boom"

    def test_subclass_defaults(self):
        assert NotFoundError("x").code == "NOT_FOUND"
        assert AmbiguousMatchError("x").code == "CONFLICT"
        assert SchemaFileError("x").category == ErrorCategory.IO
        assert DriverConnectionError("x").category == ErrorCategory.CONNECTION
        assert QueryError("x").category == ErrorCategory.QUERY

    def test_code_override(self):
        assert DatabaseError("gone", code="DBS1").code == "DBS1"

    def test_driver_hierarchy(self):
        assert issubclass(DriverConnectionError, DriverError)
        assert issubclass(QueryError, DriverError)
        assert issubclass(DriverError, IamAppError)


class TestWithContext:
    def test_known_fields(self):
        err = QueryError("bad").with_context(database="db", query="match $x;")
        assert err.context.database == "db"
        assert err.context.query == "match $x;"

    def test_unknown_fields_go_to_metadata(self):
        err = NotFoundError("no user").with_context(user="Kevin Morrison")
        assert err.context.metadata == {"user": "Kevin Morrison"}
        assert err.context.to_dict() == {"user": "Kevin Morrison"}

    def test_to_dict(self):
        cause = RuntimeError("native")
        err = DatabaseError("failed", code="DBS1", cause=cause).with_context(database="db")
        d = err.to_dict()
        assert d["error_type"] == "DatabaseError"
        assert d["code"] == "DBS1"
        assert d["category"] == "DATABASE"
        assert d["context"] == {"database": "db"}
        assert d["cause"] == "native"
        assert err.__cause__ is cause


class TestFromDriver:
    def test_parses_bracketed_code(self):
        native = RuntimeError("[DBS1] Database 'sample_app_db' does not exist.")
        err = DatabaseError.from_driver(native)
        assert err.code == "DBS1"
        assert err.context.driver_code == "DBS1"
        assert "does not exist" in err.message
        assert err.cause is native

    def test_without_code_keeps_default(self):
        err = QueryError.from_driver(RuntimeError("something odd"))
        assert err.code == "QUERY_FAILED"
        assert err.context.driver_code is None

    def test_message_override(self):
        err = DatabaseError.from_driver(RuntimeError("[TXN08] closed"), "Transaction commit failed.")
        assert err.message == "Transaction commit failed."
        assert err.code == "TXN08"

