"""
Structured error types for iam-app.

Every failure the walkthrough can hit is raised as an :class:`IamAppError`
subclass.  Errors carry a machine-readable ``code``, an :class:`ErrorCategory`
for routing, an :class:`ErrorContext` with the database / query / file that
was involved, and the chained driver exception when there is one.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                        IamAppError                               │
        │            (code, category, context, cause)                      │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  ConfigError      SchemaFileError      DriverError              │
        │  (CONFIG)         (IO)                 (driver code)            │
        │                                             │                    │
        │                             DriverConnectionError               │
        │                             DatabaseError                       │
        │                             QueryError                          │
        │                                                                  │
        │  NotFoundError    AmbiguousMatchError                           │
        │  (DATA)           (DATA)                                        │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = QueryError("Invalid query", code="TQL03")
    >>> error.code
    'TQL03'
    >>> error.with_context(database="sample_app_db").context.database
    'sample_app_db'
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and rendering."""

    CONNECTION = "CONNECTION"
    DATABASE = "DATABASE"
    QUERY = "QUERY"
    CONFIG = "CONFIG"
    IO = "IO"
    DATA = "DATA"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Only the fields that are set show up in :meth:`to_dict`.
    """

    database: str | None = None
    query: str | None = None
    path: str | None = None
    driver_code: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["database", "query", "path", "driver_code"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class IamAppError(Exception):
    """
    Base exception for all iam-app errors.

    Subclasses set ``default_code`` and ``default_category``; both can be
    overridden per instance.
    """

    default_code: str = "INTERNAL"
    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> IamAppError:
        """
        Add context to this error (fluent API).

        Usage:
            raise QueryError("Failed").with_context(database="sample_app_db")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, code={self.code})"


# =============================================================================
# CONFIGURATION AND LOCAL FILES
# =============================================================================


class ConfigError(IamAppError):
    """Invalid or incomplete settings."""

    default_code = "CONFIG"
    default_category = ErrorCategory.CONFIG


class SchemaFileError(IamAppError):
    """A schema or data file could not be read."""

    default_code = "FILE_NOT_READABLE"
    default_category = ErrorCategory.IO


# =============================================================================
# DRIVER ERRORS
# =============================================================================


_DRIVER_CODE = re.compile(r"\[([A-Z]{2,}\d+)\]")


class DriverError(IamAppError):
    """
    An error reported by the TypeDB driver.

    ``code`` is the driver's own error code when the native message carries
    one (``[DBS1] Database 'x' does not exist.`` -> ``DBS1``).
    """

    default_code = "DRIVER_ERROR"
    default_category = ErrorCategory.DATABASE

    @classmethod
    def from_driver(cls, exc: Exception, message: str | None = None) -> DriverError:
        """Wrap a native driver exception, keeping its code and message."""
        text = str(exc).strip()
        match = _DRIVER_CODE.search(text)
        code = match.group(1) if match else None
        error = cls(message or text or exc.__class__.__name__, code=code, cause=exc)
        if code:
            error.context.driver_code = code
        return error


class DriverConnectionError(DriverError):
    """The server could not be reached or refused the credentials."""

    default_code = "CONNECTION_FAILED"
    default_category = ErrorCategory.CONNECTION


class DatabaseError(DriverError):
    """Database manager, session or transaction failure."""

    default_category = ErrorCategory.DATABASE


class QueryError(DriverError):
    """A query was rejected or failed while executing."""

    default_code = "QUERY_FAILED"
    default_category = ErrorCategory.QUERY


# =============================================================================
# DATA ERRORS
# =============================================================================


class NotFoundError(IamAppError):
    """Nothing matched where exactly one match was required."""

    default_code = "NOT_FOUND"
    default_category = ErrorCategory.DATA


class AmbiguousMatchError(IamAppError):
    """More than one match where exactly one was required."""

    default_code = "CONFLICT"
    default_category = ErrorCategory.DATA


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "IamAppError",
    "ConfigError",
    "SchemaFileError",
    "DriverError",
    "DriverConnectionError",
    "DatabaseError",
    "QueryError",
    "NotFoundError",
    "AmbiguousMatchError",
]
