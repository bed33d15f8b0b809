"""
Operation result envelope.

Provides :class:`OperationResult`, the typed success/failure envelope that
every operation function returns.  Operations never raise: driver and data
errors become a failed result carrying the error code, which the CLI turns
into a message on stderr and a non-zero exit status.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from iam_app.core.errors import ErrorCategory, IamAppError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class OperationError:
    """Structured error detail for failed operations.

    Attributes:
        code: Machine-readable code (``NOT_FOUND``, ``CONFLICT``, a driver code, …).
        message: Human-readable description of the error.
        category: Optional :class:`ErrorCategory` for rendering.
        details: Extra key/value context (database, query, path).
    """

    code: str
    message: str
    category: ErrorCategory | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class OperationResult(Generic[T]):
    """Envelope returned by every operation function.

    Factory methods :meth:`ok`, :meth:`fail` and :meth:`from_error` should be
    used instead of the constructor directly.
    """

    success: bool
    data: T | None = None
    error: OperationError | None = None
    warnings: list[str] = field(default_factory=list)
    elapsed_ms: float = 0.0

    # ------------------------------------------------------------------ #
    # Factory helpers
    # ------------------------------------------------------------------ #

    @classmethod
    def ok(
        cls,
        data: T,
        *,
        warnings: list[str] | None = None,
        elapsed_ms: float = 0.0,
    ) -> OperationResult[T]:
        """Create a successful result."""
        return cls(
            success=True,
            data=data,
            warnings=warnings or [],
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        *,
        category: ErrorCategory | None = None,
        details: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
        elapsed_ms: float = 0.0,
    ) -> OperationResult[T]:
        """Create a failed result."""
        return cls(
            success=False,
            error=OperationError(
                code=code,
                message=message,
                category=category,
                details=details or {},
            ),
            warnings=warnings or [],
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def from_error(cls, exc: IamAppError, *, elapsed_ms: float = 0.0) -> OperationResult[T]:
        """Create a failed result from a raised :class:`IamAppError`."""
        return cls.fail(
            exc.code,
            exc.message,
            category=exc.category,
            details=exc.context.to_dict(),
            elapsed_ms=elapsed_ms,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict (for JSON output)."""
        d: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            d["data"] = self.data
        if self.error is not None:
            d["error"] = {
                "code": self.error.code,
                "message": self.error.message,
            }
            if self.error.details:
                d["error"]["details"] = self.error.details
        if self.warnings:
            d["warnings"] = self.warnings
        if self.elapsed_ms:
            d["elapsed_ms"] = round(self.elapsed_ms, 2)
        return d


# ------------------------------------------------------------------ #
# Timing helper
# ------------------------------------------------------------------ #


class _Timer:
    """Minimal stopwatch for timing operations."""

    __slots__ = ("_start",)

    def __init__(self) -> None:
        self._start = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._start) * 1000


def start_timer() -> _Timer:
    """Return a lightweight timer.  Use ``timer.elapsed_ms`` when done."""
    return _Timer()


# ------------------------------------------------------------------ #
# Exception mapping
# ------------------------------------------------------------------ #


def failure_from(exc: Exception, *, elapsed_ms: float = 0.0) -> OperationResult[Any]:
    """Turn an exception caught by an operation into a failed result.

    :class:`IamAppError` keeps its own code; anything else is ``INTERNAL``
    and is logged with its traceback.
    """
    from iam_app.core.logging import get_logger

    logger = get_logger(__name__)
    if isinstance(exc, IamAppError):
        logger.error("op_failed", **exc.to_dict())
        return OperationResult.from_error(exc, elapsed_ms=elapsed_ms)
    logger.exception("op_failed", error=str(exc))
    return OperationResult.fail(
        "INTERNAL",
        f"Unexpected error: {exc}",
        category=ErrorCategory.INTERNAL,
        elapsed_ms=elapsed_ms,
    )
