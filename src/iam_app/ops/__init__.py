"""
Operations layer -- the walkthrough's steps as plain functions.

- All functions accept ``OperationContext`` as first argument
- All functions return ``OperationResult[T]`` (never raise)
- All functions are transport-agnostic (no CLI knowledge)

Usage::

    from iam_app.ops import OperationContext
    from iam_app.ops.database import setup_database

    ctx = OperationContext(driver=driver, settings=settings)
    result = setup_database(ctx)
    assert result.success
"""

from iam_app.ops.context import OperationContext
from iam_app.ops.result import OperationError, OperationResult

__all__ = [
    "OperationContext",
    "OperationError",
    "OperationResult",
]
