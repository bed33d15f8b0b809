"""
Request-scoped context for operations.

Every operation function receives an :class:`OperationContext` as its first
argument.  The context carries the open driver, the target database name,
the settings it was built from, the caller and the dry-run flag.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from iam_app.core.protocols import GraphDriver
from iam_app.core.settings import IamAppSettings


@dataclass
class OperationContext:
    """Context passed to every operation function.

    Attributes:
        driver: Open connection satisfying :class:`iam_app.core.protocols.GraphDriver`.
        settings: Settings the context was built from (file paths, expected counts).
        database: Target database name; defaults to ``settings.database``.
        request_id: Unique ID for this operation invocation (auto-generated).
        caller: Origin of the request, ``"cli"`` or ``"sdk"``; bound into log events.
        dry_run: When ``True``, operations return a preview without side effects.
    """

    driver: GraphDriver
    settings: IamAppSettings
    database: str = ""
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    caller: str = "sdk"
    dry_run: bool = False

    def __post_init__(self) -> None:
        if not self.database:
            self.database = self.settings.database
