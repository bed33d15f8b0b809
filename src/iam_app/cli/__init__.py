"""
CLI layer for iam-app.

Provides a Typer application whose commands delegate to the operations
layer (``iam_app.ops``).  This package handles only terminal transport:
argument parsing, prompting, narration and exit status.

Entry point::

    iam-app --help
"""

from iam_app.cli.app import app

__all__ = ["app"]
