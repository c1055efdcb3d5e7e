"""
CLI layer for insertkit.

Terminal transport only: argument parsing, coloured output and table
formatting. Statement logic lives in ``insertkit.core``.

Entry point::

    insertkit --help
"""

from insertkit.cli.app import app

__all__ = ["app"]
