"""MySQL / MariaDB statement adapter."""

from __future__ import annotations

from typing import Any

from .base import StatementAdapter
from .types import DatabaseType

GENERATED_KEY_COLUMN = "GENERATED_KEY"


class MySQLStatementAdapter(StatementAdapter):
    """
    MySQL statement adapter (``mysql.connector`` or ``PyMySQL``).

    Only the auto-increment id is reported, under ``GENERATED_KEY``; each
    batch entry runs on its own so every row contributes its id.
    """

    db_type = DatabaseType.MYSQL

    def _capture_keys(self, cursor: Any) -> None:
        if cursor.lastrowid:
            self._record_keys([GENERATED_KEY_COLUMN], [(cursor.lastrowid,)])


__all__ = [
    "MySQLStatementAdapter",
]
