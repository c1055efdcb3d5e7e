"""SQLite statement adapter."""

from __future__ import annotations

from typing import Any

from .base import StatementAdapter
from .types import DatabaseType

LAST_ROWID_COLUMN = "last_insert_rowid()"


class SQLiteStatementAdapter(StatementAdapter):
    """
    SQLite statement adapter (stdlib ``sqlite3``).

    SQLite reports only the rowid of the most recent insert, so a batch
    ends with a single generated-keys row. ``cursor.lastrowid`` is only
    maintained by ``execute()``, which is why batches run entry by entry.
    """

    db_type = DatabaseType.SQLITE

    def _capture_keys(self, cursor: Any) -> None:
        if cursor.lastrowid is not None:
            self._record_keys([LAST_ROWID_COLUMN], [(cursor.lastrowid,)], replace=True)

    def _cancel(self) -> None:
        self._connection.interrupt()


__all__ = [
    "SQLiteStatementAdapter",
]
