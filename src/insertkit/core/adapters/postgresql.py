"""PostgreSQL statement adapter."""

from __future__ import annotations

from typing import Any

from .base import StatementAdapter
from .types import DatabaseType, GeneratedKeysMode, GeneratedKeysRequest


class PostgreSQLStatementAdapter(StatementAdapter):
    """
    PostgreSQL statement adapter (``psycopg2``).

    Generated keys come from a ``RETURNING`` clause: the requested columns,
    or every column when the request is opaque. Each batch entry returns
    its own rows.
    """

    db_type = DatabaseType.POSTGRESQL

    def prepare_sql(self, sql: str, request: GeneratedKeysRequest) -> str:
        match request.mode:
            case GeneratedKeysMode.BY_NAME if request.column_names:
                return f"{sql} RETURNING {', '.join(request.column_names)}"
            case GeneratedKeysMode.ALL:
                return f"{sql} RETURNING *"
            case _:
                return sql

    def _capture_keys(self, cursor: Any) -> None:
        names = [desc[0] for desc in cursor.description or ()]
        self._record_keys(names, [tuple(row) for row in cursor.fetchall()])

    def _cancel(self) -> None:
        self._connection.cancel()


__all__ = [
    "PostgreSQLStatementAdapter",
]
