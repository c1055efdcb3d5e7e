"""Oracle statement adapter."""

from __future__ import annotations

from collections import deque
from typing import Any

from insertkit.core.errors import ConfigError
from insertkit.core.schema import ColumnKind, ColumnType

from .base import StatementAdapter
from .types import DatabaseType, GeneratedKeysMode, GeneratedKeysRequest


def _driver() -> Any:
    try:
        import oracledb
    except ImportError as e:
        raise ConfigError(
            "oracledb is required for Oracle. Install with: pip install insertkit[oracle]",
            cause=e,
        ) from e
    return oracledb


class OracleStatementAdapter(StatementAdapter):
    """
    Oracle statement adapter (``python-oracledb``).

    Generated keys are read through ``RETURNING ... INTO`` out binds that
    follow the statement's own numbered parameters. Binary and LOB NULLs
    need an explicit input type, otherwise oracledb binds them as VARCHAR2.
    """

    db_type = DatabaseType.ORACLE

    def __init__(self, *args: Any, **kwargs: Any):
        self._returning: list[str] = []
        self._input_sizes: dict[int, Any] = {}
        self._entry_sizes: deque[dict[int, Any]] = deque()
        super().__init__(*args, **kwargs)

    def prepare_sql(self, sql: str, request: GeneratedKeysRequest) -> str:
        if request.mode is GeneratedKeysMode.BY_NAME:
            self._returning = list(request.column_names)
        return sql

    def bind_null(self, index: int, column_type: ColumnType) -> None:
        if column_type.is_binary:
            oracledb = _driver()
            self._input_sizes[index] = (
                oracledb.DB_TYPE_BLOB if column_type.kind is ColumnKind.BLOB else oracledb.DB_TYPE_RAW
            )
        super().bind_null(index, column_type)

    def _take_params(self) -> list[Any]:
        params = super()._take_params()
        # input sizes belong to the entry they were bound with
        self._entry_sizes.append(self._input_sizes)
        self._input_sizes = {}
        return params

    def _execute(self, params: list[Any]) -> int:
        cursor = self.cursor
        sizes = self._entry_sizes.popleft() if self._entry_sizes else {}
        if sizes:
            cursor.setinputsizes(*[sizes.get(i) for i in range(len(params))])
        if not self._returning:
            cursor.execute(self.sql, params)
            return max(cursor.rowcount, 0)

        oracledb = _driver()
        out_vars = [cursor.var(oracledb.DB_TYPE_NUMBER) for _ in self._returning]
        targets = ", ".join(f":{len(params) + i + 1}" for i in range(len(out_vars)))
        sql = f"{self.sql} RETURNING {', '.join(self._returning)} INTO {targets}"
        cursor.execute(sql, [*params, *out_vars])
        count = max(cursor.rowcount, 0)
        if count:
            # DML returning yields one list of values per out bind
            columns = [var.getvalue() or [] for var in out_vars]
            self._record_keys(self._returning, list(zip(*columns)))
        return count

    def _capture_keys(self, cursor: Any) -> None:
        # captured in _execute from the out binds
        pass

    def _cancel(self) -> None:
        self._connection.cancel()


__all__ = [
    "OracleStatementAdapter",
]
