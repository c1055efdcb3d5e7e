"""Statement adapter base class.

Manifesto:
    Insert statements talk to exactly one prepared statement per execution.
    The adapter is that statement: it holds the SQL text, collects positional
    bindings, executes once or as a batch, and captures whatever the driver
    reports as generated keys. Driver quirks (how keys are reported, how
    a binary NULL is bound, how an execution is cancelled) live in the
    subclasses and nowhere else.

Features:
    - Positional binding with declared-type-aware NULLs
    - Binary streams bound as their bytes (``bind_stream``)
    - ``execute_single()`` / ``add_to_batch()`` + ``execute_batch()``
    - ``generated_keys()`` after execution, when requested
    - Idempotent ``release()``; ``cancel()`` is a no-op once released
    - Context-manager protocol releasing on every exit path

Tags:
    adapter-pattern, dbapi, generated-keys, insertkit

Doc-Types:
    api-reference
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, BinaryIO, ClassVar

from insertkit.core.errors import StatementStateError
from insertkit.core.schema import ColumnType

from .types import DatabaseType, GeneratedKeys, GeneratedKeysRequest


class StatementAdapter(ABC):
    """
    One prepared insert statement on a DB-API connection.

    Subclasses implement ``_capture_keys`` and may override
    ``prepare_sql``, ``bind_null``, ``_execute`` and ``_cancel``.
    """

    db_type: ClassVar[DatabaseType]

    def __init__(
        self,
        connection: Any,
        sql: str,
        request: GeneratedKeysRequest | None = None,
    ):
        self._connection = connection
        self._request = request or GeneratedKeysRequest.none()
        self.sql = self.prepare_sql(sql, self._request)
        self._cursor: Any = None
        self._params: dict[int, Any] = {}
        self._batch: list[list[Any]] = []
        self._keys: GeneratedKeys | None = None
        self._executed = False
        self._released = False

    @property
    def request(self) -> GeneratedKeysRequest:
        return self._request

    @property
    def is_released(self) -> bool:
        return self._released

    def prepare_sql(self, sql: str, request: GeneratedKeysRequest) -> str:
        """Adjust the SQL text for generated-key capture (default: unchanged)."""
        return sql

    @property
    def cursor(self) -> Any:
        self._check_open()
        if self._cursor is None:
            self._cursor = self._connection.cursor()
        return self._cursor

    # -- Binding -----------------------------------------------------------

    def bind(self, index: int, value: Any) -> None:
        """Bind ``value`` to the 0-based positional parameter ``index``."""
        self._check_open()
        self._params[index] = value

    def bind_null(self, index: int, column_type: ColumnType) -> None:
        """Bind NULL for a parameter of the given declared type."""
        self.bind(index, None)

    def bind_stream(self, index: int, stream: BinaryIO, length: int | None = None) -> None:
        """Bind the bytes read from ``stream`` (at most ``length`` when given)."""
        self._check_open()
        self.bind(index, stream.read() if length is None else stream.read(length))

    def _take_params(self) -> list[Any]:
        params, self._params = self._params, {}
        if sorted(params) != list(range(len(params))):
            raise StatementStateError(
                f"Parameters must be bound contiguously from 0, got {sorted(params)}"
            ).with_context(statement=self.sql)
        return [params[i] for i in range(len(params))]

    def add_to_batch(self) -> None:
        """Queue the current bindings as one batch entry."""
        self._check_open()
        self._batch.append(self._take_params())

    # -- Execution ---------------------------------------------------------

    def execute_single(self) -> int:
        """Execute the current bindings; returns the affected row count."""
        count = self._run(self._take_params())
        self._executed = True
        return count

    def execute_batch(self) -> list[int]:
        """Execute queued entries in submission order; one count per entry."""
        batch, self._batch = self._batch, []
        counts = [self._run(params) for params in batch]
        self._executed = True
        return counts

    def _run(self, params: list[Any]) -> int:
        count = self._execute(params)
        if self._request.requested and count > 0:
            self._capture_keys(self.cursor)
        return count

    def _execute(self, params: list[Any]) -> int:
        cursor = self.cursor
        cursor.execute(self.sql, params)
        # DB-API reports -1 when the count is unknown
        return max(cursor.rowcount, 0)

    @abstractmethod
    def _capture_keys(self, cursor: Any) -> None:
        """Record generated keys after one successful execution."""
        ...

    def _record_keys(
        self,
        column_names: list[str],
        rows: list[tuple[Any, ...]],
        *,
        replace: bool = False,
    ) -> None:
        if self._keys is None or replace:
            self._keys = GeneratedKeys(column_names=list(column_names), rows=list(rows))
        else:
            self._keys.rows.extend(rows)

    def generated_keys(self) -> GeneratedKeys | None:
        """Generated keys of the executed statement.

        None unless generated keys were requested and the statement ran.
        """
        if not self._request.requested or not self._executed:
            return None
        return self._keys if self._keys is not None else GeneratedKeys()

    # -- Lifecycle ---------------------------------------------------------

    def cancel(self) -> None:
        """Best-effort abort of an in-flight execution."""
        if self._released or self._cursor is None:
            return
        self._cancel()

    def _cancel(self) -> None:
        pass

    def release(self) -> None:
        """Close the cursor. Safe to call more than once."""
        if self._released:
            return
        self._released = True
        cursor, self._cursor = self._cursor, None
        if cursor is not None:
            cursor.close()

    def _check_open(self) -> None:
        if self._released:
            raise StatementStateError("Statement already released").with_context(
                statement=self.sql, backend=self.db_type.value
            )

    def __enter__(self) -> StatementAdapter:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()


__all__ = [
    "StatementAdapter",
]
