"""Session: a DB-API connection plus the dialect and adapters it needs.

The session stands in for the connection-management layer: it resolves the
backend identity (from the connection's driver module unless given), the
``Dialect`` describing that backend, and opens statement adapters through
the registry. Transactions are a thin commit/rollback wrapper.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from insertkit.core.adapters import (
    DatabaseType,
    GeneratedKeysRequest,
    StatementAdapter,
    detect_backend,
    open_statement,
)
from insertkit.core.dialect import Dialect, get_dialect
from insertkit.core.errors import DatabaseError
from insertkit.core.logging import get_logger

logger = get_logger(__name__)


class Session:
    """A DB-API connection bound to a backend identity and its dialect."""

    def __init__(
        self,
        connection: Any,
        backend: DatabaseType | str | None = None,
        dialect: Dialect | None = None,
    ):
        self.connection = connection
        if backend is None:
            backend = detect_backend(connection)
        self.backend = backend.value if isinstance(backend, DatabaseType) else backend.lower()
        self.dialect = dialect or get_dialect(self.backend)

    @classmethod
    def sqlite(cls, path: str = ":memory:", *, timeout: float = 5.0) -> Session:
        """Open a stdlib SQLite connection with foreign keys enabled."""
        import sqlite3

        uri = path.startswith("file:")
        try:
            conn = sqlite3.connect(path, timeout=timeout, uri=uri)
            conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to open SQLite database: {e}", cause=e).with_context(
                backend="sqlite", path=path
            ) from e
        return cls(conn, DatabaseType.SQLITE)

    def prepare(self, sql: str, request: GeneratedKeysRequest | None = None) -> StatementAdapter:
        """Open a statement adapter for ``sql`` on this connection."""
        logger.debug("statement_prepared", backend=self.backend, sql=sql)
        return open_statement(self.backend, self.connection, sql, request)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Commit on success, roll back on any exception."""
        try:
            yield self
            self.connection.commit()
        except Exception:
            self.connection.rollback()
            raise

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> Session:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = [
    "Session",
]
