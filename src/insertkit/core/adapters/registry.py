"""Statement adapter registry and factory.

Manifesto:
    Insert statements never name an adapter class. The registry maps the
    active connection's backend identity to the adapter that knows its
    driver, and ``open_statement()`` builds one for a SQL text and a
    generated-keys request.

Features:
    - ``AdapterRegistry`` with pre-registered defaults
    - ``register()`` for custom / third-party adapters and test doubles
    - ``detect_backend()``: DB-API connection -> ``DatabaseType`` name

Tags:
    registry, factory, adapters, insertkit

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import Any

from insertkit.core.errors import UnknownBackendError

from .base import StatementAdapter
from .db2 import DB2StatementAdapter
from .mysql import MySQLStatementAdapter
from .oracle import OracleStatementAdapter
from .postgresql import PostgreSQLStatementAdapter
from .sqlite import SQLiteStatementAdapter
from .types import DatabaseType, GeneratedKeysRequest

# Connection class module prefix -> backend name
_DRIVER_MODULES: dict[str, str] = {
    "sqlite3": "sqlite",
    "psycopg2": "postgresql",
    "mysql.connector": "mysql",
    "pymysql": "mysql",
    "oracledb": "oracle",
    "ibm_db_dbi": "db2",
}


class AdapterRegistry:
    """
    Registry of statement adapter classes keyed by backend name.

    Pre-registered adapters:
    - ``sqlite`` — :class:`SQLiteStatementAdapter`
    - ``postgresql`` / ``postgres`` — :class:`PostgreSQLStatementAdapter`
    - ``mysql`` — :class:`MySQLStatementAdapter`
    - ``oracle`` — :class:`OracleStatementAdapter`
    - ``db2`` — :class:`DB2StatementAdapter`
    """

    def __init__(self):
        self._factories: dict[str, type[StatementAdapter]] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        self._factories["sqlite"] = SQLiteStatementAdapter
        self._factories["postgresql"] = PostgreSQLStatementAdapter
        self._factories["postgres"] = PostgreSQLStatementAdapter  # Alias
        self._factories["mysql"] = MySQLStatementAdapter
        self._factories["oracle"] = OracleStatementAdapter
        self._factories["db2"] = DB2StatementAdapter

    def register(self, name: str, adapter_class: type[StatementAdapter]) -> None:
        """Register an adapter class."""
        self._factories[name.lower()] = adapter_class

    def unregister(self, name: str) -> None:
        self._factories.pop(name.lower(), None)

    def create(
        self,
        name: str,
        connection: Any,
        sql: str,
        request: GeneratedKeysRequest | None = None,
    ) -> StatementAdapter:
        """Open a statement adapter for backend ``name``."""
        name = name.lower()
        if name not in self._factories:
            raise UnknownBackendError(f"Unknown statement adapter: {name}").with_context(backend=name)
        return self._factories[name](connection, sql, request)

    def list_adapters(self) -> list[str]:
        """List registered adapter names."""
        return sorted(self._factories.keys())


# Global registry
adapter_registry = AdapterRegistry()


def open_statement(
    db_type: DatabaseType | str,
    connection: Any,
    sql: str,
    request: GeneratedKeysRequest | None = None,
) -> StatementAdapter:
    """
    Open a statement adapter for the given backend.

    Usage:
        adapter = open_statement(DatabaseType.SQLITE, conn, sql, GeneratedKeysRequest.all())
    """
    name = db_type.value if isinstance(db_type, DatabaseType) else db_type
    return adapter_registry.create(name, connection, sql, request)


def detect_backend(connection: Any) -> str:
    """Backend name of a DB-API connection, from its driver module."""
    module = type(connection).__module__
    for prefix, name in _DRIVER_MODULES.items():
        if module == prefix or module.startswith(prefix + "."):
            return name
    raise UnknownBackendError(
        f"Cannot detect backend for connection type {type(connection).__qualname__} ({module})"
    ).with_context(driver_module=module)


__all__ = [
    "AdapterRegistry",
    "adapter_registry",
    "open_statement",
    "detect_backend",
]
