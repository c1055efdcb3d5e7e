"""Statement adapters -- one execution boundary per database driver.

Manifesto:
    Insert statements must behave the same on SQLite (dev), PostgreSQL
    (production) and the enterprise backends, yet each driver reports
    generated keys differently. The adapters hide those differences behind
    one contract so the statement code only reads dialect flags.

    Each adapter is **import-guarded**: the driver module is only touched
    when a connection of that driver is in use. Install the extras::

        pip install insertkit[postgresql]   # psycopg2-binary
        pip install insertkit[mysql]        # mysql-connector-python
        pip install insertkit[oracle]       # oracledb
        pip install insertkit[db2]          # ibm-db

Architecture::

    StatementAdapter (base.py)            bind / execute / generated keys / release
        |-- SQLiteStatementAdapter        last rowid only
        |-- PostgreSQLStatementAdapter    RETURNING rows
        |-- MySQLStatementAdapter         per-row lastrowid
        |-- OracleStatementAdapter        RETURNING ... INTO out binds
        |-- DB2StatementAdapter           IDENTITY_VAL_LOCAL()

    AdapterRegistry (registry.py)         backend name -> adapter class
    GeneratedKeys (types.py)              tabular keys with Result-based probes

Guardrails:
    ❌ ``adapter = SQLiteStatementAdapter(conn, sql)`` in statement code
    ✅ ``adapter = session.prepare(sql, request)``

Tags:
    adapters, generated-keys, multi-backend, registry-pattern, insertkit

Doc-Types:
    package-overview, architecture-map, module-index
"""

from .base import StatementAdapter
from .db2 import DB2StatementAdapter
from .mysql import MySQLStatementAdapter
from .oracle import OracleStatementAdapter
from .postgresql import PostgreSQLStatementAdapter
from .registry import AdapterRegistry, adapter_registry, detect_backend, open_statement
from .sqlite import SQLiteStatementAdapter
from .types import DatabaseType, GeneratedKeys, GeneratedKeysMode, GeneratedKeysRequest

__all__ = [
    # Types
    "DatabaseType",
    "GeneratedKeys",
    "GeneratedKeysMode",
    "GeneratedKeysRequest",
    # Base class
    "StatementAdapter",
    # Implementations
    "SQLiteStatementAdapter",
    "PostgreSQLStatementAdapter",
    "MySQLStatementAdapter",
    "OracleStatementAdapter",
    "DB2StatementAdapter",
    # Registry
    "AdapterRegistry",
    "adapter_registry",
    "open_statement",
    "detect_backend",
]
