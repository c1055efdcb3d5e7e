"""insertkit core -- schema model, dialects, adapters and insert statements.

Architecture::

    Layer 1 -- Type System & Errors
        errors.py          Structured error hierarchy (InsertKitError, ...)
        result.py          Ok / Err envelope used by generated-key probes
        values.py          Argument values (Explicit, DEFAULT, NextVal)
        schema.py          Table / Column / ColumnType / Sequence

    Layer 2 -- Database Boundary
        dialect.py         Capability descriptors + INSERT rendering (5 backends)
        adapters/          Statement adapters per DB-API driver
        session.py         Connection + backend identity + dialect
        introspect.py      Table definitions reflected from SQLite

    Layer 3 -- Statements
        statements/        InsertStatement, BatchInsertStatement, ResultRow

    Layer 4 -- Cross-Cutting Concerns
        logging.py         Structured logging (structlog)
        settings.py        InsertKitSettings (pydantic-settings)
"""

from insertkit.core.errors import (
    BatchShapeError,
    ColumnNotInRowError,
    ConfigError,
    DatabaseError,
    ErrorCategory,
    ErrorContext,
    InsertKitError,
    NoGeneratedKeyError,
    QueryError,
    StatementStateError,
    UnknownBackendError,
    UnknownColumnError,
    UnsupportedFeatureError,
    ValidationError,
)
from insertkit.core.result import Err, Ok, Result
from insertkit.core.schema import (
    Column,
    ColumnKind,
    ColumnType,
    CompositeColumn,
    Sequence,
    Table,
)
from insertkit.core.values import DEFAULT, Explicit, NextVal
from insertkit.core.dialect import Dialect, get_dialect, list_dialects, register_dialect
from insertkit.core.adapters import (
    DatabaseType,
    GeneratedKeys,
    GeneratedKeysMode,
    GeneratedKeysRequest,
    StatementAdapter,
    adapter_registry,
)
from insertkit.core.session import Session
from insertkit.core.introspect import reflect_sqlite_table
from insertkit.core.statements import (
    BatchInsertStatement,
    InsertStatement,
    ResultRow,
    insert,
    insert_batch,
)
from insertkit.core.settings import InsertKitSettings, get_settings
from insertkit.core.logging import configure_logging, get_logger

__all__ = [
    # Errors
    "InsertKitError",
    "ErrorCategory",
    "ErrorContext",
    "ConfigError",
    "UnknownBackendError",
    "UnsupportedFeatureError",
    "ValidationError",
    "UnknownColumnError",
    "BatchShapeError",
    "ColumnNotInRowError",
    "DatabaseError",
    "QueryError",
    "NoGeneratedKeyError",
    "StatementStateError",
    # Result
    "Ok",
    "Err",
    "Result",
    # Schema
    "Column",
    "ColumnKind",
    "ColumnType",
    "CompositeColumn",
    "Sequence",
    "Table",
    # Values
    "DEFAULT",
    "Explicit",
    "NextVal",
    # Dialects / adapters
    "Dialect",
    "get_dialect",
    "list_dialects",
    "register_dialect",
    "DatabaseType",
    "GeneratedKeys",
    "GeneratedKeysMode",
    "GeneratedKeysRequest",
    "StatementAdapter",
    "adapter_registry",
    # Session / statements
    "Session",
    "reflect_sqlite_table",
    "InsertStatement",
    "BatchInsertStatement",
    "ResultRow",
    "insert",
    "insert_batch",
    # Ambient
    "InsertKitSettings",
    "get_settings",
    "configure_logging",
    "get_logger",
]
