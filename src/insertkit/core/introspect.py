"""Build ``Table`` definitions from an existing SQLite schema."""

from __future__ import annotations

from typing import Any

from insertkit.core.errors import ValidationError
from insertkit.core.schema import Column, ColumnKind, ColumnType, Table

TABLE_INFO_QUERY = "SELECT name, type, \"notnull\", dflt_value, pk FROM pragma_table_info(?)"


def sqlite_column_kind(declared: str) -> ColumnKind:
    """Map a declared SQLite type to a column kind, following type affinity."""
    declared = declared.upper()
    if "INT" in declared:
        return ColumnKind.INTEGER
    if "BOOL" in declared:
        return ColumnKind.BOOLEAN
    if any(token in declared for token in ("CHAR", "CLOB", "TEXT", "DATE", "TIME")):
        return ColumnKind.TEXT
    if "BLOB" in declared:
        return ColumnKind.BLOB
    if any(token in declared for token in ("REAL", "FLOA", "DOUB")):
        return ColumnKind.FLOAT
    if any(token in declared for token in ("NUMERIC", "DECIMAL")):
        return ColumnKind.DECIMAL
    return ColumnKind.TEXT


def reflect_sqlite_table(connection: Any, name: str) -> Table:
    """Reflect table ``name`` from a ``sqlite3`` connection.

    A single ``INTEGER`` primary key is the rowid alias and is treated as
    auto-increment; declared defaults become server defaults.
    """
    rows = connection.execute(TABLE_INFO_QUERY, (name,)).fetchall()
    if not rows:
        raise ValidationError(f"Table {name!r} not found").with_context(table=name, backend="sqlite")

    pk_count = sum(1 for row in rows if row[4])
    columns = []
    for col_name, declared, notnull, default, pk in rows:
        rowid_alias = bool(pk) and pk_count == 1 and declared.upper() == "INTEGER"
        columns.append(
            Column(
                col_name,
                ColumnType(
                    sqlite_column_kind(declared),
                    nullable=not notnull and not pk,
                    auto_increment=rowid_alias,
                ),
                server_default=default,
            )
        )
    return Table(name, columns)


__all__ = [
    "reflect_sqlite_table",
    "sqlite_column_kind",
]
