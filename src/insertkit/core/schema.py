"""Table and column definitions consumed by insert statements.

Definitions are immutable once a ``Table`` is built: the table binds each
column to itself (owning table name and declared position) and statements
share the bound columns by reference.

Examples:
    >>> users = Table("users", [
    ...     Column("id", ColumnType(ColumnKind.INTEGER, auto_increment=True)),
    ...     Column("name", ColumnType(ColumnKind.TEXT)),
    ...     Column("created_at", ColumnType(ColumnKind.TEXT, nullable=True), default="now"),
    ... ])
    >>> users["name"].position
    1
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from insertkit.core.errors import UnknownColumnError, ValidationError


class ColumnKind(str, Enum):
    """Declared column types, used for null encoding and value conversion."""

    INTEGER = "integer"
    TEXT = "text"
    BOOLEAN = "boolean"
    FLOAT = "float"
    DECIMAL = "decimal"
    TIMESTAMP = "timestamp"
    BINARY = "binary"
    BLOB = "blob"


@dataclass(frozen=True)
class ColumnType:
    """Declared type of a column.

    ``entity_id`` marks identity-style columns (an id wrapping the table's
    primary key) that some backends report in their generated keys even
    without an auto-increment flag.
    """

    kind: ColumnKind
    nullable: bool = False
    auto_increment: bool = False
    entity_id: bool = False

    @property
    def is_binary(self) -> bool:
        return self.kind in (ColumnKind.BINARY, ColumnKind.BLOB)

    def from_db(self, value: Any) -> Any:
        """Convert a raw driver value to the column's Python type."""
        if value is None:
            return None
        match self.kind:
            case ColumnKind.INTEGER:
                return int(value)
            case ColumnKind.BOOLEAN:
                return bool(value)
            case ColumnKind.FLOAT:
                return float(value)
            case ColumnKind.DECIMAL:
                return value if isinstance(value, Decimal) else Decimal(str(value))
            case ColumnKind.TIMESTAMP:
                return datetime.fromisoformat(value) if isinstance(value, str) else value
            case ColumnKind.BINARY | ColumnKind.BLOB:
                # oracledb hands back LOB locators
                if hasattr(value, "read"):
                    value = value.read()
                return bytes(value)
            case _:
                return str(value)


@dataclass(frozen=True)
class Sequence:
    """A named backend sequence object."""

    name: str


class _Missing:
    def __repr__(self) -> str:
        return "<missing>"


MISSING: Any = _Missing()


@dataclass(frozen=True, eq=False)
class Column:
    """A table column.

    Defaults, in order of precedence when a row has no explicit value:

    - ``default_factory``: called when the statement builds its arguments
    - ``default``: a static client-side value
    - ``server_default``: a SQL expression the backend applies itself
    """

    name: str
    column_type: ColumnType
    sequence: Sequence | None = None
    default: Any = MISSING
    default_factory: Callable[[], Any] | None = None
    server_default: str | None = None
    table_name: str = ""
    position: int = -1

    @property
    def has_client_default(self) -> bool:
        return self.default_factory is not None or self.default is not MISSING

    @property
    def has_any_default(self) -> bool:
        return self.has_client_default or self.server_default is not None

    @property
    def qualified_name(self) -> str:
        return f"{self.table_name}.{self.name}" if self.table_name else self.name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Column):
            return NotImplemented
        return (self.table_name, self.name) == (other.table_name, other.name)

    def __hash__(self) -> int:
        return hash((self.table_name, self.name))

    def __repr__(self) -> str:
        return f"Column({self.qualified_name!r})"


@dataclass(frozen=True, eq=False)
class CompositeColumn:
    """One logical value stored across several real columns.

    ``decompose`` splits the logical value into one value per column (in
    ``columns`` order); ``compose`` rebuilds it from those values.
    """

    name: str
    columns: tuple[Column, ...]
    compose: Callable[..., Any]
    decompose: Callable[[Any], Iterable[Any]]

    def split(self, value: Any) -> dict[Column, Any]:
        parts = list(self.decompose(value))
        if len(parts) != len(self.columns):
            raise ValidationError(
                f"Composite column {self.name!r} expects {len(self.columns)} parts, got {len(parts)}"
            )
        return dict(zip(self.columns, parts, strict=True))

    def __repr__(self) -> str:
        return f"CompositeColumn({self.name!r})"


@dataclass(frozen=True, init=False)
class Table:
    """An ordered set of uniquely named columns."""

    name: str
    columns: tuple[Column, ...]

    def __init__(self, name: str, columns: Iterable[Column]):
        bound: list[Column] = []
        seen: set[str] = set()
        for position, column in enumerate(columns):
            if column.name in seen:
                raise ValidationError(f"Duplicate column {column.name!r} in table {name!r}")
            seen.add(column.name)
            bound.append(dataclasses.replace(column, table_name=name, position=position))
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "columns", tuple(bound))

    def __getitem__(self, name: str) -> Column:
        for column in self.columns:
            if column.name == name:
                return column
        raise UnknownColumnError(f"Table {self.name!r} has no column {name!r}").with_context(
            table=self.name, column=name
        )

    def __contains__(self, column: object) -> bool:
        return isinstance(column, Column) and column in self.columns

    def __iter__(self) -> Iterator[Column]:
        return iter(self.columns)

    def composite(
        self,
        name: str,
        column_names: Iterable[str],
        compose: Callable[..., Any],
        decompose: Callable[[Any], Iterable[Any]],
    ) -> CompositeColumn:
        """Build a composite column over columns of this table."""
        return CompositeColumn(
            name=name,
            columns=tuple(self[n] for n in column_names),
            compose=compose,
            decompose=decompose,
        )


__all__ = [
    "ColumnKind",
    "ColumnType",
    "Sequence",
    "MISSING",
    "Column",
    "CompositeColumn",
    "Table",
]
