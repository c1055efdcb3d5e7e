"""Immutable result rows built from reconciled generated-key rows."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from insertkit.core.errors import ColumnNotInRowError
from insertkit.core.schema import Column, CompositeColumn


class ResultRow:
    """
    Caller-facing row: Column -> typed value.

    ``row[column]`` raises ``ColumnNotInRowError`` when the column has no
    value; ``row.get_or_null(column)`` returns None instead.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[Column, Any]):
        self._data = MappingProxyType(dict(data))

    @classmethod
    def from_values(cls, values: Mapping[Column, Any]) -> ResultRow:
        """Convert raw driver values through each column's declared type."""
        return cls({column: column.column_type.from_db(raw) for column, raw in values.items()})

    def __getitem__(self, column: Column | CompositeColumn) -> Any:
        if isinstance(column, CompositeColumn):
            return column.compose(*(self[part] for part in column.columns))
        try:
            return self._data[column]
        except KeyError:
            raise ColumnNotInRowError(
                f"{column.qualified_name} is not in record set"
            ).with_context(table=column.table_name, column=column.name) from None

    def get_or_null(self, column: Column | CompositeColumn) -> Any:
        if isinstance(column, CompositeColumn):
            if not all(part in self._data for part in column.columns):
                return None
            return self[column]
        return self._data.get(column)

    def __contains__(self, column: object) -> bool:
        if isinstance(column, CompositeColumn):
            return all(part in self._data for part in column.columns)
        return column in self._data

    def __iter__(self) -> Iterator[Column]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def items(self):
        return self._data.items()

    def to_dict(self) -> dict[str, Any]:
        """Values keyed by column name, in declared column order."""
        ordered = sorted(self._data.items(), key=lambda item: item[0].position)
        return {column.name: value for column, value in ordered}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResultRow):
            return NotImplemented
        return dict(self._data) == dict(other._data)

    def __repr__(self) -> str:
        body = ", ".join(f"{name}={v!r}" for name, v in self.to_dict().items())
        return f"ResultRow({body})"


__all__ = [
    "ResultRow",
]
