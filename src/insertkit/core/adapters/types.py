"""Backend identities and generated-key types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from insertkit.core.errors import QueryError
from insertkit.core.result import Err, Ok, Result


class DatabaseType(str, Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    ORACLE = "oracle"
    DB2 = "db2"


class GeneratedKeysMode(str, Enum):
    """How a statement asks the driver to capture generated keys."""

    NONE = "none"
    BY_NAME = "by_name"   # only the listed columns
    ALL = "all"           # whatever the backend reports, positional/opaque


@dataclass(frozen=True)
class GeneratedKeysRequest:
    mode: GeneratedKeysMode = GeneratedKeysMode.NONE
    column_names: tuple[str, ...] = ()

    @property
    def requested(self) -> bool:
        return self.mode is not GeneratedKeysMode.NONE

    @classmethod
    def none(cls) -> GeneratedKeysRequest:
        return cls()

    @classmethod
    def by_name(cls, names: list[str] | tuple[str, ...]) -> GeneratedKeysRequest:
        return cls(GeneratedKeysMode.BY_NAME, tuple(names))

    @classmethod
    def all(cls) -> GeneratedKeysRequest:
        return cls(GeneratedKeysMode.ALL)


@dataclass
class GeneratedKeys:
    """Tabular generated-keys result reported by a driver.

    Rows are in submission order. Column names are whatever the driver
    reported (``last_insert_rowid()``, ``GENERATED_KEY``, real names for
    ``RETURNING``).
    """

    column_names: list[str] = field(default_factory=list)
    rows: list[tuple[Any, ...]] = field(default_factory=list)

    def find_column(self, name: str) -> Result[int]:
        """Index of ``name`` (case-insensitive), or Err when not reported."""
        wanted = name.lower()
        for index, reported in enumerate(self.column_names):
            if reported is not None and reported.lower() == wanted:
                return Ok(index)
        return Err(
            QueryError(f"Column {name!r} not in generated keys").with_context(
                column=name, reported=list(self.column_names)
            )
        )

    def __len__(self) -> int:
        return len(self.rows)


__all__ = [
    "DatabaseType",
    "GeneratedKeysMode",
    "GeneratedKeysRequest",
    "GeneratedKeys",
]
