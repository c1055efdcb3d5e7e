"""SQL dialect capability descriptors for insert statements.

A ``Dialect`` is plain data: placeholder style, the three flags that
describe how a backend reports generated keys, and the fragments needed to
render an ``INSERT`` clause (ignore-duplicates syntax, sequence next-value
expression, the empty-row form). Insert statements branch on these fields,
never on the backend's name.

Manifesto:
    Backends disagree on generated keys more than on anything else in an
    insert. SQLite only ever reports the last rowid, PostgreSQL returns
    whole rows, MySQL returns ids but nothing else, Oracle wants column
    names. Keeping those differences as data makes the reconciliation
    logic one code path that reads flags.

    - **Data, not hierarchy:** One frozen dataclass, one instance per backend
    - **Pure rendering:** ``render_insert`` does no I/O
    - **Registry:** ``get_dialect(name)`` / ``register_dialect(name, d)``

Architecture::

    ┌──────────┬────────────┬───────┬────────┬───────┐
    │          │ multi keys │ ids   │ seqs   │ style │
    ├──────────┼────────────┼───────┼────────┼───────┤
    │ sqlite   │    no      │  no   │  no    │   ?   │
    │ postgres │    yes     │  no   │  yes   │  %s   │
    │ mysql    │    yes     │  yes  │  no    │  %s   │
    │ oracle   │    no      │  yes  │  yes   │  :1   │
    │ db2      │    no      │  yes  │  yes   │   ?   │
    └──────────┴────────────┴───────┴────────┴───────┘

    multi keys = supports_multiple_generated_keys
    ids        = supports_only_identifiers_in_generated_keys
    seqs       = supports_sequence_as_generated_keys

Examples:
    >>> d = get_dialect("sqlite")
    >>> d.render_insert(True, "users", ["name"], f"VALUES ({d.placeholders(1)})")
    'INSERT OR IGNORE INTO users (name) VALUES (?)'

Guardrails:
    ❌ DON'T: ``if dialect.name == "postgresql": ...`` in statement code
    ✅ DO: Add a field to ``Dialect`` and read it

Tags:
    dialect, sql, capabilities, generated-keys, insertkit

Doc-Types:
    - API Reference
    - Database Portability Guide
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from insertkit.core.errors import UnknownBackendError, UnsupportedFeatureError


@dataclass(frozen=True)
class Dialect:
    """Generated-key capabilities and insert-clause fragments of one backend."""

    name: str
    paramstyle: str = "qmark"

    # -- Generated keys ----------------------------------------------------

    supports_multiple_generated_keys: bool = True
    """Every inserted row of a batch gets its own generated-keys row."""

    supports_only_identifiers_in_generated_keys: bool = False
    """Generated keys are requested by column name and hold only those columns."""

    supports_sequence_as_generated_keys: bool = True
    """Sequence-backed columns can be reported as generated keys."""

    # -- Insert clause fragments -------------------------------------------

    next_value_template: str | None = None
    ignore_prefix: str | None = None
    ignore_suffix: str | None = None
    empty_values_clause: str = "DEFAULT VALUES"

    # -- Placeholders ------------------------------------------------------

    def placeholder(self, index: int) -> str:
        """Single positional placeholder (0-based index)."""
        match self.paramstyle:
            case "qmark":
                return "?"
            case "format":
                return "%s"
            case "numeric":
                return f":{index + 1}"
            case _:
                raise UnsupportedFeatureError(
                    f"Unknown paramstyle {self.paramstyle!r} for dialect {self.name!r}"
                )

    def placeholders(self, count: int) -> str:
        return ", ".join(self.placeholder(i) for i in range(count))

    # -- Sequences ---------------------------------------------------------

    @property
    def supports_sequences(self) -> bool:
        return self.next_value_template is not None

    def next_value(self, sequence_name: str) -> str:
        """SQL expression pulling the next value of ``sequence_name``."""
        if self.next_value_template is None:
            raise UnsupportedFeatureError(
                f"Dialect {self.name!r} has no sequences"
            ).with_context(backend=self.name, sequence=sequence_name)
        return self.next_value_template.format(name=sequence_name)

    # -- Insert clause -----------------------------------------------------

    @property
    def supports_insert_ignore(self) -> bool:
        return self.ignore_prefix is not None or self.ignore_suffix is not None

    def render_insert(
        self,
        ignore: bool,
        table: str,
        columns: Sequence[str],
        values_fragment: str,
    ) -> str:
        """Render the full ``INSERT`` statement.

        Args:
            ignore: Skip rows that hit a duplicate-key conflict.
            table: Table name.
            columns: Rendered column names, in binding order.
            values_fragment: ``VALUES (...)`` for one row; unused when
                ``columns`` is empty.
        """
        if ignore and not self.supports_insert_ignore:
            raise UnsupportedFeatureError(
                f"Dialect {self.name!r} does not support ignoring duplicate rows"
            ).with_context(backend=self.name, table=table)

        head = self.ignore_prefix if ignore and self.ignore_prefix else "INSERT INTO"
        if columns:
            sql = f"{head} {table} ({', '.join(columns)}) {values_fragment}"
        else:
            sql = f"{head} {table} {self.empty_values_clause}"
        if ignore and self.ignore_suffix:
            sql += f" {self.ignore_suffix}"
        return sql


# =========================================================================
# Built-in dialects
# =========================================================================

SQLITE = Dialect(
    name="sqlite",
    paramstyle="qmark",
    supports_multiple_generated_keys=False,
    supports_sequence_as_generated_keys=False,
    ignore_prefix="INSERT OR IGNORE INTO",
)

POSTGRESQL = Dialect(
    name="postgresql",
    paramstyle="format",
    next_value_template="NEXTVAL('{name}')",
    ignore_suffix="ON CONFLICT DO NOTHING",
)

MYSQL = Dialect(
    name="mysql",
    paramstyle="format",
    supports_only_identifiers_in_generated_keys=True,
    supports_sequence_as_generated_keys=False,
    ignore_prefix="INSERT IGNORE INTO",
    empty_values_clause="() VALUES ()",
)

ORACLE = Dialect(
    name="oracle",
    paramstyle="numeric",
    supports_multiple_generated_keys=False,
    supports_only_identifiers_in_generated_keys=True,
    next_value_template="{name}.NEXTVAL",
    empty_values_clause="VALUES (DEFAULT)",
)

DB2 = Dialect(
    name="db2",
    paramstyle="qmark",
    supports_multiple_generated_keys=False,
    supports_only_identifiers_in_generated_keys=True,
    next_value_template="NEXT VALUE FOR {name}",
    empty_values_clause="VALUES (DEFAULT)",
)


_DIALECTS: dict[str, Dialect] = {
    "sqlite": SQLITE,
    "postgresql": POSTGRESQL,
    "postgres": POSTGRESQL,  # alias
    "mysql": MYSQL,
    "oracle": ORACLE,
    "db2": DB2,
}


def get_dialect(db_type: str) -> Dialect:
    """Get a dialect by database type name.

    Raises:
        UnknownBackendError: If ``db_type`` is not registered.
    """
    key = db_type.lower() if isinstance(db_type, str) else db_type.value
    if key not in _DIALECTS:
        raise UnknownBackendError(
            f"Unknown dialect '{db_type}'. "
            f"Supported: {sorted(set(_DIALECTS) - {'postgres'})}"
        ).with_context(backend=str(db_type))
    return _DIALECTS[key]


def register_dialect(name: str, dialect: Dialect) -> None:
    """Register a custom dialect (third-party drivers, test doubles)."""
    _DIALECTS[name.lower()] = dialect


def list_dialects() -> list[Dialect]:
    """Registered dialects, aliases collapsed, sorted by name."""
    unique = {d.name: d for d in _DIALECTS.values()}
    return [unique[name] for name in sorted(unique)]


__all__ = [
    "Dialect",
    "SQLITE",
    "POSTGRESQL",
    "MYSQL",
    "ORACLE",
    "DB2",
    "get_dialect",
    "register_dialect",
    "list_dialects",
]
