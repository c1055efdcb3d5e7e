"""
Insert statements: argument building, execution and generated-key reconciliation.

An ``InsertStatement`` turns a partially specified row (``BatchInsertStatement``:
several rows) into a fully defaulted argument batch, renders one SQL text
through the session's ``Dialect``, executes it once or as a batch through a
``StatementAdapter``, and reconciles whatever the backend reported as
generated keys into one ``ResultRow`` per logical row.

Manifesto:
    Backends under-report generated keys in every possible way. The
    statement never fails because of that: it reads what was reported by
    column name, falls back to the first reported column by position, and
    for backends that only report the last key of a batch it back-fills the
    earlier rows assuming a contiguous auto-increment sequence. That
    back-fill is an approximation (concurrent writers or sequence gaps break
    it) and can be switched off with ``backfill_generated_keys=False``.

Architecture::

    stmt[col] = value ─┐
                       ▼
    values_and_defaults ─► arguments (Lazy, sorted by column position)
                                   │
         auto_inc_columns ◄────────┤
                │                  ▼
                │          prepare_sql ─► Dialect.render_insert
                ▼                  │
    GeneratedKeysRequest ──► session.prepare ─► StatementAdapter
                                   │ execute_single / execute_batch
                                   ▼
                             GeneratedKeys
                                   │
                            process_results ─► [ResultRow, ...]

Examples:
    >>> stmt = InsertStatement(users)
    >>> stmt[users["name"]] = "alice"
    >>> stmt.execute(session)
    1
    >>> stmt[users["id"]]
    1

Guardrails:
    ❌ DON'T: Reuse a statement for a second execution
    ✅ DO: Build a new statement per execution

    ❌ DON'T: Trust back-filled keys under concurrent writers
    ✅ DO: Use a backend with multi-row generated keys, or disable back-fill

Tags:
    insert, generated-keys, batch, reconciliation, insertkit

Doc-Types:
    - API Reference
    - Architecture Documentation
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from numbers import Number
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from insertkit.core.adapters import GeneratedKeys, GeneratedKeysRequest, StatementAdapter
from insertkit.core.dialect import Dialect
from insertkit.core.errors import (
    BatchShapeError,
    NoGeneratedKeyError,
    StatementStateError,
    UnknownColumnError,
    ValidationError,
)
from insertkit.core.logging import LogContext, get_logger
from insertkit.core.result import Err, Ok
from insertkit.core.schema import MISSING, Column, CompositeColumn, Table
from insertkit.core.settings import get_settings
from insertkit.core.values import (
    DEFAULT,
    ArgumentValue,
    Explicit,
    NextVal,
    is_rendered,
    to_argument,
)

from .result_row import ResultRow

if TYPE_CHECKING:
    from insertkit.core.session import Session

logger = get_logger(__name__)

T = TypeVar("T")

Argument = tuple[Column, ArgumentValue]
ArgumentSet = list[Argument]


class Lazy(Generic[T]):
    """Compute-once value. Re-entrant computation raises ``StatementStateError``."""

    __slots__ = ("_factory", "_value", "_state")

    _UNSET, _COMPUTING, _DONE = range(3)

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._value: T | None = None
        self._state = self._UNSET

    @property
    def computed(self) -> bool:
        return self._state == self._DONE

    def get(self) -> T:
        if self._state == self._DONE:
            return self._value  # type: ignore[return-value]
        if self._state == self._COMPUTING:
            raise StatementStateError("Value requested while it is being computed")
        self._state = self._COMPUTING
        try:
            value = self._factory()
        except BaseException:
            self._state = self._UNSET
            raise
        self._value = value
        self._state = self._DONE
        return value


class InsertStatement:
    """
    Single-row insert with generated-key reconciliation.

    Not thread-safe and single-use: arguments are computed once on first
    access, after which values can no longer change, and the statement
    executes at most once.
    """

    def __init__(
        self,
        table: Table,
        *,
        ignore: bool = False,
        always_batch: bool | None = None,
        backfill_generated_keys: bool | None = None,
    ):
        settings = get_settings()
        self.table = table
        self.ignore = ignore
        self.always_batch = settings.always_batch if always_batch is None else always_batch
        self.backfill_generated_keys = (
            settings.backfill_generated_keys
            if backfill_generated_keys is None
            else backfill_generated_keys
        )
        self._values: dict[Column, ArgumentValue] = {}
        self._arguments: Lazy[list[ArgumentSet]] = Lazy(self._build_arguments)
        self._executed = False
        self._inserted_count: int | None = None
        self._resulted_values: tuple[ResultRow, ...] | None = None

    # -- Values ------------------------------------------------------------

    def __setitem__(self, column: Column | CompositeColumn | str, value: Any) -> None:
        self._check_mutable()
        if isinstance(column, CompositeColumn):
            for part, part_value in column.split(value).items():
                self[part] = part_value
            return
        if isinstance(column, str):
            column = self.table[column]
        if column not in self.table:
            raise UnknownColumnError(
                f"{column.qualified_name} does not belong to table {self.table.name!r}"
            ).with_context(table=self.table.name, column=column.name)
        self._values[column] = to_argument(value)

    def values(self, values: Mapping[Column | CompositeColumn | str, Any]) -> InsertStatement:
        """Merge explicit values; returns self for chaining."""
        for column, value in values.items():
            self[column] = value
        return self

    def values_and_defaults(
        self, values: Mapping[Column, ArgumentValue] | None = None
    ) -> dict[Column, ArgumentValue]:
        """Explicit values plus defaults for every defaulted column left out.

        Client defaults are evaluated here, once; columns with only a server
        default get the ``DEFAULT`` marker.
        """
        values = self._values if values is None else values
        result = dict(values)
        for column in self.table.columns:
            if column in values or not column.has_any_default:
                continue
            if column.default_factory is not None:
                result[column] = Explicit(column.default_factory())
            elif column.default is not MISSING:
                result[column] = Explicit(column.default)
            else:
                result[column] = DEFAULT
        return result

    def _argument_set(self, values: Mapping[Column, ArgumentValue]) -> ArgumentSet:
        complete = self.values_and_defaults(values)
        # nullable columns bind an explicit NULL so every row binds the same columns
        for column in self.table.columns:
            if column.column_type.nullable and column not in complete:
                complete[column] = Explicit(None)
        return sorted(complete.items(), key=lambda item: item[0].position)

    def _build_arguments(self) -> list[ArgumentSet]:
        return [self._argument_set(self._values)]

    @property
    def arguments(self) -> list[ArgumentSet]:
        return self._arguments.get()

    def _check_mutable(self) -> None:
        if self._arguments.computed or self._executed:
            raise StatementStateError(
                "Statement values cannot change once its arguments are built"
            ).with_context(table=self.table.name)

    # -- Generated keys ----------------------------------------------------

    def auto_inc_columns(self, dialect: Dialect) -> list[Column]:
        """Columns whose values are read back from the generated keys."""
        next_val_columns = {
            column
            for argument_set in self.arguments
            for column, value in argument_set
            if isinstance(value, NextVal)
        }
        candidates = []
        for column in self.table.columns:
            if column.sequence is not None:
                wanted = dialect.supports_sequence_as_generated_keys
            elif column.column_type.auto_increment:
                wanted = True
            elif column in next_val_columns:
                wanted = dialect.supports_sequence_as_generated_keys
            elif column.column_type.entity_id:
                wanted = not dialect.supports_only_identifiers_in_generated_keys
            else:
                wanted = False
            if wanted:
                candidates.append(column)
        return candidates

    def generated_keys_request(self, dialect: Dialect) -> GeneratedKeysRequest:
        candidates = self.auto_inc_columns(dialect)
        if not candidates:
            return GeneratedKeysRequest.none()
        if dialect.supports_only_identifiers_in_generated_keys:
            return GeneratedKeysRequest.by_name([column.name for column in candidates])
        return GeneratedKeysRequest.all()

    # -- SQL ---------------------------------------------------------------

    def prepare_sql(self, dialect: Dialect) -> str:
        rendered = [(column, value) for column, value in self.arguments[0] if is_rendered(value)]
        fragments = []
        index = 0
        for _, value in rendered:
            if isinstance(value, NextVal):
                fragments.append(dialect.next_value(value.sequence.name))
            else:
                fragments.append(dialect.placeholder(index))
                index += 1
        return dialect.render_insert(
            self.ignore,
            self.table.name,
            [column.name for column, _ in rendered],
            f"VALUES ({', '.join(fragments)})",
        )

    # -- Execution ---------------------------------------------------------

    def execute(self, session: Session) -> int:
        """Execute the insert; returns the number of inserted rows."""
        if self._executed:
            raise StatementStateError("Insert statement already executed").with_context(
                table=self.table.name
            )
        self._executed = True

        dialect = session.dialect
        with LogContext(table=self.table.name, backend=session.backend):
            sql = self.prepare_sql(dialect)
            request = self.generated_keys_request(dialect)
            logger.debug("insert_prepared", sql=sql, generated_keys=request.mode.value)

            with session.prepare(sql, request) as adapter:
                inserted, keys = self._execute_insert(adapter)
                self._inserted_count = inserted
                self._resulted_values = tuple(self.process_results(keys, inserted, dialect))

            logger.debug(
                "insert_executed",
                rows=len(self.arguments),
                inserted=inserted,
                results=len(self._resulted_values),
            )
        return inserted

    def _bind(self, adapter: StatementAdapter, argument_set: ArgumentSet) -> None:
        index = 0
        for column, value in argument_set:
            if not isinstance(value, Explicit):
                continue
            if value.value is None:
                adapter.bind_null(index, column.column_type)
            else:
                adapter.bind(index, value.value)
            index += 1

    def _execute_insert(self, adapter: StatementAdapter) -> tuple[int, GeneratedKeys | None]:
        arguments = self.arguments
        if len(arguments) > 1 or self.always_batch:
            for argument_set in arguments:
                self._bind(adapter, argument_set)
                adapter.add_to_batch()
            inserted = sum(adapter.execute_batch())
        else:
            self._bind(adapter, arguments[0])
            inserted = adapter.execute_single()
        keys = adapter.generated_keys() if adapter.request.requested else None
        return inserted, keys

    # -- Reconciliation ----------------------------------------------------

    def process_results(
        self,
        keys: GeneratedKeys | None,
        inserted: int,
        dialect: Dialect,
    ) -> list[ResultRow]:
        """Merge generated keys and argument values into one row per logical row."""
        if inserted <= 0:
            return []

        candidates = self.auto_inc_columns(dialect)
        generated: list[dict[Column, Any]] = []

        probed = candidates if dialect.supports_only_identifiers_in_generated_keys else list(self.table.columns)
        returned = self._returned_columns(keys, probed)
        first_auto = next(
            (c for c in candidates if c.column_type.auto_increment),
            candidates[0] if candidates else None,
        )

        if keys is not None and (first_auto is not None or returned):
            for raw in keys.rows:
                values = {column: raw[index] for column, index in returned}
                if not values and first_auto is not None:
                    values[first_auto] = raw[0]
                generated.append(values)

            if (
                inserted > 1
                and first_auto is not None
                and generated
                and not dialect.supports_multiple_generated_keys
                and self.backfill_generated_keys
            ):
                self._backfill(generated, first_auto, inserted)

        if not self.ignore and generated and len(generated) != inserted:
            logger.warning(
                "generated_key_count_mismatch",
                table=self.table.name,
                backend=dialect.name,
                generated=len(generated),
                inserted=inserted,
            )
        if generated and not dialect.supports_multiple_generated_keys and len(generated) < inserted:
            # the reported keys belong to the last rows of the batch
            generated[:0] = [{} for _ in range(inserted - len(generated))]

        for index, argument_set in enumerate(self.arguments):
            if index < len(generated):
                row = generated[index]
            else:
                row = {}
                generated.append(row)
            for column, value in argument_set:
                if not isinstance(value, Explicit):
                    continue
                if column.column_type.auto_increment or column.sequence is not None:
                    row.setdefault(column, value.value)
                else:
                    row[column] = value.value

        return [ResultRow.from_values(row) for row in generated]

    @staticmethod
    def _returned_columns(
        keys: GeneratedKeys | None, columns: Iterable[Column]
    ) -> list[tuple[Column, int]]:
        if keys is None:
            return []
        returned = []
        for column in columns:
            match keys.find_column(column.name):
                case Ok(index):
                    returned.append((column, index))
                case Err():
                    pass
        return returned

    @staticmethod
    def _backfill(generated: list[dict[Column, Any]], column: Column, inserted: int) -> None:
        # only the last key was reported; assume a contiguous sequence ending at it
        last = generated[0].get(column)
        if not isinstance(last, Number) or isinstance(last, bool):
            return
        key = int(last)
        while len(generated) < inserted:
            key -= 1
            generated.insert(0, {column: key})

    # -- Results -----------------------------------------------------------

    @property
    def inserted_count(self) -> int:
        if self._inserted_count is None:
            raise StatementStateError("Insert statement has not been executed").with_context(
                table=self.table.name
            )
        return self._inserted_count

    @property
    def resulted_values(self) -> tuple[ResultRow, ...] | None:
        return self._resulted_values

    def first_row(self) -> ResultRow:
        """First result row; raises ``NoGeneratedKeyError`` when there is none."""
        if not self._resulted_values:
            raise NoGeneratedKeyError("No key generated").with_context(table=self.table.name)
        return self._resulted_values[0]

    def __getitem__(self, column: Column | CompositeColumn) -> Any:
        return self.first_row()[column]

    def get_or_null(self, column: Column | CompositeColumn) -> Any:
        if not self._resulted_values:
            return None
        return self._resulted_values[0].get_or_null(column)


class BatchInsertStatement(InsertStatement):
    """
    Multi-row insert executed as one batch.

    Every row must bind the same columns: a column that has an explicit
    value in one row and falls back to a server default in another makes
    the batch invalid.
    """

    def __init__(self, table: Table, **kwargs: Any):
        super().__init__(table, **kwargs)
        self._rows: list[dict[Column, ArgumentValue]] = []

    def add_batch(self) -> None:
        """Close the current row and start a new one."""
        self._check_mutable()
        self._rows.append(self._values)
        self._values = {}

    def add_row(self, values: Mapping[Column | CompositeColumn | str, Any]) -> None:
        self.values(values)
        self.add_batch()

    def _build_arguments(self) -> list[ArgumentSet]:
        rows = self._rows + ([self._values] if self._values else [])
        if not rows:
            raise ValidationError("Batch insert has no rows").with_context(table=self.table.name)
        argument_sets = [self._argument_set(values) for values in rows]
        expected = self._shape(argument_sets[0])
        for index, argument_set in enumerate(argument_sets[1:], start=1):
            if self._shape(argument_set) != expected:
                raise BatchShapeError(
                    f"Row {index} binds different columns than row 0"
                ).with_context(table=self.table.name, row=index)
        return argument_sets

    @staticmethod
    def _shape(argument_set: ArgumentSet) -> tuple[tuple[str, str], ...]:
        shape = []
        for column, value in argument_set:
            if isinstance(value, NextVal):
                kind = f"nextval:{value.sequence.name}"
            elif isinstance(value, Explicit):
                kind = "param"
            else:
                kind = "default"
            shape.append((column.name, kind))
        return tuple(shape)


def insert(
    session: Session,
    table: Table,
    values: Mapping[Column | CompositeColumn | str, Any],
    *,
    ignore: bool = False,
) -> ResultRow:
    """Insert one row and return its result row.

    Raises:
        NoGeneratedKeyError: Nothing was inserted (e.g. ignored duplicate).
    """
    statement = InsertStatement(table, ignore=ignore).values(values)
    statement.execute(session)
    return statement.first_row()


def insert_batch(
    session: Session,
    table: Table,
    rows: Iterable[Mapping[Column | CompositeColumn | str, Any]],
    *,
    ignore: bool = False,
) -> list[ResultRow]:
    """Insert rows as one batch; an empty input executes nothing."""
    rows = list(rows)
    if not rows:
        return []
    statement = BatchInsertStatement(table, ignore=ignore)
    for row in rows:
        statement.add_row(row)
    statement.execute(session)
    return list(statement.resulted_values or ())


__all__ = [
    "Lazy",
    "InsertStatement",
    "BatchInsertStatement",
    "insert",
    "insert_batch",
]
