"""
Root Typer application for the insertkit CLI.

Commands:
    dialects   Show generated-key capabilities of every registered dialect
    insert     Insert one row into a SQLite table and print the result row
    batch      Insert rows from a JSON file as one batch
"""

from __future__ import annotations

import json
import sqlite3
import sys
from pathlib import Path
from typing import Any

import typer

from insertkit.cli.utils import coerce_value, fail, output_rows, parse_assignments
from insertkit.core.dialect import list_dialects
from insertkit.core.errors import InsertKitError
from insertkit.core.introspect import reflect_sqlite_table
from insertkit.core.logging import configure_from_settings
from insertkit.core.schema import Table
from insertkit.core.session import Session
from insertkit.core.settings import get_settings
from insertkit.core.statements import insert, insert_batch

app = typer.Typer(
    name="insertkit",
    help="insertkit — insert statements with generated-key reconciliation.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("insertkit")
        except PackageNotFoundError:
            v = "0.1.0"
        typer.echo(f"insertkit {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """insertkit CLI."""
    configure_from_settings(stream=sys.stderr)


# ── Commands ─────────────────────────────────────────────────────────────


@app.command()
def dialects(
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Show generated-key capabilities of every registered dialect."""
    rows = [
        {
            "name": d.name,
            "paramstyle": d.paramstyle,
            "multiple_generated_keys": d.supports_multiple_generated_keys,
            "only_identifiers": d.supports_only_identifiers_in_generated_keys,
            "sequences_as_keys": d.supports_sequence_as_generated_keys,
            "insert_ignore": d.supports_insert_ignore,
        }
        for d in list_dialects()
    ]
    output_rows(rows, as_json=json_out, title="Dialects")


def _row_values(table: Table, raw: dict[str, Any]) -> dict:
    values = {}
    for name, value in raw.items():
        column = table[name]
        # JSON rows carry typed values, only text is coerced
        values[column] = coerce_value(column, value) if isinstance(value, str) else value
    return values


@app.command("insert")
def insert_row(
    table_name: str = typer.Argument(..., help="Table to insert into"),
    assignments: list[str] = typer.Argument(None, help="col=value pairs"),
    database: str | None = typer.Option(None, "--database", "-d", help="SQLite database path"),
    ignore: bool = typer.Option(False, "--ignore", help="Skip duplicate-key conflicts"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Insert one row into a SQLite table and print the result row."""
    path = database or get_settings().database
    try:
        with Session.sqlite(path) as session, session.transaction():
            table = reflect_sqlite_table(session.connection, table_name)
            values = _row_values(table, parse_assignments(assignments or []))
            row = insert(session, table, values, ignore=ignore)
    except (InsertKitError, sqlite3.Error, ValueError) as e:
        fail(e)
    output_rows([row.to_dict()], as_json=json_out, title=table_name)


@app.command("batch")
def insert_rows(
    table_name: str = typer.Argument(..., help="Table to insert into"),
    rows_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON list of row objects"),
    database: str | None = typer.Option(None, "--database", "-d", help="SQLite database path"),
    ignore: bool = typer.Option(False, "--ignore", help="Skip duplicate-key conflicts"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Insert rows from a JSON file as one batch."""
    path = database or get_settings().database
    try:
        raw_rows = json.loads(rows_file.read_text(encoding="utf-8"))
        if not isinstance(raw_rows, list):
            raise ValueError("Rows file must hold a JSON list")
        with Session.sqlite(path) as session, session.transaction():
            table = reflect_sqlite_table(session.connection, table_name)
            rows = [_row_values(table, raw) for raw in raw_rows]
            results = insert_batch(session, table, rows, ignore=ignore)
    except (InsertKitError, sqlite3.Error, ValueError) as e:
        fail(e)
    output_rows([r.to_dict() for r in results], as_json=json_out, title=table_name)


__all__ = ["app"]
