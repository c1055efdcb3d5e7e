"""
CLI utility helpers — output formatting and value parsing.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from insertkit.core.errors import ValidationError
from insertkit.core.schema import Column, ColumnKind

console = Console()
err_console = Console(stderr=True)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


# ── Value parsing ────────────────────────────────────────────────────────


def coerce_value(column: Column, text: str | None) -> Any:
    """Convert command-line text to the column's Python type."""
    if text is None:
        return None
    match column.column_type.kind:
        case ColumnKind.INTEGER:
            return int(text)
        case ColumnKind.FLOAT:
            return float(text)
        case ColumnKind.DECIMAL:
            return Decimal(text)
        case ColumnKind.BOOLEAN:
            lowered = text.lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            raise ValidationError(f"Not a boolean for {column.name}: {text!r}")
        case ColumnKind.BINARY | ColumnKind.BLOB:
            return bytes.fromhex(text)
        case _:
            return text


def parse_assignments(assignments: list[str]) -> dict[str, str]:
    """Parse ``col=value`` pairs."""
    values: dict[str, str] = {}
    for assignment in assignments:
        name, sep, value = assignment.partition("=")
        if not sep or not name:
            raise typer.BadParameter(f"Expected col=value, got {assignment!r}")
        values[name.strip()] = value
    return values


# ── Output helpers ───────────────────────────────────────────────────────


def fail(error: Exception) -> None:
    """Print an error and exit with status 1."""
    err_console.print(f"[bold red]Error[/bold red] ({type(error).__name__}): {error}")
    raise typer.Exit(code=1)


def output_rows(rows: list[dict[str, Any]], *, as_json: bool = False, title: str = "") -> None:
    """Render dict rows as JSON or a Rich table."""
    if as_json:
        console.print_json(json.dumps(rows, default=str))
        return
    if not rows:
        console.print("[dim]No rows.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(str(v) for v in row.values()))
    console.print(table)
