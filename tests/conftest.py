"""
Shared pytest fixtures and configuration for insertkit tests.

This module provides:
- Settings cache reset for test isolation
- Table definitions and matching SQLite schemas
- SQLite sessions (in-memory and on disk)
- A multi-key test backend registered for the duration of a test

Usage:
    Fixtures are auto-discovered by pytest. Use them as function arguments:

    def test_insert(sqlite_session, users):
        ...
"""

import sqlite3
import sys
from pathlib import Path
from typing import Any, Generator

import pytest
import structlog

# Ensure insertkit package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from insertkit.core.adapters import SQLiteStatementAdapter, adapter_registry
from insertkit.core.dialect import Dialect
from insertkit.core.schema import Column, ColumnKind, ColumnType, Table
from insertkit.core.session import Session
from insertkit.core.settings import reset_settings


USERS_DDL = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    created_at TEXT
)
"""

EVENTS_DDL = """
CREATE TABLE events (
    id INTEGER PRIMARY KEY,
    kind TEXT NOT NULL DEFAULT 'generic',
    note TEXT,
    payload BLOB
)
"""


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark all tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Drop INSERTKIT_* variables and the cached settings around each test."""
    import os

    for key in list(os.environ):
        if key.startswith("INSERTKIT_"):
            monkeypatch.delenv(key)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Undo logging configuration made by a test (the CLI configures on every run)."""
    yield
    structlog.reset_defaults()


# =============================================================================
# Tables
# =============================================================================


@pytest.fixture
def users() -> Table:
    """users(id auto-increment, name text not null, created_at text default "now")."""
    return Table(
        "users",
        [
            Column("id", ColumnType(ColumnKind.INTEGER, auto_increment=True)),
            Column("name", ColumnType(ColumnKind.TEXT)),
            Column("created_at", ColumnType(ColumnKind.TEXT, nullable=True), default="now"),
        ],
    )


@pytest.fixture
def events() -> Table:
    """events with a server default, a nullable text and a nullable blob column."""
    return Table(
        "events",
        [
            Column("id", ColumnType(ColumnKind.INTEGER, auto_increment=True)),
            Column("kind", ColumnType(ColumnKind.TEXT), server_default="'generic'"),
            Column("note", ColumnType(ColumnKind.TEXT, nullable=True)),
            Column("payload", ColumnType(ColumnKind.BLOB, nullable=True)),
        ],
    )


# =============================================================================
# Sessions
# =============================================================================


def _create_schema(conn: sqlite3.Connection) -> None:
    conn.execute(USERS_DDL)
    conn.execute(EVENTS_DDL)
    conn.commit()


@pytest.fixture
def sqlite_session() -> Generator[Session, None, None]:
    """In-memory SQLite session with the users and events tables."""
    session = Session.sqlite(":memory:")
    _create_schema(session.connection)
    yield session
    session.close()


@pytest.fixture
def sqlite_path(tmp_path: Path) -> str:
    """On-disk SQLite database with the users and events tables."""
    path = tmp_path / "insertkit.db"
    conn = sqlite3.connect(path)
    _create_schema(conn)
    conn.close()
    return str(path)


class MultiKeyStatementAdapter(SQLiteStatementAdapter):
    """SQLite adapter reporting one named generated-keys row per inserted row."""

    def _capture_keys(self, cursor: Any) -> None:
        self._record_keys(["id"], [(cursor.lastrowid,)])


MULTIKEY_DIALECT = Dialect(
    name="multikey",
    paramstyle="qmark",
    supports_multiple_generated_keys=True,
    supports_sequence_as_generated_keys=False,
    ignore_prefix="INSERT OR IGNORE INTO",
)


@pytest.fixture
def multikey_session() -> Generator[Session, None, None]:
    """SQLite connection driven through a backend that reports every key of a batch."""
    adapter_registry.register("multikey", MultiKeyStatementAdapter)
    conn = sqlite3.connect(":memory:")
    _create_schema(conn)
    session = Session(conn, backend="multikey", dialect=MULTIKEY_DIALECT)
    yield session
    session.close()
    adapter_registry.unregister("multikey")
