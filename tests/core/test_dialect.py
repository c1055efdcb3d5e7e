"""Tests for the dialect capability descriptors."""

from __future__ import annotations

import pytest

from insertkit.core.dialect import (
    DB2,
    MYSQL,
    ORACLE,
    POSTGRESQL,
    SQLITE,
    Dialect,
    get_dialect,
    list_dialects,
    register_dialect,
)
from insertkit.core.errors import UnknownBackendError, UnsupportedFeatureError


# =========================================================================
# Fixtures
# =========================================================================


@pytest.fixture(params=["sqlite", "postgresql", "db2", "mysql", "oracle"])
def dialect(request: pytest.FixtureRequest) -> Dialect:
    """Parametric fixture: run each test against every dialect."""
    return get_dialect(request.param)


# =========================================================================
# Capability flags
# =========================================================================


class TestCapabilities:
    def test_sqlite_reports_only_last_key(self):
        assert SQLITE.supports_multiple_generated_keys is False
        assert SQLITE.supports_only_identifiers_in_generated_keys is False
        assert SQLITE.supports_sequence_as_generated_keys is False

    def test_postgresql_returns_rows(self):
        assert POSTGRESQL.supports_multiple_generated_keys is True
        assert POSTGRESQL.supports_only_identifiers_in_generated_keys is False
        assert POSTGRESQL.supports_sequence_as_generated_keys is True

    def test_mysql_reports_identifiers(self):
        assert MYSQL.supports_multiple_generated_keys is True
        assert MYSQL.supports_only_identifiers_in_generated_keys is True
        assert MYSQL.supports_sequence_as_generated_keys is False

    def test_oracle_and_db2_by_name(self):
        for d in (ORACLE, DB2):
            assert d.supports_multiple_generated_keys is False
            assert d.supports_only_identifiers_in_generated_keys is True
            assert d.supports_sequence_as_generated_keys is True

    def test_dialect_is_frozen(self):
        with pytest.raises(AttributeError):
            SQLITE.supports_multiple_generated_keys = True  # type: ignore[misc]


# =========================================================================
# Placeholders
# =========================================================================


class TestPlaceholders:
    def test_qmark(self):
        assert SQLITE.placeholders(3) == "?, ?, ?"

    def test_format(self):
        assert POSTGRESQL.placeholders(2) == "%s, %s"

    def test_numeric_is_one_based(self):
        assert ORACLE.placeholder(0) == ":1"
        assert ORACLE.placeholders(3) == ":1, :2, :3"

    def test_zero_placeholders(self, dialect):
        assert dialect.placeholders(0) == ""

    def test_unknown_paramstyle(self):
        d = Dialect(name="odd", paramstyle="pyformat")
        with pytest.raises(UnsupportedFeatureError):
            d.placeholder(0)


# =========================================================================
# Sequences
# =========================================================================


class TestNextValue:
    def test_postgresql(self):
        assert POSTGRESQL.next_value("users_seq") == "NEXTVAL('users_seq')"

    def test_oracle(self):
        assert ORACLE.next_value("users_seq") == "users_seq.NEXTVAL"

    def test_db2(self):
        assert DB2.next_value("users_seq") == "NEXT VALUE FOR users_seq"

    def test_without_sequences(self):
        assert SQLITE.supports_sequences is False
        with pytest.raises(UnsupportedFeatureError) as exc_info:
            SQLITE.next_value("users_seq")
        assert exc_info.value.context.metadata["sequence"] == "users_seq"


# =========================================================================
# render_insert
# =========================================================================


class TestRenderInsert:
    def test_plain_insert(self, dialect):
        sql = dialect.render_insert(False, "users", ["name"], "VALUES (x)")
        assert sql == "INSERT INTO users (name) VALUES (x)"

    def test_pure(self, dialect):
        args = (False, "users", ["id", "name"], "VALUES (a, b)")
        assert dialect.render_insert(*args) == dialect.render_insert(*args)

    def test_sqlite_ignore(self):
        sql = SQLITE.render_insert(True, "users", ["name"], "VALUES (?)")
        assert sql == "INSERT OR IGNORE INTO users (name) VALUES (?)"

    def test_mysql_ignore(self):
        sql = MYSQL.render_insert(True, "users", ["name"], "VALUES (%s)")
        assert sql == "INSERT IGNORE INTO users (name) VALUES (%s)"

    def test_postgresql_ignore_suffix(self):
        sql = POSTGRESQL.render_insert(True, "users", ["name"], "VALUES (%s)")
        assert sql == "INSERT INTO users (name) VALUES (%s) ON CONFLICT DO NOTHING"

    def test_ignore_unsupported(self):
        with pytest.raises(UnsupportedFeatureError):
            ORACLE.render_insert(True, "users", ["name"], "VALUES (:1)")

    def test_empty_column_list(self):
        assert SQLITE.render_insert(False, "t", [], "") == "INSERT INTO t DEFAULT VALUES"
        assert MYSQL.render_insert(False, "t", [], "") == "INSERT INTO t () VALUES ()"
        assert ORACLE.render_insert(False, "t", [], "") == "INSERT INTO t VALUES (DEFAULT)"

    def test_empty_column_list_with_ignore_suffix(self):
        sql = POSTGRESQL.render_insert(True, "t", [], "")
        assert sql == "INSERT INTO t DEFAULT VALUES ON CONFLICT DO NOTHING"


# =========================================================================
# Registry
# =========================================================================


class TestRegistry:
    def test_get_dialect_case_insensitive(self):
        assert get_dialect("SQLite") is SQLITE

    def test_postgres_alias(self):
        assert get_dialect("postgres") is POSTGRESQL

    def test_unknown(self):
        with pytest.raises(UnknownBackendError) as exc_info:
            get_dialect("informix")
        assert exc_info.value.context.backend == "informix"

    def test_register_custom(self):
        custom = Dialect(name="custom", supports_multiple_generated_keys=False)
        register_dialect("Custom", custom)
        assert get_dialect("custom") is custom

    def test_list_dialects_collapses_aliases(self):
        names = [d.name for d in list_dialects()]
        assert names == sorted(names)
        assert names.count("postgresql") == 1
        assert {"sqlite", "postgresql", "mysql", "oracle", "db2"} <= set(names)
