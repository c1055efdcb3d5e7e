"""Tests for table definitions and argument values."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from insertkit.core.errors import UnknownColumnError, ValidationError
from insertkit.core.schema import Column, ColumnKind, ColumnType, Sequence, Table
from insertkit.core.values import DEFAULT, DeferToBackendDefault, Explicit, NextVal, is_rendered, to_argument


class TestTable:
    def test_binds_columns(self, users):
        assert [c.position for c in users] == [0, 1, 2]
        assert all(c.table_name == "users" for c in users)
        assert users["name"].qualified_name == "users.name"

    def test_unknown_column(self, users):
        with pytest.raises(UnknownColumnError) as exc_info:
            users["email"]
        assert exc_info.value.context.column == "email"

    def test_duplicate_column(self):
        with pytest.raises(ValidationError):
            Table("t", [Column("a", ColumnType(ColumnKind.TEXT)), Column("a", ColumnType(ColumnKind.TEXT))])

    def test_contains_only_bound_columns(self, users):
        assert users["id"] in users
        assert Column("id", ColumnType(ColumnKind.INTEGER)) not in users

    def test_columns_of_different_tables_differ(self, users, events):
        assert users["id"] != events["id"]


class TestColumnDefaults:
    def test_has_defaults(self, users, events):
        assert users["created_at"].has_client_default
        assert not events["kind"].has_client_default
        assert events["kind"].has_any_default
        assert not users["name"].has_any_default

    def test_default_factory(self):
        c = Column("n", ColumnType(ColumnKind.INTEGER), default_factory=lambda: 1)
        assert c.has_client_default


class TestFromDb:
    @pytest.mark.parametrize(
        ("kind", "raw", "expected"),
        [
            (ColumnKind.INTEGER, 5, 5),
            (ColumnKind.INTEGER, Decimal("7"), 7),
            (ColumnKind.BOOLEAN, 1, True),
            (ColumnKind.FLOAT, 2, 2.0),
            (ColumnKind.DECIMAL, 1.5, Decimal("1.5")),
            (ColumnKind.TEXT, "x", "x"),
            (ColumnKind.BLOB, bytearray(b"ab"), b"ab"),
            (ColumnKind.TIMESTAMP, "2024-01-02T03:04:05", datetime(2024, 1, 2, 3, 4, 5)),
        ],
    )
    def test_conversion(self, kind, raw, expected):
        assert ColumnType(kind).from_db(raw) == expected

    def test_none_passes_through(self):
        assert ColumnType(ColumnKind.INTEGER, nullable=True).from_db(None) is None


class TestComposite:
    def test_split(self):
        t = Table(
            "points",
            [Column("x", ColumnType(ColumnKind.INTEGER)), Column("y", ColumnType(ColumnKind.INTEGER))],
        )
        point = t.composite("xy", ["x", "y"], compose=lambda x, y: (x, y), decompose=lambda p: p)
        assert point.split((1, 2)) == {t["x"]: 1, t["y"]: 2}

    def test_split_wrong_arity(self):
        t = Table("points", [Column("x", ColumnType(ColumnKind.INTEGER))])
        point = t.composite("x1", ["x"], compose=lambda x: x, decompose=lambda p: p)
        with pytest.raises(ValidationError):
            point.split((1, 2))


class TestValues:
    def test_wrap_plain_value(self):
        assert to_argument(3) == Explicit(3)
        assert to_argument(None) == Explicit(None)

    def test_markers_pass_through(self):
        nv = NextVal(Sequence("s"))
        assert to_argument(nv) is nv
        assert to_argument(DEFAULT) is DEFAULT

    def test_default_singleton(self):
        assert DeferToBackendDefault() is DEFAULT
        assert repr(DEFAULT) == "DEFAULT"

    def test_is_rendered(self):
        assert is_rendered(Explicit(1))
        assert is_rendered(NextVal(Sequence("s")))
        assert not is_rendered(DEFAULT)
