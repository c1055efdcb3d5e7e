"""Tests for the Ok / Err result envelope."""

import pytest

from insertkit.core.errors import QueryError
from insertkit.core.result import Err, Ok, from_optional


class TestOk:
    def test_accessors(self):
        r = Ok(3)
        assert r.is_ok() and not r.is_err()
        assert r.unwrap() == 3
        assert r.unwrap_or(0) == 3

    def test_map(self):
        assert Ok(2).map(lambda v: v * 10) == Ok(20)

    def test_to_dict(self):
        assert Ok("a").to_dict() == {"ok": True, "value": "a"}


class TestErr:
    def test_unwrap_raises(self):
        err = QueryError("missing")
        with pytest.raises(QueryError):
            Err(err).unwrap()

    def test_unwrap_or(self):
        assert Err(QueryError("x")).unwrap_or(7) == 7

    def test_map_is_noop(self):
        err = QueryError("x")
        mapped = Err(err).map(lambda v: v + 1)
        assert mapped.is_err()
        assert mapped.error is err

    def test_to_dict_insertkit_error(self):
        d = Err(QueryError("missing")).to_dict()
        assert d["ok"] is False
        assert d["error"]["error_type"] == "QueryError"

    def test_to_dict_plain_error(self):
        d = Err(ValueError("bad")).to_dict()
        assert d["error"] == {"error_type": "ValueError", "message": "bad"}


class TestPatternMatching:
    def test_match(self):
        def describe(result):
            match result:
                case Ok(value):
                    return f"ok:{value}"
                case Err(error):
                    return f"err:{type(error).__name__}"

        assert describe(Ok(1)) == "ok:1"
        assert describe(Err(QueryError("x"))) == "err:QueryError"


def test_from_optional():
    assert from_optional(5, QueryError("x")) == Ok(5)
    assert from_optional(None, QueryError("x")).is_err()
