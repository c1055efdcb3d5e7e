"""Tests for insertkit.core.logging."""

from __future__ import annotations

import json

import pytest
import structlog

from insertkit.core.logging import (
    LogContext,
    _add_service_metadata,
    _elasticsearch_compatible,
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)


@pytest.fixture(autouse=True)
def reset_structlog():
    clear_context()
    yield
    clear_context()
    structlog.reset_defaults()


class TestProcessors:
    def test_service_metadata(self):
        event = _add_service_metadata(None, "info", {"event": "x"})
        assert event["service.name"]

    def test_elasticsearch_fields(self):
        event = _elasticsearch_compatible(None, "info", {"timestamp": "t", "level": "info"})
        assert event == {"@timestamp": "t", "log.level": "info"}


class TestConfigureLogging:
    def test_json_output(self, capsys):
        configure_logging(level="INFO", json_format=True, service="insertkit-test")
        structlog.get_logger("test").info("insert_executed", table="users", inserted=1)
        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "insert_executed"
        assert record["table"] == "users"
        assert record["log.level"] == "info"
        assert record["service.name"] == "insertkit-test"
        assert "@timestamp" in record

    def test_level_filtering(self, capsys):
        configure_logging(level="WARNING", json_format=True)
        structlog.get_logger("test").debug("insert_prepared")
        assert "insert_prepared" not in capsys.readouterr().out


class TestContext:
    def test_log_context_binds_and_unbinds(self):
        with LogContext(table="users", backend="sqlite"):
            ctx = structlog.contextvars.get_contextvars()
            assert ctx["table"] == "users"
        assert "table" not in structlog.contextvars.get_contextvars()

    def test_bind_context(self):
        bind_context(backend="postgresql")
        assert structlog.contextvars.get_contextvars()["backend"] == "postgresql"


def test_get_logger_returns_bindable_logger():
    assert hasattr(get_logger(__name__), "bind")


class TestConfigureFromSettings:
    def test_uses_settings(self, capsys):
        from insertkit.core.settings import InsertKitSettings

        configure_from_settings(InsertKitSettings(log_level="WARNING", log_json=True))
        log = structlog.get_logger("test")
        log.info("hidden")
        log.warning("generated_key_count_mismatch", generated=1, inserted=3)
        out = capsys.readouterr().out
        assert "hidden" not in out
        assert json.loads(out.strip().splitlines()[-1])["inserted"] == 3


def test_statement_context_unbound_after_execute(sqlite_session, users):
    from insertkit.core.statements import insert

    insert(sqlite_session, users, {"name": "alice"})
    assert "table" not in structlog.contextvars.get_contextvars()


def test_mismatch_warning_written_after_configure(sqlite_session, users, capsys):
    from insertkit.core.settings import InsertKitSettings
    from insertkit.core.statements import BatchInsertStatement

    configure_from_settings(InsertKitSettings(log_level="INFO", log_json=True))
    stmt = BatchInsertStatement(users, backfill_generated_keys=False)
    stmt.add_row({"name": "a"})
    stmt.add_row({"name": "b"})
    assert stmt.execute(sqlite_session) == 2
    record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert record["event"] == "generated_key_count_mismatch"
    assert record["table"] == "users"


def test_configure_writes_to_given_stream(capsys):
    import io

    buffer = io.StringIO()
    configure_logging(level="INFO", json_format=True, stream=buffer)
    structlog.get_logger("test").warning("generated_key_count_mismatch")
    assert "generated_key_count_mismatch" in buffer.getvalue()
    assert capsys.readouterr().out == ""
