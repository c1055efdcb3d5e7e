"""Tests for core.settings module.

Covers:
- InsertKitSettings defaults
- Environment variable override
- Cached accessor and reset
"""

from insertkit.core.settings import InsertKitSettings, get_settings, reset_settings


class TestInsertKitSettingsDefaults:
    def test_default_log_level(self):
        assert InsertKitSettings().log_level == "INFO"

    def test_log_json_auto(self):
        assert InsertKitSettings().log_json is None

    def test_statement_defaults(self):
        s = InsertKitSettings()
        assert s.always_batch is False
        assert s.backfill_generated_keys is True

    def test_default_database(self):
        assert InsertKitSettings().database == "insertkit.db"


class TestInsertKitSettingsEnvOverride:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("INSERTKIT_ALWAYS_BATCH", "true")
        monkeypatch.setenv("INSERTKIT_LOG_LEVEL", "DEBUG")
        s = InsertKitSettings()
        assert s.always_batch is True
        assert s.log_level == "DEBUG"

    def test_unprefixed_ignored(self, monkeypatch):
        monkeypatch.setenv("ALWAYS_BATCH", "true")
        assert InsertKitSettings().always_batch is False


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_reset_rereads_environment(self, monkeypatch):
        assert get_settings().database == "insertkit.db"
        monkeypatch.setenv("INSERTKIT_DATABASE", "/tmp/other.db")
        assert get_settings().database == "insertkit.db"
        reset_settings()
        assert get_settings().database == "/tmp/other.db"
