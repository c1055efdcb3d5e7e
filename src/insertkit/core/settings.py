"""Settings for insertkit.

Statement behavior that callers rarely want to pass on every call (always
batching, the generated-key back-fill heuristic) and CLI defaults are read
from the environment with the ``INSERTKIT_`` prefix or from a ``.env`` file.

Examples:
    >>> from insertkit.core.settings import get_settings
    >>> get_settings().backfill_generated_keys
    True

Tags:
    settings, configuration, pydantic, environment, insertkit

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class InsertKitSettings(BaseSettings):
    """Environment-driven settings.

    Fields
    ──────
    log_level               : structlog log level
    log_json                : JSON logs (None = auto-detect from the tty)
    always_batch            : execute single-row inserts through the batch path
    backfill_generated_keys : synthesize keys for backends reporting only the last one
    database                : default SQLite path for the CLI
    """

    model_config = SettingsConfigDict(
        env_prefix="INSERTKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    # ── Statement behavior ───────────────────────────────────────
    always_batch: bool = False
    backfill_generated_keys: bool = Field(
        default=True,
        description="Back-fill k-1, k-2, ... when only the last generated key is reported",
    )

    # ── CLI ──────────────────────────────────────────────────────
    database: str = "insertkit.db"


@lru_cache(maxsize=1)
def get_settings() -> InsertKitSettings:
    """Return the process-wide settings (read once)."""
    return InsertKitSettings()


def reset_settings() -> None:
    """Forget cached settings so the environment is read again."""
    get_settings.cache_clear()


__all__ = [
    "InsertKitSettings",
    "get_settings",
    "reset_settings",
]
