"""IBM DB2 statement adapter."""

from __future__ import annotations

from typing import Any

from .base import StatementAdapter
from .types import DatabaseType

IDENTITY_QUERY = "SELECT IDENTITY_VAL_LOCAL() AS GENERATED_KEY FROM SYSIBM.SYSDUMMY1"


class DB2StatementAdapter(StatementAdapter):
    """
    IBM DB2 statement adapter (``ibm_db_dbi``).

    DB2 exposes the most recent identity value of the connection through
    ``IDENTITY_VAL_LOCAL()``, so only the last inserted row has a key.
    """

    db_type = DatabaseType.DB2

    def _capture_keys(self, cursor: Any) -> None:
        cursor.execute(IDENTITY_QUERY)
        row = cursor.fetchone()
        if row and row[0] is not None:
            self._record_keys(["GENERATED_KEY"], [(row[0],)], replace=True)


__all__ = [
    "DB2StatementAdapter",
]
