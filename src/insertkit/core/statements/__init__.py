"""Insert statements and the result rows they produce."""

from .insert import BatchInsertStatement, InsertStatement, Lazy, insert, insert_batch
from .result_row import ResultRow

__all__ = [
    "InsertStatement",
    "BatchInsertStatement",
    "Lazy",
    "ResultRow",
    "insert",
    "insert_batch",
]
