"""
Result envelope for lookups whose failure is an expected outcome.

Probing a backend's generated-keys result for a column that the driver did
not report is routine (SQLite reports ``last_insert_rowid()``, MySQL reports
``GENERATED_KEY``). Such probes return ``Ok(index)`` or ``Err(error)``
instead of raising, so the reconciliation loop stays free of try/except.

Usage:
    from insertkit.core.result import Result, Ok, Err

    match keys.find_column("id"):
        case Ok(index):
            value = row[index]
        case Err():
            value = None

Tags:
    result-pattern, error-handling, insertkit

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from insertkit.core.errors import InsertKitError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get value or default (always returns value for Ok)."""
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """Failed result containing the error that would have been raised."""

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error. Use only when you're sure it's Ok."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        """Get default since this is Err."""
        return default

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def to_dict(self) -> dict[str, Any]:
        if isinstance(self.error, InsertKitError):
            return {"ok": False, "error": self.error.to_dict()}
        return {
            "ok": False,
            "error": {
                "error_type": type(self.error).__name__,
                "message": str(self.error),
            },
        }

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


def from_optional(value: T | None, error: Exception) -> Result[T]:
    """Wrap ``value`` in Ok, or return ``Err(error)`` when it is None."""
    if value is None:
        return Err(error)
    return Ok(value)


__all__ = [
    "Result",
    "Ok",
    "Err",
    "from_optional",
]
