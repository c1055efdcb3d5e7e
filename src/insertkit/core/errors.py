"""
Structured error types for insertkit.

Every error raised by insertkit itself extends ``InsertKitError`` and carries
a category, a retry flag, structured context and an optional chained cause.
Driver exceptions raised while a statement executes are *not* wrapped: they
reach the caller unmodified, so constraint violations keep the driver's own
type.

Manifesto:
    - **Typed hierarchy:** Callers catch exactly the condition they handle
    - **Explicit retry semantics:** Nothing in insertkit retries on its own
    - **Rich context:** Errors carry table/backend/statement for logging
    - **Error chaining:** Preserve original exceptions as ``cause``

Architecture:
    ::

        InsertKitError (category, retryable, context, cause)
        ├── ConfigError              (CONFIG)
        │   ├── UnknownBackendError
        │   └── UnsupportedFeatureError
        ├── ValidationError          (VALIDATION)
        │   ├── UnknownColumnError
        │   └── BatchShapeError
        ├── DatabaseError            (DATABASE)
        │   ├── QueryError
        │   └── NoGeneratedKeyError
        ├── StatementStateError      (INTERNAL)
        └── ColumnNotInRowError      (VALIDATION)

Examples:
    >>> error = NoGeneratedKeyError("No key generated")
    >>> error.with_context(table="users").to_dict()["context"]
    {'table': 'users'}

Tags:
    error-handling, exception-hierarchy, error-context, insertkit

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    DATABASE = "DATABASE"         # Statement execution, generated keys
    VALIDATION = "VALIDATION"     # Bad column/value input
    CONFIG = "CONFIG"             # Unknown backend, unsupported dialect feature
    INTERNAL = "INTERNAL"         # Misuse of a single-use object
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Only non-None fields end up in ``to_dict()``; anything that is not a
    named field goes into ``metadata``.
    """

    table: str | None = None
    backend: str | None = None
    statement: str | None = None
    column: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["table", "backend", "statement", "column"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class InsertKitError(Exception):
    """
    Base exception for all insertkit errors.

    Subclasses set ``default_category`` and ``default_retryable`` so call
    sites only pass a message.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> InsertKitError:
        """
        Add context to this error (fluent API).

        Usage:
            raise NoGeneratedKeyError("No key generated").with_context(table="users")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIG ERRORS
# =============================================================================


class ConfigError(InsertKitError):
    """Configuration error (never retryable)."""

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class UnknownBackendError(ConfigError):
    """No dialect or statement adapter is registered for a backend."""

    pass


class UnsupportedFeatureError(ConfigError):
    """The active dialect cannot render the requested insert variant."""

    pass


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(InsertKitError):
    """Invalid statement input."""

    default_category = ErrorCategory.VALIDATION
    default_retryable = False


class UnknownColumnError(ValidationError):
    """A value was supplied for a column that does not belong to the table."""

    pass


class BatchShapeError(ValidationError):
    """Rows of one batch would bind different columns."""

    pass


class ColumnNotInRowError(InsertKitError):
    """A result row holds no value for the requested column."""

    default_category = ErrorCategory.VALIDATION


# =============================================================================
# DATABASE ERRORS
# =============================================================================


class DatabaseError(InsertKitError):
    """Database statement error."""

    default_category = ErrorCategory.DATABASE
    default_retryable = False


class QueryError(DatabaseError):
    """A lookup against a backend result failed."""

    pass


class NoGeneratedKeyError(DatabaseError):
    """A generated value was requested but no row was reconciled."""

    pass


class StatementStateError(InsertKitError):
    """A single-use statement was mutated late, re-entered or executed twice."""

    default_category = ErrorCategory.INTERNAL


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, InsertKitError):
        return error.retryable
    return isinstance(error, (ConnectionError, TimeoutError))


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, InsertKitError):
        return error.category
    if isinstance(error, (KeyError, ValueError, TypeError)):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "InsertKitError",
    "ConfigError",
    "UnknownBackendError",
    "UnsupportedFeatureError",
    "ValidationError",
    "UnknownColumnError",
    "BatchShapeError",
    "ColumnNotInRowError",
    "DatabaseError",
    "QueryError",
    "NoGeneratedKeyError",
    "StatementStateError",
    "is_retryable",
    "categorize_error",
]
