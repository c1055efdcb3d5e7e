"""Argument values bound by insert statements.

A row's argument is one of three variants:

- ``Explicit(value)``: a literal bound as a statement parameter (``None``
  included, for nullable columns)
- ``DEFAULT``: leave the column out and let the backend apply its default
- ``NextVal(sequence)``: pull the next value of a backend sequence inline

Callers pass plain Python values (or a ``NextVal``); ``to_argument`` wraps
them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final

from insertkit.core.schema import Sequence


@dataclass(frozen=True)
class Explicit:
    value: Any


class DeferToBackendDefault:
    """Marker for "omit this column, the backend fills it"."""

    _instance: DeferToBackendDefault | None = None

    def __new__(cls) -> DeferToBackendDefault:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DEFAULT"


DEFAULT: Final = DeferToBackendDefault()


@dataclass(frozen=True)
class NextVal:
    sequence: Sequence


ArgumentValue = Explicit | DeferToBackendDefault | NextVal


def to_argument(value: Any) -> ArgumentValue:
    """Wrap a caller-supplied value; markers pass through unchanged."""
    if isinstance(value, (Explicit, DeferToBackendDefault, NextVal)):
        return value
    return Explicit(value)


def is_rendered(argument: ArgumentValue) -> bool:
    """Whether the argument appears in the rendered column list."""
    return not isinstance(argument, DeferToBackendDefault)


__all__ = [
    "Explicit",
    "DeferToBackendDefault",
    "DEFAULT",
    "NextVal",
    "ArgumentValue",
    "to_argument",
    "is_rendered",
]
