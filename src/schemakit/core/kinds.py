"""Runtime value kinds.

Validation reasons about values in JSON-like kinds rather than Python
types: ``bool`` is never a number, ``None`` is ``null`` and a missing
value is the ``UNDEFINED`` sentinel.
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any


class _Undefined:
    """Marker for an absent value (a missing object key)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Undefined, ())


UNDEFINED: Any = _Undefined()


def is_number(value: Any) -> bool:
    """True for ``int``/``float`` values, excluding ``bool``."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def is_finite(value: Any) -> bool:
    """True for every ``int`` and for finite floats; ints are never converted to float."""
    return isinstance(value, int) or math.isfinite(value)


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def kind_of(value: Any) -> str:
    """Name the kind of ``value`` as used in issue messages."""
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "nan" if is_nan(value) else "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (datetime, date)):
        return "date"
    if is_sequence(value):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def strict_equals(left: Any, right: Any) -> bool:
    """Kind-and-value equality: ``1 == 1.0`` holds, ``True == 1`` does not."""
    return kind_of(left) == kind_of(right) and left == right


__all__ = [
    "UNDEFINED",
    "is_number",
    "is_nan",
    "is_finite",
    "is_sequence",
    "kind_of",
    "strict_equals",
]
