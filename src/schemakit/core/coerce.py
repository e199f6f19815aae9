"""Coercion schemas.

Each coercion converts its input to the target kind first and then applies
the same check the matching primitive would, followed by any refinements.
Success or failure depends only on the converted value.

Conversions:
- string: numbers and booleans use their canonical text (``1.0`` → ``"1"``,
  ``True`` → ``"true"``); other kinds fail
- number: booleans map to 1/0; strings are parsed as decimal, exponent,
  ``Infinity`` or 0x/0o/0b integers; empty or non-numeric text fails
- boolean: never fails; ``0``, ``""``, ``None``, ``UNDEFINED``, ``NaN`` and
  ``False`` are false, everything else is true
- date: ``datetime``/``date``, ISO-8601 strings and millisecond timestamps
"""
from __future__ import annotations

import math
import re
from datetime import date, datetime, timezone
from typing import Any, Optional, Union

from schemakit.config.settings import coerce_settings

from .issues import Issue, IssueCode, invalid_type
from .kinds import UNDEFINED, is_finite, is_nan, is_number, kind_of
from .refinements import NumberChecks, RefinableSchema, StringChecks
from .result import Failure, Result, Success

_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_PREFIXED_RE = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+")
_INFINITY = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}


def _coercion_failure(value: Any, expected: str) -> Failure:
    return Failure(
        (
            Issue.create(
                IssueCode.INVALID_COERCION,
                "invalid_coercion",
                expected=expected,
                received=kind_of(value),
            ),
        )
    )


def number_to_text(value: Union[int, float]) -> str:
    """Canonical text of a number (``1.0`` → ``"1"``, ``inf`` → ``"Infinity"``)."""
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def text_to_number(text: str) -> Optional[Union[int, float]]:
    """Parse numeric text; ``None`` when the text is not a number."""
    s = text.strip()
    if not s:
        return None
    try:
        if _INT_RE.fullmatch(s):
            return int(s)
        if _DECIMAL_RE.fullmatch(s):
            return float(s)
        if _PREFIXED_RE.fullmatch(s):
            return int(s, 0)
    except ValueError:
        # int() refuses digit strings above sys.get_int_max_str_digits()
        return None
    return _INFINITY.get(s)


def is_truthy(value: Any) -> bool:
    if value is UNDEFINED or value is None:
        return False
    if isinstance(value, bool):
        return value
    if is_number(value):
        return not (value == 0 or is_nan(value))
    if isinstance(value, str):
        return value != ""
    return True


def _parse_iso(text: str) -> Optional[datetime]:
    s = text.strip()
    if not s:
        return None
    if s[-1] in "zZ":
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        return None


def to_datetime(value: Any, *, assume_utc: bool = True) -> Optional[datetime]:
    """Convert ``value`` to a ``datetime`` or return ``None`` if it is not a valid date."""
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        result = _parse_iso(value)
    elif is_number(value):
        if not is_finite(value):
            return None
        try:
            result = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    else:
        return None
    if result is not None and result.tzinfo is None and assume_utc:
        result = result.replace(tzinfo=timezone.utc)
    return result


class CoerceStringSchema(StringChecks):
    def _validate_type(self, value: Any) -> Result:
        if isinstance(value, str):
            return Success(value)
        if isinstance(value, bool):
            return Success("true" if value else "false")
        if is_number(value):
            try:
                return Success(number_to_text(value))
            except ValueError:
                # int above sys.get_int_max_str_digits()
                return _coercion_failure(value, "string")
        return _coercion_failure(value, "string")


class CoerceNumberSchema(NumberChecks):
    def _validate_type(self, value: Any) -> Result:
        if isinstance(value, bool):
            coerced: Any = int(value)
        elif is_number(value):
            coerced = value
        elif isinstance(value, str):
            coerced = text_to_number(value)
            if coerced is None:
                return _coercion_failure(value, "number")
        else:
            return _coercion_failure(value, "number")
        if is_nan(coerced):
            return Failure((invalid_type("number", "nan"),))
        return Success(coerced)


class CoerceBooleanSchema(RefinableSchema):
    def _validate_type(self, value: Any) -> Result:
        return Success(is_truthy(value))


class CoerceDateSchema(RefinableSchema):
    """Coerce to a timezone-aware ``datetime``.

    Date-only strings and naive datetimes are taken as UTC unless
    ``coerce.date_assume_utc`` is turned off in the settings.
    """

    def _validate_type(self, value: Any) -> Result:
        result = to_datetime(value, assume_utc=coerce_settings()["date_assume_utc"])
        if result is None:
            return Failure((Issue.create(IssueCode.INVALID_DATE, "invalid_date"),))
        return Success(result)


def coerce_string() -> CoerceStringSchema:
    return CoerceStringSchema()


def coerce_number() -> CoerceNumberSchema:
    return CoerceNumberSchema()


def coerce_boolean() -> CoerceBooleanSchema:
    return CoerceBooleanSchema()


def coerce_date() -> CoerceDateSchema:
    return CoerceDateSchema()


__all__ = [
    "CoerceStringSchema",
    "CoerceNumberSchema",
    "CoerceBooleanSchema",
    "CoerceDateSchema",
    "coerce_string",
    "coerce_number",
    "coerce_boolean",
    "coerce_date",
    "number_to_text",
    "text_to_number",
    "is_truthy",
    "to_datetime",
]
