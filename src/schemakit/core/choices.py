"""Union, literal and enum schemas."""
from __future__ import annotations

import math
from typing import Any, Iterable, Optional, Tuple, Union

from schemakit.config.messages import display_value

from .base import Schema, ensure_schema
from .exceptions import SchemaDefinitionError
from .issues import Issue, IssueCode
from .kinds import is_finite, is_number, kind_of, strict_equals
from .result import Failure, Result, Success

LiteralValue = Union[str, int, float, bool]


def _check_literal(value: Any, role: str) -> LiteralValue:
    if not (isinstance(value, (str, bool)) or is_number(value)):
        raise SchemaDefinitionError(
            f"{role} must be a string, number or boolean, got {type(value).__name__}"
        )
    if isinstance(value, float) and not math.isfinite(value):
        raise SchemaDefinitionError(f"{role} must be finite, got {value!r}")
    return value


class UnionSchema(Schema):
    """Tries options in declaration order; the first success wins.

    When no option matches, the union reports a single ``invalid_union``
    issue at its own path. Per-option issues are not propagated: with an
    ambiguous shape a deep path inside one guessed option would point at
    the wrong place.
    """

    def __init__(self, options: Iterable[Schema], *, description: Optional[str] = None) -> None:
        super().__init__(description=description)
        self._options: Tuple[Schema, ...] = tuple(
            ensure_schema(option, f"union option {i}") for i, option in enumerate(options)
        )
        if not self._options:
            raise SchemaDefinitionError("union requires at least one option")

    @property
    def options(self) -> Tuple[Schema, ...]:
        return self._options

    @property
    def is_optional(self) -> bool:
        return any(option.is_optional for option in self._options)

    def select(self, value: Any) -> Optional[int]:
        """Index of the option that ``value`` would be validated by, or ``None``."""
        result = self.validate(value)
        return result.branch if isinstance(result, Success) else None

    def validate(self, value: Any) -> Result:
        for index, option in enumerate(self._options):
            result = option.validate(value)
            if isinstance(result, Success):
                return Success(result.value, branch=index)
        return Failure(
            (
                Issue.create(
                    IssueCode.INVALID_UNION,
                    "invalid_union",
                    count=len(self._options),
                    received=kind_of(value),
                ),
            )
        )

    def __repr__(self) -> str:
        return f"UnionSchema({', '.join(repr(o) for o in self._options)})"


class LiteralSchema(Schema):
    """Matches one constant by kind and value (``True`` never matches ``1``)."""

    def __init__(self, value: LiteralValue, *, description: Optional[str] = None) -> None:
        super().__init__(description=description)
        self._value = _check_literal(value, "literal value")

    @property
    def value(self) -> LiteralValue:
        return self._value

    def validate(self, value: Any) -> Result:
        if strict_equals(value, self._value):
            return Success(value)
        return Failure(
            (
                Issue.create(
                    IssueCode.INVALID_LITERAL,
                    "invalid_literal",
                    expected=display_value(self._value),
                    received=_display_received(value),
                ),
            )
        )

    def __repr__(self) -> str:
        return f"LiteralSchema({self._value!r})"


class EnumSchema(Schema):
    """Matches one of a fixed set of string/number/boolean values."""

    def __init__(self, values: Iterable[LiteralValue], *, description: Optional[str] = None) -> None:
        super().__init__(description=description)
        if isinstance(values, (str, bytes)):
            raise SchemaDefinitionError("enum values must be a list, not a string")
        checked = []
        for i, value in enumerate(values):
            value = _check_literal(value, f"enum value {i}")
            if any(strict_equals(value, seen) for seen in checked):
                raise SchemaDefinitionError(f"duplicate enum value {value!r}")
            checked.append(value)
        if not checked:
            raise SchemaDefinitionError("enum requires at least one value")
        self._values: Tuple[LiteralValue, ...] = tuple(checked)

    @property
    def values(self) -> Tuple[LiteralValue, ...]:
        return self._values

    def validate(self, value: Any) -> Result:
        for allowed in self._values:
            if strict_equals(value, allowed):
                return Success(value)
        return Failure(
            (
                Issue.create(
                    IssueCode.INVALID_ENUM_VALUE,
                    "invalid_enum_value",
                    options=" | ".join(display_value(v) for v in self._values),
                    received=_display_received(value),
                ),
            )
        )

    def __repr__(self) -> str:
        return f"EnumSchema({list(self._values)!r})"


def _display_received(value: Any) -> str:
    if isinstance(value, (str, bool)) or (is_number(value) and is_finite(value)):
        return display_value(value)
    return kind_of(value)


def union(*options: Schema) -> UnionSchema:
    """Create a union; ``union(a, b)`` or ``union([a, b])``."""
    if len(options) == 1 and isinstance(options[0], (list, tuple)):
        options = tuple(options[0])
    return UnionSchema(options)


def literal(value: LiteralValue) -> LiteralSchema:
    return LiteralSchema(value)


def enum_(values: Iterable[LiteralValue]) -> EnumSchema:
    """Create an enum schema, e.g. ``enum_(["admin", "user", 1])``."""
    return EnumSchema(values)


__all__ = [
    "UnionSchema",
    "LiteralSchema",
    "EnumSchema",
    "LiteralValue",
    "union",
    "literal",
    "enum_",
]
