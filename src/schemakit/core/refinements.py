"""Refinements: constraints layered on top of a base type check.

A refinement runs only after its node's type check (or coercion) has
succeeded. Refinements run in attachment order and the first failing one
ends validation of that node, so a node reports at most one constraint
violation.
"""
from __future__ import annotations

import math
import re
from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Pattern, Tuple, TypeVar, Union
from urllib.parse import urlsplit

from .base import Schema
from .exceptions import SchemaDefinitionError
from .issues import Issue, IssueCode
from .kinds import is_finite, is_nan, is_number
from .result import Failure, Result

R = TypeVar("R", bound="RefinableSchema")

_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")


@dataclass(frozen=True)
class Refinement:
    """A named predicate plus the issue it produces on failure.

    Attributes:
        name: Refinement kind (``min_length``, ``url``, ...); the JSON
            Schema bridge keys on it
        check: Predicate over the type-checked value
        code: Issue code reported on failure
        message_key: Message template key; ``message`` wins when set
        params: Template parameters (also read by the JSON Schema bridge)
        message: Fixed message for custom refinements
    """

    name: str
    check: Callable[[Any], bool]
    code: IssueCode
    message_key: str = "custom"
    params: Mapping[str, Any] = field(default_factory=dict)
    message: Optional[str] = None

    def apply(self, value: Any) -> Optional[Issue]:
        if self.check(value):
            return None
        if self.message is not None:
            return Issue(self.message, code=self.code, params=dict(self.params))
        return Issue.create(self.code, self.message_key, **self.params)


def is_url(value: str) -> bool:
    """True for a non-empty absolute URL with a scheme (``https://x``, ``mailto:a@b``)."""
    if not value or value != value.strip():
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    if not parts.scheme or not _SCHEME_RE.fullmatch(parts.scheme):
        return False
    if value.startswith(f"{parts.scheme}://"):
        return bool(parts.netloc)
    return bool(parts.path or parts.netloc)


def _check_bound(value: Any, role: str, *, integral: bool) -> Any:
    if not is_number(value) or is_nan(value):
        raise SchemaDefinitionError(f"{role} must be a number, got {value!r}")
    if integral:
        if isinstance(value, float) and not value.is_integer() or value < 0:
            raise SchemaDefinitionError(f"{role} must be a non-negative integer, got {value!r}")
        return int(value)
    return value


def _check_range(
    refinements: Tuple[Refinement, ...],
    lower: Mapping[str, str],
    upper: Mapping[str, str],
    what: str,
) -> None:
    lows = [r.params[lower[r.name]] for r in refinements if r.name in lower]
    highs = [r.params[upper[r.name]] for r in refinements if r.name in upper]
    if lows and highs and max(lows) > min(highs):
        raise SchemaDefinitionError(
            f"{what} bounds cross: minimum {max(lows)} > maximum {min(highs)}"
        )


class RefinableSchema(Schema):
    """Base for nodes that accept refinements (primitives and coercions).

    Subclasses implement ``_validate_type``, returning ``Success`` with the
    (possibly converted) value or a ``Failure``.
    """

    #: refinement name -> params key holding a lower or upper bound
    _lower_bounds: Mapping[str, str] = {}
    _upper_bounds: Mapping[str, str] = {}
    _bounds_label = "value"

    def __init__(
        self,
        *,
        refinements: Tuple[Refinement, ...] = (),
        description: Optional[str] = None,
    ) -> None:
        super().__init__(description=description)
        self._refinements = tuple(refinements)

    @property
    def refinements(self) -> Tuple[Refinement, ...]:
        return self._refinements

    @abstractmethod
    def _validate_type(self, value: Any) -> Result:
        ...

    def validate(self, value: Any) -> Result:
        result = self._validate_type(value)
        if isinstance(result, Failure):
            return result
        for refinement in self._refinements:
            issue = refinement.apply(result.value)
            if issue is not None:
                return Failure((issue,))
        return result

    def with_refinement(self: R, refinement: Refinement) -> R:
        """Return a copy with ``refinement`` appended.

        Raises:
            SchemaDefinitionError: if the new bound crosses an existing one,
                so that no value could pass.
        """
        refinements = (*self._refinements, refinement)
        _check_range(refinements, self._lower_bounds, self._upper_bounds, self._bounds_label)
        return self._replace(_refinements=refinements)

    def refine(self: R, check: Callable[[Any], bool], message: str = "Invalid value") -> R:
        """Attach a custom predicate; ``message`` is reported when it returns false.

        Custom refinements take part in validation only; they have no JSON
        Schema counterpart.
        """
        if not callable(check):
            raise SchemaDefinitionError("refine() requires a callable")
        return self.with_refinement(
            Refinement("custom", check, IssueCode.CUSTOM, message=message)
        )

    def __repr__(self) -> str:
        names = ", ".join(r.name for r in self._refinements)
        return f"{type(self).__name__}({names})" if names else super().__repr__()


class StringChecks(RefinableSchema):
    """Length, URL and pattern refinements for string-valued nodes."""

    _lower_bounds = {"min_length": "minimum", "exact_length": "exact"}
    _upper_bounds = {"max_length": "maximum", "exact_length": "exact"}
    _bounds_label = "length"

    def min(self: R, length: int) -> R:
        length = _check_bound(length, "min length", integral=True)
        return self.with_refinement(
            Refinement(
                "min_length",
                lambda v: len(v) >= length,
                IssueCode.TOO_SMALL,
                "string_too_small",
                {"minimum": length},
            )
        )

    def max(self: R, length: int) -> R:
        length = _check_bound(length, "max length", integral=True)
        return self.with_refinement(
            Refinement(
                "max_length",
                lambda v: len(v) <= length,
                IssueCode.TOO_BIG,
                "string_too_big",
                {"maximum": length},
            )
        )

    def length(self: R, exact: int) -> R:
        exact = _check_bound(exact, "length", integral=True)

        def check(v: str) -> bool:
            return len(v) == exact

        return self.with_refinement(
            Refinement(
                "exact_length",
                check,
                IssueCode.INVALID_STRING,
                "string_exact_length",
                {"exact": exact},
            )
        )

    def url(self: R) -> R:
        return self.with_refinement(
            Refinement("url", is_url, IssueCode.INVALID_STRING, "invalid_url", {"format": "uri"})
        )

    def regex(self: R, pattern: Union[str, Pattern[str]]) -> R:
        try:
            compiled = re.compile(pattern)
        except re.error as exc:
            raise SchemaDefinitionError(f"invalid regex {pattern!r}: {exc}") from exc
        return self.with_refinement(
            Refinement(
                "regex",
                lambda v: compiled.search(v) is not None,
                IssueCode.INVALID_STRING,
                "invalid_regex",
                {"pattern": compiled.pattern},
            )
        )


class NumberChecks(RefinableSchema):
    """Range, finiteness and integrality refinements for number-valued nodes."""

    _lower_bounds = {"min_value": "minimum"}
    _upper_bounds = {"max_value": "maximum"}

    def min(self: R, minimum: Union[int, float]) -> R:
        _check_bound(minimum, "minimum", integral=False)
        return self.with_refinement(
            Refinement(
                "min_value",
                lambda v: v >= minimum,
                IssueCode.TOO_SMALL,
                "number_too_small",
                {"minimum": minimum},
            )
        )

    def max(self: R, maximum: Union[int, float]) -> R:
        _check_bound(maximum, "maximum", integral=False)
        return self.with_refinement(
            Refinement(
                "max_value",
                lambda v: v <= maximum,
                IssueCode.TOO_BIG,
                "number_too_big",
                {"maximum": maximum},
            )
        )

    def finite(self: R) -> R:
        return self.with_refinement(
            Refinement("finite", is_finite, IssueCode.NOT_FINITE, "not_finite")
        )

    def int(self: R) -> R:
        def check(v: Union[int, float]) -> bool:
            return isinstance(v, int) or (math.isfinite(v) and v.is_integer())

        return self.with_refinement(
            Refinement("integer", check, IssueCode.NOT_INTEGER, "not_integer")
        )


__all__ = [
    "Refinement",
    "RefinableSchema",
    "StringChecks",
    "NumberChecks",
    "is_url",
]
