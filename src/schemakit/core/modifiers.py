"""Optional and nullable wrappers.

Wrappers change what a node accepts without touching the wrapped schema,
which stays independently usable. They nest: ``optional(nullable(x))``
accepts ``UNDEFINED``, ``None`` and anything ``x`` accepts.
"""
from __future__ import annotations

from typing import Any, Optional

from .base import Schema, ensure_schema
from .kinds import UNDEFINED
from .result import Result, Success


class _Wrapper(Schema):
    def __init__(self, inner: Schema, *, description: Optional[str] = None) -> None:
        super().__init__(description=description)
        self._inner = ensure_schema(inner, f"{type(self).__name__} inner schema")

    @property
    def inner(self) -> Schema:
        return self._inner

    def unwrap(self) -> Schema:
        return self._inner

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._inner!r})"


class OptionalSchema(_Wrapper):
    """Accepts ``UNDEFINED`` as-is, otherwise delegates to the inner schema."""

    @property
    def is_optional(self) -> bool:
        return True

    def validate(self, value: Any) -> Result:
        if value is UNDEFINED:
            return Success(UNDEFINED)
        return self._inner.validate(value)


class NullableSchema(_Wrapper):
    """Accepts ``None`` as-is, otherwise delegates to the inner schema."""

    @property
    def is_optional(self) -> bool:
        return self._inner.is_optional

    def validate(self, value: Any) -> Result:
        if value is None:
            return Success(None)
        return self._inner.validate(value)


def optional(inner: Schema) -> OptionalSchema:
    """Make ``inner`` optional (also accept ``UNDEFINED``)."""
    return OptionalSchema(inner)


def nullable(inner: Schema) -> NullableSchema:
    """Make ``inner`` nullable (also accept ``None``)."""
    return NullableSchema(inner)


__all__ = ["OptionalSchema", "NullableSchema", "optional", "nullable"]
