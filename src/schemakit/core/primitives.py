"""Primitive schemas: one runtime kind check per node."""
from __future__ import annotations

from typing import Any

from .base import Schema
from .issues import invalid_type
from .kinds import UNDEFINED, is_nan, is_number, kind_of
from .refinements import NumberChecks, StringChecks
from .result import Failure, Result, Success


class StringSchema(StringChecks):
    def _validate_type(self, value: Any) -> Result:
        if isinstance(value, str):
            return Success(value)
        return Failure((invalid_type("string", kind_of(value)),))


class NumberSchema(NumberChecks):
    """``int``/``float`` values; ``bool`` and ``NaN`` are rejected."""

    def _validate_type(self, value: Any) -> Result:
        if is_number(value) and not is_nan(value):
            return Success(value)
        return Failure((invalid_type("number", kind_of(value)),))


class BooleanSchema(Schema):
    def validate(self, value: Any) -> Result:
        if isinstance(value, bool):
            return Success(value)
        return Failure((invalid_type("boolean", kind_of(value)),))


class NullSchema(Schema):
    def validate(self, value: Any) -> Result:
        if value is None:
            return Success(None)
        return Failure((invalid_type("null", kind_of(value)),))


class UndefinedSchema(Schema):
    """Accepts only the ``UNDEFINED`` sentinel (an absent value)."""

    @property
    def is_optional(self) -> bool:
        return True

    def validate(self, value: Any) -> Result:
        if value is UNDEFINED:
            return Success(UNDEFINED)
        return Failure((invalid_type("undefined", kind_of(value)),))


class UnknownSchema(Schema):
    """Accepts any value unchanged."""

    def validate(self, value: Any) -> Result:
        return Success(value)


class AnySchema(UnknownSchema):
    """Same runtime behaviour as ``UnknownSchema``."""


def string() -> StringSchema:
    """Create a string schema."""
    return StringSchema()


def number() -> NumberSchema:
    """Create a number schema (rejects ``bool`` and ``NaN``)."""
    return NumberSchema()


def boolean() -> BooleanSchema:
    return BooleanSchema()


def null_() -> NullSchema:
    return NullSchema()


def undefined_() -> UndefinedSchema:
    return UndefinedSchema()


def unknown() -> UnknownSchema:
    return UnknownSchema()


def any_() -> AnySchema:
    return AnySchema()


__all__ = [
    "StringSchema",
    "NumberSchema",
    "BooleanSchema",
    "NullSchema",
    "UndefinedSchema",
    "UnknownSchema",
    "AnySchema",
    "string",
    "number",
    "boolean",
    "null_",
    "undefined_",
    "unknown",
    "any_",
]
