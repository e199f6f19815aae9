"""Base schema node and the parse API.

Every schema kind derives from ``Schema`` and implements ``validate``.
Schema nodes are immutable once built: builder methods (``describe``,
``optional``, refinements, ...) return a modified copy and leave the
receiver untouched, so a node can be shared freely between threads.
"""
from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional, TypeVar

from .exceptions import SchemaDefinitionError, ValidationError
from .result import Failure, Result, SafeParseFailure, SafeParseResult, SafeParseSuccess

if TYPE_CHECKING:
    from .modifiers import NullableSchema, OptionalSchema

logger = logging.getLogger(__name__)

S = TypeVar("S", bound="Schema")


class Schema(ABC):
    """Abstract base class for all schema nodes.

    Subclasses implement ``validate``; ``parse`` and ``safe_parse`` are
    built on top of it.

    Usage:
        class EvenSchema(Schema):
            def validate(self, value):
                if isinstance(value, int) and value % 2 == 0:
                    return Success(value)
                return Failure((Issue("Expected an even integer"),))

        EvenSchema().parse(4)
    """

    def __init__(self, *, description: Optional[str] = None) -> None:
        self._description = description

    @property
    def description(self) -> Optional[str]:
        return self._description

    @property
    def is_optional(self) -> bool:
        """Whether a missing object key is accepted by this node."""
        return False

    @abstractmethod
    def validate(self, value: Any) -> Result:
        """Validate ``value`` and return ``Success`` or ``Failure``.

        Must never raise for an invalid value; issues are reported
        relative to this node (empty path at this node).
        """
        ...

    def parse(self, value: Any) -> Any:
        """Return the validated value or raise ``ValidationError``."""
        result = self.validate(value)
        if isinstance(result, Failure):
            logger.debug(
                "%s.parse failed with %d issue(s)", type(self).__name__, len(result.issues)
            )
            raise ValidationError(result.issues)
        return result.value

    def safe_parse(self, value: Any) -> SafeParseResult:
        """Validate ``value`` without raising.

        Returns:
            ``SafeParseSuccess(data=...)`` or ``SafeParseFailure(error=...)``
        """
        result = self.validate(value)
        if isinstance(result, Failure):
            logger.debug(
                "%s.safe_parse failed with %d issue(s)", type(self).__name__, len(result.issues)
            )
            return SafeParseFailure(error=ValidationError(result.issues))
        return SafeParseSuccess(data=result.value)

    def describe(self: S, description: str) -> S:
        """Return a copy carrying ``description`` (emitted to JSON Schema)."""
        if not isinstance(description, str):
            raise SchemaDefinitionError(
                f"description must be a string, got {type(description).__name__}"
            )
        return self._replace(_description=description)

    def optional(self) -> "OptionalSchema":
        """Return ``optional(self)``: also accept ``UNDEFINED``."""
        from .modifiers import OptionalSchema

        return OptionalSchema(self)

    def nullable(self) -> "NullableSchema":
        """Return ``nullable(self)``: also accept ``None``."""
        from .modifiers import NullableSchema

        return NullableSchema(self)

    def _replace(self: S, **changes: Any) -> S:
        clone = copy.copy(self)
        for name, value in changes.items():
            setattr(clone, name, value)
        return clone

    def __repr__(self) -> str:
        if self._description:
            return f"{type(self).__name__}(description={self._description!r})"
        return f"{type(self).__name__}()"


def ensure_schema(value: Any, role: str) -> Schema:
    """Check a constructor argument is a schema node."""
    if not isinstance(value, Schema):
        raise SchemaDefinitionError(
            f"{role} must be a Schema, got {type(value).__name__}",
            context={"role": role},
        )
    return value


__all__ = ["Schema", "ensure_schema"]
