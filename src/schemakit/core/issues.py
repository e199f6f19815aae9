"""Validation issues.

An ``Issue`` is one validation failure: a message, the path from the root
of the validated value to the failing node, and a machine-readable code.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Mapping, Tuple, Union

from schemakit.config.messages import render_message

PathSegment = Union[str, int]


class IssueCode(str, Enum):
    """Machine-readable issue codes, grouped by failure category."""

    # type mismatch
    INVALID_TYPE = "invalid_type"
    # constraint violation
    TOO_SMALL = "too_small"
    TOO_BIG = "too_big"
    NOT_FINITE = "not_finite"
    NOT_INTEGER = "not_integer"
    INVALID_STRING = "invalid_string"
    # coercion failure
    INVALID_COERCION = "invalid_coercion"
    INVALID_DATE = "invalid_date"
    # membership failure
    INVALID_LITERAL = "invalid_literal"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    UNRECOGNIZED_KEYS = "unrecognized_keys"
    # union exhaustion
    INVALID_UNION = "invalid_union"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Issue:
    """One validation failure.

    Attributes:
        message: Human-readable description
        path: Keys/indices from the root value to the failing node
        code: Failure category
        params: Template parameters used to render ``message``
    """

    message: str
    path: Tuple[PathSegment, ...] = ()
    code: IssueCode = IssueCode.CUSTOM
    params: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def create(cls, code: IssueCode, message_key: str, **params: Any) -> "Issue":
        """Build a root-level issue from the message template ``message_key``."""
        return cls(
            message=render_message(message_key, **params),
            code=code,
            params=params,
        )

    def with_prefix(self, segment: PathSegment) -> "Issue":
        """Return a copy with ``segment`` prepended to the path."""
        return replace(self, path=(segment, *self.path))

    @property
    def path_str(self) -> str:
        return ".".join(str(p) for p in self.path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "path": list(self.path),
            "code": self.code.value,
        }


def invalid_type(expected: str, received: str) -> Issue:
    return Issue.create(
        IssueCode.INVALID_TYPE, "invalid_type", expected=expected, received=received
    )


__all__ = ["Issue", "IssueCode", "PathSegment", "invalid_type"]
