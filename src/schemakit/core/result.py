"""Validation results.

``validate`` returns ``Success`` or ``Failure``; there is no partial
success. ``safe_parse`` wraps them as ``SafeParseSuccess`` /
``SafeParseFailure``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple, Union

from .exceptions import ValidationError
from .issues import Issue


@dataclass(frozen=True)
class Success:
    value: Any
    # Index of the union option that produced the value, if any.
    branch: Optional[int] = None

    ok = True


@dataclass(frozen=True)
class Failure:
    issues: Tuple[Issue, ...]

    ok = False

    def __post_init__(self) -> None:
        if not self.issues:
            raise ValueError("Failure requires at least one issue")

    @classmethod
    def of(cls, issues: Iterable[Issue]) -> "Failure":
        return cls(tuple(issues))


Result = Union[Success, Failure]


@dataclass(frozen=True)
class SafeParseSuccess:
    data: Any
    success: bool = True


@dataclass(frozen=True)
class SafeParseFailure:
    error: ValidationError
    success: bool = False


SafeParseResult = Union[SafeParseSuccess, SafeParseFailure]


__all__ = [
    "Success",
    "Failure",
    "Result",
    "SafeParseSuccess",
    "SafeParseFailure",
    "SafeParseResult",
]
