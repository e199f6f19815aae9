"""Assertion helpers for validation results."""
from __future__ import annotations

from typing import Any, List, Tuple

from schemakit import Failure, Issue, Schema


def assert_fails(schema: Schema, value: Any) -> Tuple[Issue, ...]:
    """Assert ``schema`` rejects ``value`` and return the issues."""
    result = schema.validate(value)
    assert isinstance(result, Failure), f"expected {value!r} to be rejected, got {result!r}"
    return result.issues


def issue_paths(issues: Tuple[Issue, ...]) -> List[Tuple[Any, ...]]:
    return [issue.path for issue in issues]


def issue_codes(issues: Tuple[Issue, ...]) -> List[str]:
    return [issue.code.value for issue in issues]
