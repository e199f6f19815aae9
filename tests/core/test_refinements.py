from __future__ import annotations

import math
import re

import pytest

from schemakit import IssueCode, SchemaDefinitionError, Success, number, string
from schemakit.core.refinements import is_url
from helpers import assert_fails


class TestStringRefinements:
    def test_min_and_max_length(self) -> None:
        schema = string().min(2).max(4)
        assert schema.validate("ab") == Success("ab")
        assert schema.validate("abcd") == Success("abcd")

        (issue,) = assert_fails(schema, "a")
        assert issue.code is IssueCode.TOO_SMALL
        assert issue.message == "String must contain at least 2 character(s)"

        (issue,) = assert_fails(schema, "abcde")
        assert issue.code is IssueCode.TOO_BIG
        assert issue.message == "String must contain at most 4 character(s)"

    def test_exact_length(self) -> None:
        schema = string().length(3)
        assert schema.validate("abc") == Success("abc")
        (issue,) = assert_fails(schema, "ab")
        assert issue.code is IssueCode.INVALID_STRING
        assert issue.params == {"exact": 3}

    def test_length_counts_code_points(self) -> None:
        assert string().max(2).validate("żó") == Success("żó")

    def test_url(self) -> None:
        schema = string().url()
        assert schema.validate("https://example.com/a?b=1") == Success("https://example.com/a?b=1")
        (issue,) = assert_fails(schema, "not a url")
        assert issue.code is IssueCode.INVALID_STRING
        assert issue.message == "Invalid url"

    def test_regex_searches_the_value(self) -> None:
        schema = string().regex(r"^[a-z]+$")
        assert schema.validate("abc") == Success("abc")
        (issue,) = assert_fails(schema, "abc1")
        assert issue.params == {"pattern": "^[a-z]+$"}

    def test_regex_accepts_compiled_pattern(self) -> None:
        schema = string().regex(re.compile(r"\d"))
        assert schema.validate("a1") == Success("a1")

    def test_invalid_regex_is_a_definition_error(self) -> None:
        with pytest.raises(SchemaDefinitionError):
            string().regex("(")

    @pytest.mark.parametrize("bound", [-1, 1.5, "3", math.nan])
    def test_bad_length_bounds_are_rejected(self, bound) -> None:
        with pytest.raises(SchemaDefinitionError):
            string().min(bound)

    def test_integral_float_bound_is_normalized(self) -> None:
        schema = string().min(2.0)
        assert schema.refinements[0].params == {"minimum": 2}


class TestNumberRefinements:
    def test_min_max_are_inclusive(self) -> None:
        schema = number().min(0).max(10)
        assert schema.validate(0) == Success(0)
        assert schema.validate(10) == Success(10)
        (issue,) = assert_fails(schema, -0.5)
        assert issue.code is IssueCode.TOO_SMALL
        assert issue.message == "Number must be greater than or equal to 0"
        (issue,) = assert_fails(schema, 11)
        assert issue.code is IssueCode.TOO_BIG

    def test_finite(self) -> None:
        schema = number().finite()
        assert schema.validate(1.5) == Success(1.5)
        (issue,) = assert_fails(schema, math.inf)
        assert issue.code is IssueCode.NOT_FINITE

    def test_int(self) -> None:
        schema = number().int()
        assert schema.validate(3) == Success(3)
        assert schema.validate(3.0) == Success(3.0)
        (issue,) = assert_fails(schema, 3.5)
        assert issue.code is IssueCode.NOT_INTEGER
        assert issue_code_of(schema, math.inf) is IssueCode.NOT_INTEGER

    def test_finite_accepts_ints_beyond_float_range(self) -> None:
        big = 10**400
        assert number().finite().validate(big) == Success(big)
        assert number().int().validate(big) == Success(big)

    def test_bounds_must_be_numbers(self) -> None:
        with pytest.raises(SchemaDefinitionError):
            number().min("1")
        with pytest.raises(SchemaDefinitionError):
            number().max(True)


class TestCrossedBounds:
    @pytest.mark.parametrize(
        "build",
        [
            lambda: number().min(5).max(3),
            lambda: number().max(3).min(5),
            lambda: string().min(5).max(3),
            lambda: string().length(3).min(5),
            lambda: string().max(2).length(3),
            lambda: string().length(3).length(4),
        ],
    )
    def test_unsatisfiable_bounds_are_rejected(self, build) -> None:
        with pytest.raises(SchemaDefinitionError, match="bounds cross"):
            build()

    def test_equal_bounds_are_allowed(self) -> None:
        assert number().min(3).max(3).validate(3) == Success(3)
        assert string().min(3).max(3).length(3).validate("abc") == Success("abc")


class TestOrdering:
    def test_refinements_run_in_attachment_order_and_stop_at_first_failure(self) -> None:
        calls = []

        def first(value):
            calls.append("first")
            return False

        def second(value):
            calls.append("second")
            return False

        schema = string().refine(first, "first failed").refine(second, "second failed")
        issues = assert_fails(schema, "x")
        assert [i.message for i in issues] == ["first failed"]
        assert calls == ["first"]

    def test_refinements_do_not_run_after_a_type_failure(self) -> None:
        calls = []
        schema = string().refine(lambda v: calls.append(v) or True)
        (issue,) = assert_fails(schema, 1)
        assert issue.code is IssueCode.INVALID_TYPE
        assert calls == []

    def test_only_the_first_failing_builtin_refinement_is_reported(self) -> None:
        issues = assert_fails(string().min(5).url(), "ab")
        assert [i.code for i in issues] == [IssueCode.TOO_SMALL]


class TestImmutability:
    def test_builders_return_new_nodes(self) -> None:
        base = string()
        bounded = base.min(3)
        assert bounded is not base
        assert base.refinements == ()
        assert base.validate("a") == Success("a")
        assert len(bounded.refinements) == 1

    def test_custom_refinement_message_and_code(self) -> None:
        schema = number().refine(lambda v: v % 2 == 0, "must be even")
        (issue,) = assert_fails(schema, 3)
        assert issue.code is IssueCode.CUSTOM
        assert issue.message == "must be even"

    def test_refine_requires_a_callable(self) -> None:
        with pytest.raises(SchemaDefinitionError):
            string().refine("not callable")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("https://example.com", True),
        ("http://localhost:8080/path", True),
        ("mailto:someone@example.com", True),
        ("urn:isbn:0451450523", True),
        ("example.com", False),
        ("https://", False),
        ("", False),
        (" https://example.com", False),
        ("1http://x", False),
    ],
)
def test_is_url(value: str, expected: bool) -> None:
    assert is_url(value) is expected


def issue_code_of(schema, value):
    (issue,) = assert_fails(schema, value)
    return issue.code
