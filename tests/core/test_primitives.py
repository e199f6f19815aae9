from __future__ import annotations

import math

import pytest

from schemakit import (
    UNDEFINED,
    Failure,
    IssueCode,
    Success,
    any_,
    boolean,
    null_,
    number,
    string,
    undefined_,
    unknown,
)
from helpers import assert_fails, issue_codes


class TestString:
    def test_accepts_strings_unchanged(self) -> None:
        assert string().validate("hello") == Success("hello")
        assert string().validate("") == Success("")

    @pytest.mark.parametrize(
        "value, received",
        [
            (1, "number"),
            (True, "boolean"),
            (None, "null"),
            (UNDEFINED, "undefined"),
            ([], "array"),
            ({}, "object"),
        ],
    )
    def test_rejects_other_kinds(self, value, received) -> None:
        (issue,) = assert_fails(string(), value)
        assert issue.code is IssueCode.INVALID_TYPE
        assert issue.path == ()
        assert issue.message == f"Expected string, received {received}"


class TestNumber:
    @pytest.mark.parametrize("value", [0, -3, 1.5, 1e300, math.inf, -math.inf])
    def test_accepts_numbers(self, value) -> None:
        assert number().validate(value) == Success(value)

    def test_bool_is_not_a_number(self) -> None:
        (issue,) = assert_fails(number(), True)
        assert issue.message == "Expected number, received boolean"

    def test_nan_is_rejected(self) -> None:
        (issue,) = assert_fails(number(), math.nan)
        assert issue.code is IssueCode.INVALID_TYPE
        assert issue.params["received"] == "nan"

    def test_numeric_text_is_not_a_number(self) -> None:
        assert issue_codes(assert_fails(number(), "42")) == ["invalid_type"]


class TestBooleanAndNull:
    def test_boolean(self) -> None:
        assert boolean().validate(False) == Success(False)
        assert issue_codes(assert_fails(boolean(), 0)) == ["invalid_type"]
        assert issue_codes(assert_fails(boolean(), "true")) == ["invalid_type"]

    def test_null_accepts_only_none(self) -> None:
        assert null_().validate(None) == Success(None)
        (issue,) = assert_fails(null_(), UNDEFINED)
        assert issue.message == "Expected null, received undefined"


class TestUndefined:
    def test_accepts_only_the_sentinel(self) -> None:
        result = undefined_().validate(UNDEFINED)
        assert isinstance(result, Success)
        assert result.value is UNDEFINED
        (issue,) = assert_fails(undefined_(), None)
        assert issue.message == "Expected undefined, received null"

    def test_is_optional(self) -> None:
        assert undefined_().is_optional is True
        assert string().is_optional is False

    def test_sentinel_is_falsy_singleton(self) -> None:
        assert not UNDEFINED
        assert repr(UNDEFINED) == "UNDEFINED"
        assert type(UNDEFINED)() is UNDEFINED


class TestUnknownAndAny:
    @pytest.mark.parametrize("value", [None, UNDEFINED, 1, "x", [1], {"a": object()}])
    def test_accept_everything_unchanged(self, value) -> None:
        for schema in (unknown(), any_()):
            result = schema.validate(value)
            assert isinstance(result, Success)
            assert result.value is value


def test_validate_never_raises_for_odd_inputs() -> None:
    class Weird:
        pass

    for schema in (string(), number(), boolean(), null_(), undefined_()):
        result = schema.validate(Weird())
        assert isinstance(result, Failure)
        assert result.issues[0].params["received"] == "Weird"
