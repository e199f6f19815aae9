from __future__ import annotations

import logging
import pickle

import pytest

from schemakit import (
    Failure,
    Issue,
    IssueCode,
    SafeParseFailure,
    SafeParseSuccess,
    Schema,
    Success,
    ValidationError,
    array,
    number,
    object_,
    s,
    string,
)


def test_parse_returns_the_validated_value() -> None:
    assert s.coerce.number().parse("5") == 5


def test_parse_raises_validation_error_with_issues() -> None:
    schema = object_(name=string(), tags=array(string()))
    with pytest.raises(ValidationError) as excinfo:
        schema.parse({"name": 1, "tags": ["a", 2]})
    error = excinfo.value
    assert [i.path for i in error.issues] == [("name",), ("tags", 1)]
    assert str(error) == (
        "[name]: Expected string, received number\n"
        "[tags.1]: Expected string, received number"
    )


def test_validation_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        number().parse("x")


def test_safe_parse_success() -> None:
    result = string().safe_parse("ok")
    assert isinstance(result, SafeParseSuccess)
    assert result.success is True
    assert result.data == "ok"


def test_safe_parse_failure_carries_the_same_issues_as_validate() -> None:
    schema = object_(a=number(), b=number())
    value = {"a": "x", "b": None}
    result = schema.safe_parse(value)
    assert isinstance(result, SafeParseFailure)
    assert result.success is False
    assert result.error.issues == schema.validate(value).issues


def test_parse_and_safe_parse_agree() -> None:
    schema = string().min(3)
    for value in ("abc", "ab", 3):
        safe = schema.safe_parse(value)
        try:
            parsed = schema.parse(value)
        except ValidationError as error:
            assert not safe.success
            assert safe.error.issues == error.issues
        else:
            assert safe.success and safe.data == parsed


def test_failures_are_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="schemakit"):
        string().safe_parse(1)
    assert "StringSchema.safe_parse failed with 1 issue(s)" in caplog.text


def test_validation_is_repeatable() -> None:
    schema = object_(a=string().min(2))
    first = schema.validate({"a": "x"})
    second = schema.validate({"a": "x"})
    assert first == second


def test_describe_returns_a_copy() -> None:
    base = string()
    described = base.describe("User name")
    assert described.description == "User name"
    assert base.description is None
    assert described.validate("x") == Success("x")


def test_describe_requires_text() -> None:
    from schemakit import SchemaDefinitionError

    with pytest.raises(SchemaDefinitionError):
        string().describe(42)  # type: ignore[arg-type]


def test_custom_schema_subclass() -> None:
    class EvenSchema(Schema):
        def validate(self, value):
            if isinstance(value, int) and value % 2 == 0:
                return Success(value)
            return Failure((Issue("Expected an even integer"),))

    assert EvenSchema().parse(4) == 4
    assert object_(n=EvenSchema()).safe_parse({"n": 3}).error.issues[0].path == ("n",)


class TestValidationError:
    @pytest.fixture
    def error(self) -> ValidationError:
        schema = object_(name=string(), age=number()).strict()
        return schema.safe_parse({"name": None, "extra": 1}).error

    def test_flatten(self, error: ValidationError) -> None:
        flat = error.flatten()
        assert flat["form_errors"] == []
        assert flat["field_errors"] == {
            "name": ["Expected string, received null"],
            "age": ["Expected number, received undefined"],
            "extra": ["Unrecognized key: extra"],
        }

    def test_flatten_root_issue(self) -> None:
        flat = number().safe_parse("x").error.flatten()
        assert flat == {"form_errors": ["Expected number, received string"], "field_errors": {}}

    def test_to_json_error(self, error: ValidationError) -> None:
        payload = error.to_json_error()
        assert payload["code"] == "ValidationError"
        assert payload["context"] == {"issue_count": 3}
        assert payload["issues"][0] == {
            "message": "Expected string, received null",
            "path": ["name"],
            "code": "invalid_type",
        }

    def test_pickles(self, error: ValidationError) -> None:
        restored = pickle.loads(pickle.dumps(error))
        assert restored.issues == error.issues
        assert str(restored) == str(error)

    def test_requires_issues(self) -> None:
        with pytest.raises(ValueError):
            ValidationError([])


class TestIssue:
    def test_with_prefix_builds_paths_outward(self) -> None:
        issue = Issue("bad", code=IssueCode.CUSTOM).with_prefix(0).with_prefix("items")
        assert issue.path == ("items", 0)
        assert issue.path_str == "items.0"

    def test_create_renders_template(self) -> None:
        issue = Issue.create(IssueCode.TOO_SMALL, "string_too_small", minimum=3)
        assert issue.message == "String must contain at least 3 character(s)"
        assert issue.params == {"minimum": 3}

    def test_issue_codes_are_strings(self) -> None:
        assert IssueCode.INVALID_UNION == "invalid_union"

    def test_failure_requires_issues(self) -> None:
        with pytest.raises(ValueError):
            Failure(())
        assert Failure.of([Issue("x")]).issues == (Issue("x"),)
