"""Emitting and loading agree with each other and with jsonschema itself."""
from __future__ import annotations

import jsonschema
import pytest

from schemakit import (
    Schema,
    array,
    boolean,
    coerce,
    enum_,
    from_json_schema,
    literal,
    null_,
    nullable,
    number,
    object_,
    optional,
    record,
    string,
    to_json_schema,
    union,
    unknown,
)

SCHEMAS = {
    "string": string().min(1).max(20).regex("^[a-z]"),
    "url": string().url(),
    "integer": number().int().min(0).max(10),
    "boolean": boolean(),
    "null": null_(),
    "unknown": unknown(),
    "literal": literal(3),
    "enum": enum_(["a", "b", 1]),
    "date": coerce.date(),
    "union": union(string(), number()),
    "nullable": nullable(number()),
    "nullable_described": nullable(optional(string()).describe("Maybe a name")),
    "pinned_length": string().min(3).max(3),
    "pinned_number": number().min(2).max(2),
    "array": array(object_(id=number())),
    "record": record(string().regex("^k"), boolean()),
    "object": object_(
        {
            "name": string().describe("Display name"),
            "email": optional(string().url()),
            "tags": array(string()),
            "meta": nullable(record(unknown())),
        }
    ).strict(),
}


@pytest.mark.parametrize("name", sorted(SCHEMAS))
def test_emitted_documents_are_valid_draft7(name: str) -> None:
    doc = to_json_schema(SCHEMAS[name], include_dialect=True)
    jsonschema.Draft7Validator.check_schema(doc)


@pytest.mark.parametrize("name", sorted(SCHEMAS))
def test_emit_load_emit_is_stable(name: str) -> None:
    doc = to_json_schema(SCHEMAS[name])
    assert to_json_schema(from_json_schema(doc)) == doc


@pytest.mark.parametrize(
    "schema, values",
    [
        (SCHEMAS["string"], ["abc", "", "Abc", 3, "a" * 21]),
        (SCHEMAS["integer"], [0, 10, 11, -1, 2.5, "3", True]),
        (SCHEMAS["enum"], ["a", 1, "c", True, None]),
        (SCHEMAS["union"], ["x", 1, None, []]),
        (SCHEMAS["nullable"], [None, 1.5, "1"]),
        (SCHEMAS["array"], [[], [{"id": 1}], [{"id": "1"}], [{}], {}]),
        (
            SCHEMAS["object"],
            [
                {"name": "n", "tags": [], "meta": None},
                {"name": "n", "tags": ["a"], "meta": {"x": 1}, "email": "https://x.org"},
                {"name": "n", "tags": [], "meta": None, "extra": 1},
                {"name": 1, "tags": [], "meta": None},
                {"tags": [], "meta": None},
            ],
        ),
    ],
)
def test_acceptance_matches_jsonschema(schema: Schema, values: list) -> None:
    validator = jsonschema.Draft7Validator(to_json_schema(schema))
    loaded = from_json_schema(to_json_schema(schema))
    for value in values:
        expected = validator.is_valid(value)
        assert schema.validate(value).ok is expected, value
        assert loaded.validate(value).ok is expected, value


def test_loaded_schema_reports_the_same_issues() -> None:
    schema = SCHEMAS["object"]
    loaded = from_json_schema(to_json_schema(schema))
    value = {"name": 3, "tags": ["a", 1], "meta": "x", "extra": True}
    assert loaded.validate(value).issues == schema.validate(value).issues


def test_document_round_trip() -> None:
    doc = {
        "type": "object",
        "properties": {
            "id": {"type": "integer", "minimum": 1},
            "kind": {"enum": ["a", "b"]},
            "labels": {"type": "object", "additionalProperties": {"type": "string"}},
            "parent": {"anyOf": [{"type": "integer"}, {"type": "null"}]},
        },
        "required": ["id", "kind"],
        "additionalProperties": False,
    }
    assert to_json_schema(from_json_schema(doc)) == doc
