"""JSON Schema (Draft-07 subset) → Schema.

Loading is strict: a keyword that has no schemakit counterpart, or a
document that contradicts itself, raises ``SchemaConstructionError``
instead of being approximated. Annotation keywords (``title``,
``default``, ``$comment``, ...) are accepted and ignored, except
``description`` which is kept.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, FrozenSet, List, Optional, Sequence

import jsonschema
from jsonschema.exceptions import SchemaError

from schemakit.config.settings import json_schema_settings
from schemakit.core.base import Schema
from schemakit.core.choices import EnumSchema, LiteralSchema, UnionSchema
from schemakit.core.coerce import CoerceDateSchema
from schemakit.core.composites import ArraySchema, ObjectSchema, RecordSchema
from schemakit.core.exceptions import SchemaConstructionError, SchemaDefinitionError
from schemakit.core.kinds import is_number
from schemakit.core.modifiers import NullableSchema, OptionalSchema
from schemakit.core.primitives import (
    BooleanSchema,
    NullSchema,
    NumberSchema,
    StringSchema,
    UnknownSchema,
)

logger = logging.getLogger(__name__)

ANNOTATION_KEYWORDS: FrozenSet[str] = frozenset(
    {"$schema", "$id", "$comment", "title", "description", "default", "examples"}
)
SUPPORTED_FORMATS: FrozenSet[str] = frozenset({"uri", "date-time"})

_STRING_KEYWORDS = frozenset({"minLength", "maxLength", "format", "pattern"})
_NUMBER_KEYWORDS = frozenset({"minimum", "maximum"})
_OBJECT_KEYWORDS = frozenset({"properties", "required", "additionalProperties", "propertyNames"})
_ARRAY_KEYWORDS = frozenset({"items"})

KEYWORDS_BY_TYPE: Dict[str, FrozenSet[str]] = {
    "string": _STRING_KEYWORDS,
    "number": _NUMBER_KEYWORDS,
    "integer": _NUMBER_KEYWORDS,
    "boolean": frozenset(),
    "null": frozenset(),
    "object": _OBJECT_KEYWORDS,
    "array": _ARRAY_KEYWORDS,
}
_TYPED_KEYWORDS = _STRING_KEYWORDS | _NUMBER_KEYWORDS | _OBJECT_KEYWORDS | _ARRAY_KEYWORDS


def _child(pointer: str, *segments: Any) -> str:
    for segment in segments:
        pointer += "/" + str(segment).replace("~", "~0").replace("/", "~1")
    return pointer


def _kind_matches(value: Any, json_type: str) -> bool:
    if json_type == "string":
        return isinstance(value, str)
    if json_type == "boolean":
        return isinstance(value, bool)
    if json_type == "number":
        return is_number(value)
    if json_type == "integer":
        if isinstance(value, float):
            return value.is_integer()
        return is_number(value)
    if json_type == "null":
        return value is None
    return False


def check_document(doc: Any) -> None:
    """Check ``doc`` against the Draft-07 meta-schema.

    Raises:
        SchemaConstructionError: If the document is not a valid Draft-07 schema.
    """
    try:
        jsonschema.Draft7Validator.check_schema(doc)
    except SchemaError as exc:
        pointer = _child("", *exc.absolute_path)
        raise SchemaConstructionError(
            f"Invalid JSON Schema document: {exc.message}", pointer=pointer
        ) from exc


class _Loader:
    def load(self, doc: Any, pointer: str) -> Schema:
        if doc is True:
            return UnknownSchema()
        if doc is False:
            raise SchemaConstructionError("The 'false' schema is not supported", pointer=pointer)
        if not isinstance(doc, Mapping):
            raise SchemaConstructionError(
                f"Expected a JSON Schema object, got {type(doc).__name__}", pointer=pointer
            )
        try:
            schema = self._load_node(doc, pointer)
            description = doc.get("description")
            if description is not None:
                schema = schema.describe(description)
        except SchemaDefinitionError as exc:
            raise SchemaConstructionError(str(exc), pointer=pointer) from exc
        return schema

    def _reject_extra(self, doc: Mapping, allowed: FrozenSet[str], pointer: str, what: str) -> None:
        extra = sorted(set(doc) - allowed - ANNOTATION_KEYWORDS)
        if not extra:
            return
        misplaced = [k for k in extra if k in _TYPED_KEYWORDS]
        if misplaced:
            raise SchemaConstructionError(
                f"Contradictory document: {', '.join(misplaced)} cannot apply to {what}",
                pointer=pointer,
            )
        raise SchemaConstructionError(
            f"Unsupported JSON Schema keyword(s) for {what}: {', '.join(extra)}",
            pointer=pointer,
        )

    def _types(self, doc: Mapping, pointer: str) -> Optional[List[str]]:
        if "type" not in doc:
            return None
        raw = doc["type"]
        types = [raw] if isinstance(raw, str) else list(raw) if isinstance(raw, Sequence) else None
        if not types or not all(isinstance(t, str) for t in types):
            raise SchemaConstructionError(f"Invalid 'type': {raw!r}", pointer=_child(pointer, "type"))
        unknown = [t for t in types if t not in KEYWORDS_BY_TYPE]
        if unknown:
            raise SchemaConstructionError(
                f"Unknown type(s): {', '.join(unknown)}", pointer=_child(pointer, "type")
            )
        return list(dict.fromkeys(types))

    def _load_node(self, doc: Mapping, pointer: str) -> Schema:
        if "const" in doc:
            return self._load_const(doc, pointer)
        if "enum" in doc:
            return self._load_enum(doc, pointer)
        if "anyOf" in doc:
            return self._load_any_of(doc, pointer)

        types = self._types(doc, pointer)
        if types is None:
            keys = set(doc) - ANNOTATION_KEYWORDS
            if keys & _OBJECT_KEYWORDS:
                types = ["object"]
            elif keys & _ARRAY_KEYWORDS:
                types = ["array"]
            else:
                self._reject_extra(doc, frozenset(), pointer, "an untyped schema")
                return UnknownSchema()

        allowed = frozenset({"type"}).union(*(KEYWORDS_BY_TYPE[t] for t in types))
        self._reject_extra(doc, allowed, pointer, "type " + " | ".join(types))

        branches = [self._load_typed(doc, t, pointer) for t in types if t != "null"]
        if not branches:
            return NullSchema()
        schema = branches[0] if len(branches) == 1 else UnionSchema(branches)
        if "null" in types:
            schema = NullableSchema(schema)
        return schema

    def _check_value_types(self, doc: Mapping, values: Sequence[Any], pointer: str) -> None:
        types = self._types(doc, pointer)
        if types is None:
            return
        for value in values:
            if not any(_kind_matches(value, t) for t in types):
                raise SchemaConstructionError(
                    f"Contradictory document: {value!r} is not of type {' | '.join(types)}",
                    pointer=pointer,
                )

    def _load_const(self, doc: Mapping, pointer: str) -> Schema:
        self._reject_extra(doc, frozenset({"const", "type"}), pointer, "const")
        value = doc["const"]
        self._check_value_types(doc, [value], pointer)
        if value is None:
            return NullSchema()
        if not (isinstance(value, (str, bool)) or is_number(value)):
            raise SchemaConstructionError(
                f"Unsupported const value of type {type(value).__name__}",
                pointer=_child(pointer, "const"),
            )
        return LiteralSchema(value)

    def _load_enum(self, doc: Mapping, pointer: str) -> Schema:
        self._reject_extra(doc, frozenset({"enum", "type"}), pointer, "enum")
        values = doc["enum"]
        if not isinstance(values, list) or not values:
            raise SchemaConstructionError("'enum' must be a non-empty array", pointer=_child(pointer, "enum"))
        self._check_value_types(doc, values, pointer)
        members = [v for v in values if v is not None]
        for i, value in enumerate(values):
            if value is not None and not (isinstance(value, (str, bool)) or is_number(value)):
                raise SchemaConstructionError(
                    f"Unsupported enum value of type {type(value).__name__}",
                    pointer=_child(pointer, "enum", i),
                )
        if not members:
            return NullSchema()
        schema: Schema = EnumSchema(members)
        if len(members) != len(values):
            schema = NullableSchema(schema)
        return schema

    def _load_any_of(self, doc: Mapping, pointer: str) -> Schema:
        self._reject_extra(doc, frozenset({"anyOf"}), pointer, "anyOf")
        options = doc["anyOf"]
        if not isinstance(options, list) or not options:
            raise SchemaConstructionError("'anyOf' must be a non-empty array", pointer=_child(pointer, "anyOf"))
        # [X, {"type": "null"}] is the nullable form produced by to_json_schema.
        if len(options) == 2 and options[1] == {"type": "null"}:
            return NullableSchema(self.load(options[0], _child(pointer, "anyOf", 0)))
        return UnionSchema(
            [self.load(option, _child(pointer, "anyOf", i)) for i, option in enumerate(options)]
        )

    def _load_typed(self, doc: Mapping, json_type: str, pointer: str) -> Schema:
        if json_type == "string":
            return self._load_string(doc, pointer)
        if json_type in ("number", "integer"):
            return self._load_number(doc, pointer, integer=json_type == "integer")
        if json_type == "boolean":
            return BooleanSchema()
        if json_type == "object":
            return self._load_object(doc, pointer)
        if json_type == "array":
            return self._load_array(doc, pointer)
        raise SchemaConstructionError(f"Unknown type {json_type!r}", pointer=pointer)

    def _load_string(self, doc: Mapping, pointer: str) -> Schema:
        fmt = doc.get("format")
        if fmt is not None and fmt not in SUPPORTED_FORMATS:
            raise SchemaConstructionError(
                f"Unsupported format {fmt!r} (supported: {', '.join(sorted(SUPPORTED_FORMATS))})",
                pointer=_child(pointer, "format"),
            )
        if fmt == "date-time":
            others = sorted(_STRING_KEYWORDS.intersection(doc) - {"format"})
            if others:
                raise SchemaConstructionError(
                    f"Unsupported keyword(s) alongside format 'date-time': {', '.join(others)}",
                    pointer=pointer,
                )
            return CoerceDateSchema()

        min_length = doc.get("minLength")
        max_length = doc.get("maxLength")
        if min_length is not None and max_length is not None and min_length > max_length:
            raise SchemaConstructionError(
                f"Contradictory document: minLength {min_length} > maxLength {max_length}",
                pointer=pointer,
            )
        schema = StringSchema()
        if min_length is not None:
            schema = schema.min(min_length)
        if max_length is not None:
            schema = schema.max(max_length)
        if fmt == "uri":
            schema = schema.url()
        if "pattern" in doc:
            schema = schema.regex(doc["pattern"])
        return schema

    def _load_number(self, doc: Mapping, pointer: str, *, integer: bool) -> Schema:
        minimum = doc.get("minimum")
        maximum = doc.get("maximum")
        if minimum is not None and maximum is not None and minimum > maximum:
            raise SchemaConstructionError(
                f"Contradictory document: minimum {minimum} > maximum {maximum}",
                pointer=pointer,
            )
        schema = NumberSchema()
        if integer:
            schema = schema.int()
        if minimum is not None:
            schema = schema.min(minimum)
        if maximum is not None:
            schema = schema.max(maximum)
        return schema

    def _load_object(self, doc: Mapping, pointer: str) -> Schema:
        properties = doc.get("properties")
        required = list(doc.get("required", []))
        additional = doc.get("additionalProperties")

        if properties is None and isinstance(additional, Mapping):
            if required:
                raise SchemaConstructionError(
                    "Contradictory document: 'required' names keys of a record schema",
                    pointer=_child(pointer, "required"),
                )
            value = self.load(additional, _child(pointer, "additionalProperties"))
            key = None
            if "propertyNames" in doc:
                key = self.load(doc["propertyNames"], _child(pointer, "propertyNames"))
            return RecordSchema(value, key=key)

        if "propertyNames" in doc:
            raise SchemaConstructionError(
                "Unsupported keyword 'propertyNames' on an object with properties",
                pointer=_child(pointer, "propertyNames"),
            )
        if isinstance(additional, Mapping):
            raise SchemaConstructionError(
                "Unsupported 'additionalProperties' schema alongside 'properties'",
                pointer=_child(pointer, "additionalProperties"),
            )

        properties = properties or {}
        missing = [name for name in required if name not in properties]
        if missing:
            raise SchemaConstructionError(
                f"Contradictory document: required field(s) {', '.join(map(repr, missing))} "
                "not listed in 'properties'",
                pointer=_child(pointer, "required"),
            )

        required_set = set(required)
        fields = []
        for name, prop in properties.items():
            field_schema = self.load(prop, _child(pointer, "properties", name))
            if name not in required_set:
                field_schema = OptionalSchema(field_schema)
            fields.append((name, field_schema))

        if additional is False:
            unknown_keys = "strict"
        elif additional is True:
            unknown_keys = "passthrough"
        else:
            unknown_keys = "strip"
        return ObjectSchema(fields, unknown_keys=unknown_keys)

    def _load_array(self, doc: Mapping, pointer: str) -> Schema:
        if "items" not in doc:
            raise SchemaConstructionError("Array schema must have 'items'", pointer=pointer)
        items = doc["items"]
        if isinstance(items, list):
            raise SchemaConstructionError(
                "Tuple-form 'items' is not supported", pointer=_child(pointer, "items")
            )
        return ArraySchema(self.load(items, _child(pointer, "items")))


def from_json_schema(doc: Mapping[str, Any], *, check: Optional[bool] = None) -> Schema:
    """Build a schema from a JSON Schema document.

    Args:
        doc: JSON Schema document (Draft-07 subset)
        check: Validate ``doc`` against the Draft-07 meta-schema first;
            defaults to the ``json_schema.check_documents`` setting

    Returns:
        A new schema tree

    Raises:
        SchemaConstructionError: If the document is invalid, uses an
            unsupported construct, or contradicts itself.

    Example:
        >>> schema = from_json_schema({
        ...     "type": "object",
        ...     "properties": {"name": {"type": "string"}},
        ...     "required": ["name"],
        ... })
        >>> schema.parse({"name": "John"})
        {'name': 'John'}
    """
    if check is None:
        check = json_schema_settings()["check_documents"]
    if check:
        check_document(doc)
    schema = _Loader().load(doc, "")
    logger.debug("Loaded %s from JSON Schema", type(schema).__name__)
    return schema


__all__ = [
    "from_json_schema",
    "check_document",
    "ANNOTATION_KEYWORDS",
    "SUPPORTED_FORMATS",
    "KEYWORDS_BY_TYPE",
]
