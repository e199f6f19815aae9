"""Schema → JSON Schema (Draft-07 subset).

Emitters are registered per schema class; ``to_json_schema`` walks the
node's MRO to find the closest one, so subclasses of built-in kinds are
emitted like their base.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from schemakit.config.settings import json_schema_settings
from schemakit.core.base import Schema
from schemakit.core.choices import EnumSchema, LiteralSchema, UnionSchema
from schemakit.core.coerce import (
    CoerceBooleanSchema,
    CoerceDateSchema,
    CoerceNumberSchema,
    CoerceStringSchema,
)
from schemakit.core.composites import ArraySchema, ObjectSchema, RecordSchema
from schemakit.core.exceptions import SchemaDefinitionError
from schemakit.core.modifiers import NullableSchema, OptionalSchema
from schemakit.core.primitives import (
    AnySchema,
    BooleanSchema,
    NullSchema,
    NumberSchema,
    StringSchema,
    UndefinedSchema,
    UnknownSchema,
)
from schemakit.core.refinements import RefinableSchema

logger = logging.getLogger(__name__)

JSONSchema = Dict[str, Any]
Emitter = Callable[[Any], JSONSchema]
F = TypeVar("F", bound=Emitter)

_EMITTERS: Dict[Type[Schema], Emitter] = {}


def emits(*schema_types: Type[Schema]) -> Callable[[F], F]:
    """Register the decorated function as the emitter for ``schema_types``."""

    def register(func: F) -> F:
        for schema_type in schema_types:
            _EMITTERS[schema_type] = func
        return func

    return register


def _emitter_for(schema: Schema) -> Emitter:
    for cls in type(schema).__mro__:
        emitter = _EMITTERS.get(cls)
        if emitter is not None:
            return emitter
    raise SchemaDefinitionError(
        f"No JSON Schema emitter registered for {type(schema).__name__}",
        context={"schema_type": type(schema).__name__},
    )


def _emit(schema: Schema) -> JSONSchema:
    doc = _emitter_for(schema)(schema)
    if schema.description is not None:
        doc["description"] = schema.description
    return doc


def to_json_schema(schema: Schema, *, include_dialect: Optional[bool] = None) -> JSONSchema:
    """Convert a schema to a JSON Schema document.

    Args:
        schema: Root schema node
        include_dialect: Add ``"$schema"`` to the root; defaults to the
            ``json_schema.include_dialect`` setting

    Returns:
        A new JSON-serializable dictionary

    Example:
        >>> to_json_schema(object_({"name": string().describe("User name")}))
        {'type': 'object', 'properties': {'name': {'type': 'string', 'description': 'User name'}}, 'required': ['name']}
    """
    settings = json_schema_settings()
    doc = _emit(schema)
    if include_dialect is None:
        include_dialect = settings["include_dialect"]
    if include_dialect:
        doc = {"$schema": settings["dialect"], **doc}
    logger.debug("Emitted JSON Schema for %s", type(schema).__name__)
    return doc


def _apply_refinements(doc: JSONSchema, schema: RefinableSchema) -> JSONSchema:
    # Repeated bounds all apply, so the tightest one is emitted.
    for refinement in schema.refinements:
        params = refinement.params
        if refinement.name == "min_length":
            doc["minLength"] = max(doc.get("minLength", 0), params["minimum"])
        elif refinement.name == "max_length":
            doc["maxLength"] = min(doc.get("maxLength", params["maximum"]), params["maximum"])
        elif refinement.name == "exact_length":
            doc["minLength"] = max(doc.get("minLength", 0), params["exact"])
            doc["maxLength"] = min(doc.get("maxLength", params["exact"]), params["exact"])
        elif refinement.name == "url":
            doc["format"] = "uri"
        elif refinement.name == "regex":
            doc["pattern"] = params["pattern"]
        elif refinement.name == "min_value":
            doc["minimum"] = max(doc.get("minimum", params["minimum"]), params["minimum"])
        elif refinement.name == "max_value":
            doc["maximum"] = min(doc.get("maximum", params["maximum"]), params["maximum"])
        elif refinement.name == "integer":
            doc["type"] = "integer"
    return doc


@emits(StringSchema, CoerceStringSchema)
def _string(schema: RefinableSchema) -> JSONSchema:
    return _apply_refinements({"type": "string"}, schema)


@emits(NumberSchema, CoerceNumberSchema)
def _number(schema: RefinableSchema) -> JSONSchema:
    return _apply_refinements({"type": "number"}, schema)


@emits(BooleanSchema, CoerceBooleanSchema)
def _boolean(schema: Schema) -> JSONSchema:
    return {"type": "boolean"}


@emits(CoerceDateSchema)
def _date(schema: Schema) -> JSONSchema:
    return {"type": "string", "format": "date-time"}


@emits(NullSchema)
def _null(schema: Schema) -> JSONSchema:
    return {"type": "null"}


@emits(UndefinedSchema, UnknownSchema, AnySchema)
def _anything(schema: Schema) -> JSONSchema:
    return {}


@emits(LiteralSchema)
def _literal(schema: LiteralSchema) -> JSONSchema:
    return {"const": schema.value}


@emits(EnumSchema)
def _enum(schema: EnumSchema) -> JSONSchema:
    return {"enum": list(schema.values)}


@emits(UnionSchema)
def _union(schema: UnionSchema) -> JSONSchema:
    return {"anyOf": [_emit(option) for option in schema.options]}


@emits(OptionalSchema)
def _optional(schema: OptionalSchema) -> JSONSchema:
    # Optionality lives in the parent's "required" list.
    return _emit(schema.inner)


@emits(NullableSchema)
def _nullable(schema: NullableSchema) -> JSONSchema:
    inner = schema.inner
    description = None
    while isinstance(inner, OptionalSchema):
        if description is None:
            description = inner.description
        inner = inner.inner
    inner_doc = _emit(inner)
    # the outermost optional description wins, as in _optional
    if description is not None:
        inner_doc["description"] = description
    return {"anyOf": [inner_doc, {"type": "null"}]}


@emits(ObjectSchema)
def _object(schema: ObjectSchema) -> JSONSchema:
    properties: Dict[str, JSONSchema] = {}
    required: List[str] = []
    for name, field_schema in schema.shape.items():
        properties[name] = _emit(field_schema)
        if not field_schema.is_optional:
            required.append(name)
    doc: JSONSchema = {"type": "object", "properties": properties}
    if required:
        doc["required"] = required
    if schema.unknown_keys == "strict":
        doc["additionalProperties"] = False
    elif schema.unknown_keys == "passthrough":
        doc["additionalProperties"] = True
    return doc


@emits(ArraySchema)
def _array(schema: ArraySchema) -> JSONSchema:
    return {"type": "array", "items": _emit(schema.element)}


@emits(RecordSchema)
def _record(schema: RecordSchema) -> JSONSchema:
    doc: JSONSchema = {"type": "object", "additionalProperties": _emit(schema.value_schema)}
    key = schema.key_schema
    if key is not None:
        key_doc = _emit(key)
        if key_doc != {"type": "string"}:
            doc["propertyNames"] = key_doc
    return doc


__all__ = ["JSONSchema", "to_json_schema", "emits"]
