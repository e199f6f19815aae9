"""
schemakit - declarative schema validation

Describe the shape of data once, then validate, coerce and introspect
runtime values against it, and translate schemas to and from JSON Schema.

Example:
    >>> from schemakit import s
    >>> User = s.object({
    ...     "name": s.string().min(1),
    ...     "age": s.coerce.number(),
    ...     "role": s.enum(["admin", "user"]),
    ... })
    >>> User.parse({"name": "Ada", "age": "36", "role": "admin"})
    {'name': 'Ada', 'age': 36, 'role': 'admin'}
"""
from __future__ import annotations

from types import SimpleNamespace

from . import coerce
from .core.base import Schema
from .core.choices import EnumSchema, LiteralSchema, UnionSchema, enum_, literal, union
from .core.coerce import (
    CoerceBooleanSchema,
    CoerceDateSchema,
    CoerceNumberSchema,
    CoerceStringSchema,
)
from .core.composites import ArraySchema, ObjectSchema, RecordSchema, array, object_, record
from .core.exceptions import (
    ConfigError,
    SchemaConstructionError,
    SchemaDefinitionError,
    SchemakitError,
    ValidationError,
)
from .core.issues import Issue, IssueCode
from .core.kinds import UNDEFINED
from .core.modifiers import NullableSchema, OptionalSchema, nullable, optional
from .core.primitives import (
    AnySchema,
    BooleanSchema,
    NullSchema,
    NumberSchema,
    StringSchema,
    UndefinedSchema,
    UnknownSchema,
    any_,
    boolean,
    null_,
    number,
    string,
    undefined_,
    unknown,
)
from .core.result import (
    Failure,
    Result,
    SafeParseFailure,
    SafeParseResult,
    SafeParseSuccess,
    Success,
)
from .json_schema import from_json_schema, to_json_schema

__version__ = "0.4.0"

# Builder namespace mirroring the construction API: s.string(), s.enum([...]),
# s.coerce.number(), ...
s = SimpleNamespace(
    string=string,
    number=number,
    boolean=boolean,
    null=null_,
    undefined=undefined_,
    unknown=unknown,
    any=any_,
    object=object_,
    array=array,
    record=record,
    literal=literal,
    enum=enum_,
    union=union,
    optional=optional,
    nullable=nullable,
    coerce=SimpleNamespace(
        string=coerce.string,
        number=coerce.number,
        boolean=coerce.boolean,
        date=coerce.date,
    ),
    to_json_schema=to_json_schema,
    from_json_schema=from_json_schema,
)

__all__ = [
    "__version__",
    "s",
    "coerce",
    "UNDEFINED",
    # construction
    "string",
    "number",
    "boolean",
    "null_",
    "undefined_",
    "unknown",
    "any_",
    "object_",
    "array",
    "record",
    "literal",
    "enum_",
    "union",
    "optional",
    "nullable",
    # nodes
    "Schema",
    "StringSchema",
    "NumberSchema",
    "BooleanSchema",
    "NullSchema",
    "UndefinedSchema",
    "UnknownSchema",
    "AnySchema",
    "ObjectSchema",
    "ArraySchema",
    "RecordSchema",
    "UnionSchema",
    "LiteralSchema",
    "EnumSchema",
    "OptionalSchema",
    "NullableSchema",
    "CoerceStringSchema",
    "CoerceNumberSchema",
    "CoerceBooleanSchema",
    "CoerceDateSchema",
    # results and errors
    "Issue",
    "IssueCode",
    "Success",
    "Failure",
    "Result",
    "SafeParseSuccess",
    "SafeParseFailure",
    "SafeParseResult",
    "SchemakitError",
    "ValidationError",
    "SchemaDefinitionError",
    "SchemaConstructionError",
    "ConfigError",
    # JSON Schema bridge
    "to_json_schema",
    "from_json_schema",
]
