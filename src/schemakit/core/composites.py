"""Object, array and record schemas.

Composites validate every child and collect all child issues, each with
the child's key or index prepended, instead of stopping at the first bad
child. A submitted payload therefore reports every problem in one pass.
"""
from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .base import Schema, ensure_schema
from .exceptions import SchemaDefinitionError
from .issues import Issue, IssueCode, PathSegment, invalid_type
from .kinds import UNDEFINED, is_sequence, kind_of
from .modifiers import OptionalSchema
from .result import Failure, Result, Success

UNKNOWN_KEY_MODES = ("strip", "passthrough", "strict")

ShapeLike = Union[Mapping[str, Schema], Iterable[Tuple[str, Schema]]]


def _normalize_shape(fields: ShapeLike) -> Dict[str, Schema]:
    items = fields.items() if isinstance(fields, Mapping) else fields
    shape: Dict[str, Schema] = {}
    for entry in items:
        try:
            name, schema = entry
        except (TypeError, ValueError) as exc:
            raise SchemaDefinitionError(
                f"object fields must be (name, schema) pairs, got {entry!r}"
            ) from exc
        if not isinstance(name, str):
            raise SchemaDefinitionError(f"object field names must be strings, got {name!r}")
        if name in shape:
            raise SchemaDefinitionError(
                f"object field {name!r} is defined twice", context={"field": name}
            )
        shape[name] = ensure_schema(schema, f"object field {name!r}")
    return shape


def _key_segment(key: Any) -> PathSegment:
    if isinstance(key, str) or (isinstance(key, int) and not isinstance(key, bool)):
        return key
    return str(key)


class ObjectSchema(Schema):
    """Validate a mapping field by field.

    Unknown keys are handled per ``unknown_keys``:
    - ``"strip"`` (default): ignored and left out of the output
    - ``"passthrough"``: copied to the output without validation
    - ``"strict"``: each one is reported as an ``unrecognized_keys`` issue
    """

    def __init__(
        self,
        fields: ShapeLike,
        *,
        unknown_keys: str = "strip",
        description: Optional[str] = None,
    ) -> None:
        super().__init__(description=description)
        if unknown_keys not in UNKNOWN_KEY_MODES:
            raise SchemaDefinitionError(
                f"unknown_keys must be one of {', '.join(UNKNOWN_KEY_MODES)}, got {unknown_keys!r}"
            )
        self._shape = _normalize_shape(fields)
        self._unknown_keys = unknown_keys

    @property
    def shape(self) -> Mapping[str, Schema]:
        return MappingProxyType(self._shape)

    @property
    def unknown_keys(self) -> str:
        return self._unknown_keys

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._shape)

    def validate(self, value: Any) -> Result:
        if not isinstance(value, Mapping):
            return Failure((invalid_type("object", kind_of(value)),))

        issues: List[Issue] = []
        output: Dict[str, Any] = {}
        for name, field_schema in self._shape.items():
            raw = value[name] if name in value else UNDEFINED
            result = field_schema.validate(raw)
            if isinstance(result, Failure):
                issues.extend(issue.with_prefix(name) for issue in result.issues)
            elif result.value is not UNDEFINED:
                output[name] = result.value

        if self._unknown_keys != "strip":
            for key in value:
                if key in self._shape:
                    continue
                if self._unknown_keys == "passthrough":
                    output[key] = value[key]
                else:
                    issue = Issue.create(
                        IssueCode.UNRECOGNIZED_KEYS, "unrecognized_keys", key=key
                    )
                    issues.append(issue.with_prefix(_key_segment(key)))

        if issues:
            return Failure(tuple(issues))
        return Success(output)

    def _with_shape(self, shape: Dict[str, Schema]) -> "ObjectSchema":
        return self._replace(_shape=shape)

    def _check_keys(self, keys: Iterable[str]) -> List[str]:
        if isinstance(keys, str):
            raise SchemaDefinitionError("expected a list of field names, got a string")
        keys = list(keys)
        missing = [k for k in keys if k not in self._shape]
        if missing:
            raise SchemaDefinitionError(
                f"unknown object field(s): {', '.join(map(repr, missing))}",
                context={"fields": missing},
            )
        return keys

    def pick(self, keys: Iterable[str]) -> "ObjectSchema":
        """Keep only ``keys`` (in declaration order)."""
        wanted = set(self._check_keys(keys))
        return self._with_shape({k: v for k, v in self._shape.items() if k in wanted})

    def omit(self, keys: Iterable[str]) -> "ObjectSchema":
        """Drop ``keys``."""
        dropped = set(self._check_keys(keys))
        return self._with_shape({k: v for k, v in self._shape.items() if k not in dropped})

    def partial(self) -> "ObjectSchema":
        """Make every field optional."""
        return self._with_shape(
            {
                k: v if isinstance(v, OptionalSchema) else OptionalSchema(v)
                for k, v in self._shape.items()
            }
        )

    def extend(self, fields: ShapeLike) -> "ObjectSchema":
        """Add fields; a field that already exists is replaced in place."""
        shape = dict(self._shape)
        shape.update(_normalize_shape(fields))
        return self._with_shape(shape)

    def strict(self) -> "ObjectSchema":
        return self._replace(_unknown_keys="strict")

    def passthrough(self) -> "ObjectSchema":
        return self._replace(_unknown_keys="passthrough")

    def strip(self) -> "ObjectSchema":
        return self._replace(_unknown_keys="strip")

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self._shape.items())
        return f"ObjectSchema({fields})"


class ArraySchema(Schema):
    """Validate every element of a list or tuple; output is a new list."""

    def __init__(self, element: Schema, *, description: Optional[str] = None) -> None:
        super().__init__(description=description)
        self._element = ensure_schema(element, "array element schema")

    @property
    def element(self) -> Schema:
        return self._element

    def validate(self, value: Any) -> Result:
        if not is_sequence(value):
            return Failure((invalid_type("array", kind_of(value)),))
        issues: List[Issue] = []
        output: List[Any] = []
        for index, item in enumerate(value):
            result = self._element.validate(item)
            if isinstance(result, Failure):
                issues.extend(issue.with_prefix(index) for issue in result.issues)
            else:
                output.append(result.value)
        if issues:
            return Failure(tuple(issues))
        return Success(output)

    def __repr__(self) -> str:
        return f"ArraySchema({self._element!r})"


class RecordSchema(Schema):
    """Validate every value of a string-keyed mapping against one schema.

    Keys must be strings; when a key schema is given, keys are validated
    (and possibly converted) by it as well.
    """

    def __init__(
        self,
        value: Schema,
        *,
        key: Optional[Schema] = None,
        description: Optional[str] = None,
    ) -> None:
        super().__init__(description=description)
        self._value = ensure_schema(value, "record value schema")
        self._key = ensure_schema(key, "record key schema") if key is not None else None

    @property
    def value_schema(self) -> Schema:
        return self._value

    @property
    def key_schema(self) -> Optional[Schema]:
        return self._key

    def validate(self, value: Any) -> Result:
        if not isinstance(value, Mapping):
            return Failure((invalid_type("object", kind_of(value)),))
        issues: List[Issue] = []
        output: Dict[Any, Any] = {}
        for key, item in value.items():
            segment = _key_segment(key)
            if not isinstance(key, str):
                issues.append(invalid_type("string", kind_of(key)).with_prefix(segment))
                continue
            out_key: Any = key
            if self._key is not None:
                key_result = self._key.validate(key)
                if isinstance(key_result, Failure):
                    issues.extend(issue.with_prefix(segment) for issue in key_result.issues)
                    continue
                out_key = key_result.value
            result = self._value.validate(item)
            if isinstance(result, Failure):
                issues.extend(issue.with_prefix(segment) for issue in result.issues)
            else:
                output[out_key] = result.value
        if issues:
            return Failure(tuple(issues))
        return Success(output)

    def __repr__(self) -> str:
        if self._key is not None:
            return f"RecordSchema({self._key!r}, {self._value!r})"
        return f"RecordSchema({self._value!r})"


def object_(fields: ShapeLike | None = None, **kwargs: Schema) -> ObjectSchema:
    """Create an object schema.

    Fields may be passed as a mapping, a list of ``(name, schema)`` pairs,
    or keyword arguments:

        >>> object_({"name": string(), "age": number()})
        >>> object_(name=string(), age=number())
    """
    if fields is not None and kwargs:
        raise SchemaDefinitionError("pass object fields either positionally or as keywords")
    return ObjectSchema(fields if fields is not None else kwargs)


def array(element: Schema) -> ArraySchema:
    return ArraySchema(element)


def record(key_or_value: Schema, value: Optional[Schema] = None) -> RecordSchema:
    """``record(value_schema)`` or ``record(key_schema, value_schema)``."""
    if value is None:
        return RecordSchema(key_or_value)
    return RecordSchema(value, key=key_or_value)


__all__ = [
    "ObjectSchema",
    "ArraySchema",
    "RecordSchema",
    "UNKNOWN_KEY_MODES",
    "object_",
    "array",
    "record",
]
