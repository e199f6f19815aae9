"""JSON Schema bridge.

``to_json_schema`` serializes a schema tree to a Draft-07 document and
``from_json_schema`` builds a schema tree from one. For any schema ``S``
built with the construction API::

    to_json_schema(from_json_schema(to_json_schema(S))) == to_json_schema(S)
"""
from __future__ import annotations

from .emit import JSONSchema, emits, to_json_schema
from .load import check_document, from_json_schema

__all__ = [
    "JSONSchema",
    "to_json_schema",
    "from_json_schema",
    "check_document",
    "emits",
]
