"""Coercion constructors: ``schemakit.coerce.number()`` and friends."""
from __future__ import annotations

from schemakit.core.coerce import coerce_boolean as boolean
from schemakit.core.coerce import coerce_date as date
from schemakit.core.coerce import coerce_number as number
from schemakit.core.coerce import coerce_string as string

__all__ = ["string", "number", "boolean", "date"]
