"""Issue message templates.

Templates live under ``messages`` in the settings and use ``str.format``
placeholders. Values are rendered the way they would appear in JSON so
that messages read the same for every consumer.
"""
from __future__ import annotations

import json
import math
from typing import Any

from .settings import messages_settings


def display_value(value: Any) -> str:
    """Render a literal/enum value for a message (``"a"``, ``1``, ``true``)."""
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return repr(value)
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        pass
    try:
        return repr(value)
    except ValueError:
        # int above sys.get_int_max_str_digits()
        return type(value).__name__


def message_template(key: str, /) -> str:
    messages = messages_settings()
    try:
        return messages[key]
    except KeyError:
        return messages.get("custom", key)


def render_message(key: str, /, **params: Any) -> str:
    """Fill the template registered under ``key`` with ``params``.

    A template that cannot be filled from ``params`` (missing parameter,
    bad attribute or index lookup) is returned unformatted.
    """
    template = message_template(key)
    try:
        return template.format(**params)
    except (AttributeError, IndexError, KeyError, TypeError, ValueError):
        return template


__all__ = ["display_value", "message_template", "render_message"]
