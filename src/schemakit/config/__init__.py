"""schemakit settings: bundled YAML defaults, overrides and message templates."""
from __future__ import annotations

from .messages import display_value, message_template, render_message
from .settings import (
    ENV_PREFIX,
    clear_settings_cache,
    coerce_settings,
    configure,
    get_settings,
    json_schema_settings,
    messages_settings,
    reset,
    validate_settings,
)

__all__ = [
    "ENV_PREFIX",
    "get_settings",
    "clear_settings_cache",
    "configure",
    "reset",
    "validate_settings",
    "json_schema_settings",
    "coerce_settings",
    "messages_settings",
    "display_value",
    "message_template",
    "render_message",
]
