"""Settings loading for schemakit.

Settings sources (highest to lowest priority):
1. Environment variables: SCHEMAKIT_<section>__<key>
2. Programmatic overrides registered with ``configure()``
3. Bundled defaults: schemakit.data/config/defaults.yaml

The merged result is validated against the bundled
``schemas/config.schema.yaml`` and cached until ``clear_settings_cache()``.
"""
from __future__ import annotations

import copy
import json
import logging
import os
import re
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import jsonschema
import yaml

from schemakit.core.exceptions import ConfigError
from schemakit.data import read_yaml
from schemakit.utils.merge import deep_merge

logger = logging.getLogger(__name__)

ENV_PREFIX = "SCHEMAKIT_"

_overrides: Dict[str, Any] = {}


def _as_bool(v: str) -> Optional[bool]:
    low = v.strip().lower()
    if low in {"true", "false"}:
        return low == "true"
    return None


def _as_int(v: str) -> Optional[int]:
    if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
        return int(v)
    return None


def _as_float(v: str) -> Optional[float]:
    s = v.strip()
    if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
        return float(s)
    return None


def _as_json(v: str) -> Optional[Any]:
    s = v.strip()
    if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
        try:
            return json.loads(s)
        except json.JSONDecodeError:
            return None
    return None


def coerce_env_value(value: str) -> Any:
    """Type an environment string as bool, int, float, JSON or plain text."""
    for caster in (_as_bool, _as_int, _as_float, _as_json):
        result = caster(value)
        if result is not None:
            return result
    return value.strip()


def _parse_env_key(raw: str) -> List[str]:
    segs = raw.split("__")
    if any(seg == "" for seg in segs):
        return []
    return [seg.lower() for seg in segs]


def iter_env_overrides(environ: Mapping[str, str] | None = None) -> Iterator[Tuple[List[str], Any]]:
    """Yield ``(path, typed_value)`` for every SCHEMAKIT_* variable."""
    env = os.environ if environ is None else environ
    for key in sorted(env.keys()):
        if not key.startswith(ENV_PREFIX):
            continue
        path = _parse_env_key(key[len(ENV_PREFIX) :])
        if len(path) < 2:
            logger.warning("Ignoring malformed settings override %s (expected %s<section>__<key>)", key, ENV_PREFIX)
            continue
        yield path, coerce_env_value(env[key])


def _set_nested(root: Dict[str, Any], path: List[str], value: Any) -> None:
    cur = root
    for part in path[:-1]:
        nxt = cur.get(part)
        if not isinstance(nxt, dict):
            nxt = {}
            cur[part] = nxt
        cur = nxt
    cur[path[-1]] = value


def apply_env_overrides(cfg: Dict[str, Any], environ: Mapping[str, str] | None = None) -> None:
    for path, typed_value in iter_env_overrides(environ):
        logger.debug("Settings override from environment: %s = %r", ".".join(path), typed_value)
        _set_nested(cfg, path, typed_value)


def validate_settings(cfg: Mapping[str, Any]) -> None:
    """Validate merged settings against the bundled settings schema.

    Raises:
        ConfigError: If any part of the settings is invalid.
    """
    schema = read_yaml("schemas", "config.schema.yaml")
    validator = jsonschema.Draft7Validator(schema)
    errors: List[str] = []
    for error in sorted(validator.iter_errors(cfg), key=lambda e: [str(p) for p in e.path]):
        if error.path:
            path_str = ".".join(str(p) for p in error.path)
            errors.append(f"{path_str}: {error.message}")
        else:
            errors.append(error.message)
    if errors:
        raise ConfigError(
            "Invalid schemakit settings:\n" + "\n".join(f"- {e}" for e in errors),
            errors=errors,
        )


def _load_defaults() -> Dict[str, Any]:
    try:
        return copy.deepcopy(read_yaml("config", "defaults.yaml"))
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot load bundled defaults: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Dict[str, Any]:
    """Return the merged, validated settings (cached).

    The returned dictionary is shared; treat it as read-only.
    """
    cfg = deep_merge(_load_defaults(), _overrides)
    apply_env_overrides(cfg)
    validate_settings(cfg)
    return cfg


def clear_settings_cache() -> None:
    """Drop cached settings so the next access reloads them."""
    get_settings.cache_clear()


def configure(overrides: Mapping[str, Any]) -> None:
    """Layer programmatic overrides on top of the bundled defaults.

    Intended for application start-up, before schemas are used from
    several threads. The overrides are validated immediately.

    Example:
        >>> configure({"json_schema": {"include_dialect": True}})
    """
    global _overrides
    candidate = deep_merge(_overrides, overrides)
    merged = deep_merge(_load_defaults(), candidate)
    validate_settings(merged)
    _overrides = candidate
    clear_settings_cache()


def reset() -> None:
    """Forget every ``configure()`` override."""
    global _overrides
    _overrides = {}
    clear_settings_cache()


def json_schema_settings() -> Dict[str, Any]:
    return get_settings()["json_schema"]


def _section_or_defaults(name: str) -> Dict[str, Any]:
    try:
        return get_settings()[name]
    except ConfigError as exc:
        logger.warning("Invalid settings, using bundled %s defaults: %s", name, exc)
        return _load_defaults()[name]


def messages_settings() -> Dict[str, Any]:
    """Message templates; the bundled ones stand in while the settings are invalid."""
    return _section_or_defaults("messages")


def coerce_settings() -> Dict[str, Any]:
    return _section_or_defaults("coerce")


__all__ = [
    "ENV_PREFIX",
    "get_settings",
    "clear_settings_cache",
    "configure",
    "reset",
    "validate_settings",
    "apply_env_overrides",
    "iter_env_overrides",
    "coerce_env_value",
    "json_schema_settings",
    "coerce_settings",
    "messages_settings",
]
