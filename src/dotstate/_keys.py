"""Key normalization for externally supplied JSON-like data."""

from __future__ import annotations

import re
from typing import Any

from pydantic.alias_generators import to_camel, to_snake

_SEPARATORS = re.compile(r"[\s\-]+")


def camel_key(key: str) -> str:
    """Camel-case one key: Pascal, kebab, spaced and snake forms all map to lowerCamel."""
    return to_camel(to_snake(_SEPARATORS.sub("_", key.strip())))


def normalize_keys(value: Any) -> Any:
    """Recursively rewrite string dict keys to lowerCamelCase.

    Descends through dicts and lists; everything else is returned as is.
    """
    if isinstance(value, dict):
        return {
            (camel_key(key) if isinstance(key, str) else key): normalize_keys(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [normalize_keys(item) for item in value]
    return value
