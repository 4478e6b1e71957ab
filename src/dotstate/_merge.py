"""Deep merge of nested plain dicts."""

from __future__ import annotations

from typing import Any


def is_plain_object(value: Any) -> bool:
    """A plain mapping: a dict, not a list, None, or some richer object."""
    return isinstance(value, dict)


def merge(target: dict, source: Any) -> dict:
    """Recursively merge source into target in place and return target.

    Plain-dict values descend (a fresh branch is created in target when it has
    no dict at that key); every other value overwrites. A source that is not a
    plain dict leaves target untouched.
    """
    if not (is_plain_object(target) and is_plain_object(source)):
        return target
    for key, value in source.items():
        if is_plain_object(value):
            if not is_plain_object(target.get(key)):
                target[key] = {}
            merge(target[key], value)
        else:
            target[key] = value
    return target



def same_value(a: Any, b: Any) -> bool:
    """Strict equality: True and 1 differ, 1 and 1.0 do not."""
    if a is b:
        return True
    if isinstance(a, bool) or isinstance(b, bool):
        return False
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    return type(a) is type(b) and a == b
