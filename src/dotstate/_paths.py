"""Path codec — dot-separated paths into nested dict structures.

A path such as ``"a.b.c"`` addresses ``tree["a"]["b"]["c"]``. The empty
string (or None) addresses the whole tree.
"""

from __future__ import annotations

from typing import Any

from dotstate._merge import is_plain_object

# Marks "nothing stored here" — distinct from a stored None.
MISSING = object()


def split_path(path: str | None) -> list[str]:
    return path.split(".") if path else []


def encode_patch(path: str | None, value: Any) -> Any:
    """Wrap value in a single-branch structure addressed by path.

    encode_patch("a.b", 1) == {"a": {"b": 1}}; the empty path returns value itself.
    """
    patch = value
    for segment in reversed(split_path(path)):
        patch = {segment: patch}
    return patch


def resolve(path: str | None, tree: Any, default: Any = MISSING) -> Any:
    """Walk tree one segment at a time. Returns default as soon as a segment is absent."""
    current = tree
    for segment in split_path(path):
        if not isinstance(current, dict) or segment not in current:
            return default
        current = current[segment]
    return current


def flatten(data: dict, prefix: str = "", result: dict | None = None) -> dict[str, Any]:
    """Flatten nested plain dicts to {"a.b": leaf} dot-notation keys.

    Empty nested dicts contribute no keys.
    """
    if result is None:
        result = {}
    for key, value in data.items():
        flat_key = f"{prefix}{key}"
        if is_plain_object(value):
            flatten(value, f"{flat_key}.", result)
        else:
            result[flat_key] = value
    return result


def is_prefix(prefix: str | None, path: str | None) -> bool:
    """True if prefix's segments are an initial run of path's segments.

    The empty prefix matches every path.
    """
    head = split_path(prefix)
    return split_path(path)[: len(head)] == head
