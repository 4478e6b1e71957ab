"""State — the path-addressed observable state container.

Usage:
    state = State({"form": {"name": "", "age": 0}})
    state.set_options("form.age", type="integer")

    handle = state.subscribe("form", lambda value, path, options: print(path, value))
    state.set("form.age", "42")   # prints: form {'name': '', 'age': 42}
    state.get("form.age")         # 42
    handle.unsubscribe()

Everything runs synchronously. Subscriber callbacks execute inside the
set() call that triggered them, and may call back into the same State;
there is no reentrancy guard.

Values returned by get() are the stored objects, not copies. Mutating a
returned dict in place changes the tree without notifying anyone.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable

from dotstate._merge import is_plain_object, merge, same_value
from dotstate._paths import MISSING, encode_patch, flatten, resolve
from dotstate.options import Options, OptionsRegistry
from dotstate.subscriptions import SubscriptionHandle, SubscriptionRegistry
from dotstate.transform import transform_value

logger = logging.getLogger("dotstate.state")


class State:
    """Nested key/value tree addressed by dot-paths, with per-path options and subscriptions."""

    def __init__(self, defaults: dict | None = None) -> None:
        self._data: dict = {}
        self._options = OptionsRegistry()
        self._subscriptions = SubscriptionRegistry()
        self._set_defaults(defaults or {})

    def get(self, path: str | None = None) -> Any:
        """Value at path, the whole tree for an empty path, None if absent."""
        return resolve(path, self._data, None)

    def set(self, path: str | dict, value: Any = MISSING, **options: Any) -> Any:
        """Write value at path and notify matching subscribers.

        Recognised options:
            default_value: register this default for path before writing.
            is_function: call a callable value as value(old_value, default_value)
                and store its result.
            notify: False writes without dispatching.
        All options are forwarded to subscriber callbacks unchanged.

        set(mapping, **options) writes each key in turn and notifies once.

        Returns {"name": path, "value": stored_value}, or a list of those for
        the mapping form. A root write (empty path) of anything but a dict
        stores nothing, notifies no one, and reports the unchanged tree.
        """
        if isinstance(path, dict):
            return self._set_multiple(path, options)
        if value is MISSING:
            raise TypeError("set() requires a value when called with a path")

        if "default_value" in options:
            self.set_options(path, default_value=options["default_value"])

        record = self._options.resolve(path)
        old_value = resolve(path, self._data, None)

        if options.get("is_function") and callable(value):
            value = value(old_value, self.get_default_value(path))

        value = transform_value(value, old_value, record)

        if record.same_reference_check:
            current = resolve(path, self._data)
            if same_value(current, value):
                logger.debug("Skipping unchanged write at %r", path)
                return {"name": path, "value": value}

        patch = self._write(path, value)
        if patch is None:
            return {"name": path, "value": self._data}

        if options.get("notify", True):
            self._subscriptions.dispatch(self._data, path, patch, options)

        return {"name": path, "value": value}

    def set_options(self, path: str, options: Options | None = None, **fields: Any) -> None:
        """Register the options record for path, replacing any record already there.

        Accepts an Options instance, keyword fields, or both (fields override).
        A default_value is written into the tree right away if path holds nothing yet.
        """
        record = replace(options, **fields) if options is not None else Options(**fields)
        self._options.set(path, record)

        if record.has_default and resolve(path, self._data) is MISSING:
            self._write(path, record.default_value)

    def get_options(self, path: str) -> Options:
        return self._options.resolve(path)

    def get_default_value(self, path: str) -> Any:
        record = self._options.resolve(path)
        return record.default_value if record.has_default else None

    def subscribe(
        self, paths: str | list[str], callback: Callable[[Any, str, dict], None]
    ) -> SubscriptionHandle:
        """Call callback(value, path, options) whenever paths (or anything below them) change.

        The empty path subscribes to every change.
        """
        return self._subscriptions.add(paths, callback)

    def unsubscribe_all(self, path: str) -> None:
        """Drop every subscription registered at exactly path."""
        self._subscriptions.remove_path(path)

    def trigger_subscription_callbacks(self, path: str | None = None, **options: Any) -> None:
        """Fire subscribers as if path had changed; every subscriber when path is None."""
        self._subscriptions.dispatch(self._data, path, None, options)

    def _write(self, path: str, value: Any) -> Any:
        """Merge value into the tree at path. Returns the patch, or None if nothing was written."""
        patch = encode_patch(path, value)
        if not path and not is_plain_object(patch):
            logger.warning("Ignoring root write of non-dict value %r", value)
            return None
        merge(self._data, patch)
        return patch

    def _set_multiple(self, values: dict, options: dict) -> list[dict]:
        inner = {**options, "notify": False}
        results = [self.set(name, value, **inner) for name, value in values.items()]

        if options.get("notify", True):
            self._subscriptions.dispatch(self._data, options=options)

        return results

    def _set_defaults(self, defaults: dict) -> None:
        for path, value in flatten(defaults).items():
            self.set_options(path, default_value=value)

    def __repr__(self) -> str:
        return f"State({self._data!r})"
