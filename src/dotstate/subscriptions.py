"""Subscriptions — path-pattern callbacks and change dispatch.

A subscription watching path s fires for a change at path p when:
- no p was given (manual/global trigger), or s is empty
- s is p or an ancestor of p
- s is one of the leaf paths the change's patch touched

Callbacks run synchronously, in registration order, and receive
(value_at_s, s, options).
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Iterable

from dotstate._merge import is_plain_object
from dotstate._paths import flatten, is_prefix, resolve

logger = logging.getLogger("dotstate.subscriptions")

Callback = Callable[[Any, str, dict], None]

# itertools.count is thread-safe (C-level GIL atomic)
_id_counter = itertools.count(1)


def new_id() -> int:
    return next(_id_counter)


class Subscription:
    """One (path, callback) pair. Entries created by one subscribe() share an id."""

    __slots__ = ("id", "path", "callback", "active")

    def __init__(self, id: int, path: str, callback: Callback) -> None:
        self.id = id
        self.path = path or ""
        self.callback = callback
        self.active = True

    def matches(self, path: str | None, touched: Iterable[str]) -> bool:
        if not path or not self.path:
            return True
        return is_prefix(self.path, path) or self.path in touched

    def __repr__(self) -> str:
        state = "active" if self.active else "removed"
        return f"Subscription({self.id}, {self.path!r}, {state})"


class SubscriptionHandle:
    """Returned by subscribe(). unsubscribe() removes every path it registered."""

    __slots__ = ("_registry", "id", "paths")

    def __init__(self, registry: SubscriptionRegistry, id: int, paths: list[str]) -> None:
        self._registry = registry
        self.id = id
        self.paths = paths

    @property
    def active(self) -> bool:
        return self._registry.has(self.id)

    def unsubscribe(self) -> None:
        self._registry.remove(self.id)

    def __repr__(self) -> str:
        return f"SubscriptionHandle({self.id}, {self.paths!r})"


class SubscriptionRegistry:
    """Ordered subscription list with sub-path matching dispatch."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    def add(self, paths: str | list[str], callback: Callback) -> SubscriptionHandle:
        id = new_id()
        paths = list(paths) if isinstance(paths, (list, tuple)) else [paths]
        for path in paths:
            self._subscriptions.append(Subscription(id, path, callback))
        return SubscriptionHandle(self, id, paths)

    def remove(self, id: int) -> None:
        self._discard(lambda subscription: subscription.id == id)

    def remove_path(self, path: str) -> None:
        """Remove subscriptions registered at exactly path. Descendants are kept."""
        self._discard(lambda subscription: subscription.path == (path or ""))

    def has(self, id: int) -> bool:
        return any(subscription.id == id for subscription in self._subscriptions)

    def _discard(self, predicate: Callable[[Subscription], bool]) -> None:
        kept = []
        for subscription in self._subscriptions:
            if predicate(subscription):
                # A dispatch pass already iterating over a snapshot skips it.
                subscription.active = False
            else:
                kept.append(subscription)
        self._subscriptions = kept

    def dispatch(
        self,
        tree: dict,
        path: str | None = None,
        patch: Any = None,
        options: dict | None = None,
    ) -> int:
        """Invoke every subscription matching a change at path. Returns the call count."""
        touched = set(flatten(patch)) if is_plain_object(patch) else set()
        options = {} if options is None else options
        fired = 0
        for subscription in list(self._subscriptions):
            if not subscription.active or not subscription.matches(path, touched):
                continue
            subscription.callback(resolve(subscription.path, tree, None), subscription.path, options)
            fired += 1
        logger.debug("Dispatched change at %r to %d subscriptions", path, fired)
        return fired

    def __len__(self) -> int:
        return len(self._subscriptions)

    def __iter__(self):
        return iter(list(self._subscriptions))
