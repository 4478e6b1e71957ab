"""Textual bridge for State subscriptions. Opt-in — requires textual.

Widget callbacks only run while the app is running and not paused, always
on the thread that subscribed them, and a widget that is not mounted
(NoMatches) is skipped rather than reported.
"""

import logging
import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

logger = logging.getLogger("dotstate.textual")

# id(app) for every app inside a pause() block.
_paused: set[int] = set()


@contextmanager
def pause(app):
    """Hold back widget callbacks while the app swaps widgets."""
    _paused.add(id(app))
    try:
        yield
    finally:
        _paused.discard(id(app))


def is_safe(app) -> bool:
    return app.is_running and id(app) not in _paused


class WidgetCallback:
    """Subscription callback that only reaches widgets when the app can take it."""

    __slots__ = ("app", "callback", "thread_id")

    def __init__(self, app, callback) -> None:
        self.app = app
        self.callback = callback
        self.thread_id = threading.get_ident()

    def __call__(self, value, path, options) -> None:
        if not is_safe(self.app):
            logger.debug("Holding back %r update, app not ready", path)
            return
        if threading.get_ident() == self.thread_id:
            self._deliver(value, path, options)
        else:
            self.app.call_from_thread(self._deliver, value, path, options)

    def _deliver(self, value, path, options) -> None:
        try:
            self.callback(value, path, options)
        except NoMatches:
            logger.debug("No widget mounted for %r update", path)


def subscribe(app, state, paths, callback):
    """state.subscribe() with callback wrapped in a WidgetCallback for app."""
    return state.subscribe(paths, WidgetCallback(app, callback))
