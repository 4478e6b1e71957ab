"""Tests for the Textual subscription bridge."""

import logging
import threading

import pytest
from textual.css.query import NoMatches

from dotstate import State
from dotstate import textual as dtx


class _FakeApp:
    """Just the App surface the bridge touches."""

    def __init__(self, is_running=True):
        self.is_running = is_running
        self.marshalled = []

    def call_from_thread(self, fn, *args):
        self.marshalled.append(args)
        fn(*args)


@pytest.fixture
def app():
    return _FakeApp()


@pytest.fixture
def form():
    return State({"form": {"name": "", "age": 0}})


class TestWidgetCallback:
    def test_delivers_on_subscribing_thread(self, app):
        seen = []
        cb = dtx.WidgetCallback(app, lambda value, path, options: seen.append((value, path)))
        cb("Ada", "form.name", {})
        assert seen == [("Ada", "form.name")]
        assert app.marshalled == []

    def test_held_back_when_app_stopped(self):
        seen = []
        cb = dtx.WidgetCallback(_FakeApp(is_running=False), lambda *args: seen.append(args))
        cb(1, "form.age", {})
        assert seen == []

    def test_unmounted_widget_is_logged_not_raised(self, app, caplog):
        def update(value, path, options):
            raise NoMatches("#age-input")

        with caplog.at_level(logging.DEBUG, logger="dotstate.textual"):
            dtx.WidgetCallback(app, update)(1, "form.age", {})
        assert "No widget mounted" in caplog.text

    def test_other_errors_propagate(self, app):
        def update(value, path, options):
            raise KeyError("age")

        with pytest.raises(KeyError):
            dtx.WidgetCallback(app, update)(1, "form.age", {})


class TestSubscribe:
    def test_form_updates_reach_widget(self, app, form):
        labels = []
        dtx.subscribe(app, form, "form", lambda value, path, options: labels.append(dict(value)))
        form.set("form.name", "Ada")
        assert labels == [{"name": "Ada", "age": 0}]

    def test_paused_app_misses_update_but_state_changes(self, app, form):
        labels = []
        dtx.subscribe(app, form, "form.age", lambda value, path, options: labels.append(value))
        with dtx.pause(app):
            form.set("form.age", 30)
        assert labels == []
        assert form.get("form.age") == 30

    def test_background_write_goes_through_call_from_thread(self, app, form):
        labels = []
        dtx.subscribe(app, form, ["form.name", "form.age"], lambda value, path, options: labels.append(path))

        worker = threading.Thread(target=form.set, args=("form.age", 41))
        worker.start()
        worker.join()

        assert labels == ["form.age"]
        assert app.marshalled == [(41, "form.age", {})]

    def test_handle_unsubscribes(self, app, form):
        labels = []
        handle = dtx.subscribe(app, form, "form.age", lambda value, path, options: labels.append(value))
        handle.unsubscribe()
        form.set("form.age", 5)
        assert labels == []


class TestPause:
    def test_restored_after_error(self, app):
        with pytest.raises(RuntimeError):
            with dtx.pause(app):
                assert not dtx.is_safe(app)
                raise RuntimeError("widget swap failed")
        assert dtx.is_safe(app)

    def test_scoped_to_one_app(self, app):
        other = _FakeApp()
        with dtx.pause(app):
            assert dtx.is_safe(other)
        assert vars(app).keys() == {"is_running", "marshalled"}
