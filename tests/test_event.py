"""Tests for Event — named pub/sub over Handlers."""

import logging

from deferx import Event, Handlers, get_context


class TestOnTrigger:
    def test_trigger_passes_args(self):
        bus = Event()
        log = []
        bus.on("save", lambda *a: log.append(a))
        bus.trigger("save", "doc.txt", 3)
        assert log == [("doc.txt", 3)]

    def test_repeatable(self):
        bus = Event()
        log = []
        bus.on("tick", log.append)
        bus.trigger("tick", 1)
        bus.trigger("tick", 2)
        assert log == [1, 2]

    def test_multiple_names(self):
        bus = Event()
        log = []
        bus.on("open  close", log.append)
        bus.trigger("open", "o")
        bus.trigger("close", "c")
        assert log == ["o", "c"]

    def test_trigger_multiple_names_in_order(self):
        bus = Event()
        log = []
        bus.on("a", lambda: log.append("a"))
        bus.on("b", lambda: log.append("b"))
        bus.trigger("b a")
        assert log == ["b", "a"]

    def test_mapping_form(self):
        bus = Event()
        log = []
        bus.on({"a": lambda v: log.append(("a", v)), "b": lambda v: log.append(("b", v))})
        bus.trigger("a b", 1)
        assert log == [("a", 1), ("b", 1)]

    def test_unknown_event_ignored(self):
        bus = Event()
        bus.trigger("nothing", 1)
        assert bus.handlers("nothing") is None

    def test_no_memory(self):
        bus = Event()
        log = []
        bus.trigger("late", 1)
        bus.on("late", log.append)
        bus.trigger("late", 1)
        assert log == [1]

    def test_context_is_event_list(self):
        bus = Event()
        seen = []
        bus.on("x", lambda: seen.append(get_context()))
        bus.trigger("x")
        assert seen == [bus.handlers("x")]
        assert isinstance(seen[0], Handlers)


class TestOff:
    def test_off_removes_callback(self):
        bus = Event()
        log = []

        def keep(v):
            log.append(("keep", v))

        def drop(v):
            log.append(("drop", v))

        bus.on("e", keep, drop)
        bus.off("e", drop)
        bus.trigger("e", 1)
        assert log == [("keep", 1)]

    def test_off_mapping_form(self):
        bus = Event()
        log = []
        bus.on({"e": log.append})
        bus.off({"e": log.append})
        bus.trigger("e", 1)
        assert log == []

    def test_off_unknown_ignored(self):
        bus = Event()
        assert bus.off("missing", print) is bus

    def test_off_during_trigger(self):
        bus = Event()
        log = []

        def second():
            log.append("second")

        def first():
            log.append("first")
            bus.off("e", second)

        bus.on("e", first, second)
        bus.trigger("e")
        bus.trigger("e")
        assert log == ["first", "first"]

    def test_trigger_from_handler_is_queued(self):
        bus = Event()
        log = []

        def first(v):
            log.append(("first", v))
            if v == 1:
                bus.trigger("e", 2)

        bus.on("e", first, lambda v: log.append(("second", v)))
        bus.trigger("e", 1)
        assert log == [("first", 1), ("second", 1), ("first", 2), ("second", 2)]


class TestMixin:
    def test_host_gets_on_off_trigger(self):
        class Widget:
            pass

        w = Event.mixin(Widget())
        log = []
        assert w.on("click", log.append) is w
        assert w.trigger("click", "x") is w
        assert w.off("click", log.append) is w
        w.trigger("click", "y")
        assert log == ["x"]
        assert isinstance(w.events, Event)

    def test_chaining_plain(self):
        bus = Event()
        assert bus.on("a", print) is bus
        assert bus.trigger("nothing") is bus


class TestLogging:
    def test_lazy_creation_logged(self, caplog):
        bus = Event()
        with caplog.at_level(logging.DEBUG, logger="deferx.event"):
            bus.on("ready", print)
        assert "Created handlers for 'ready'" in caplog.text

    def test_repr(self):
        bus = Event()
        bus.on("b a", print)
        assert repr(bus) == "Event(['a', 'b'])"
