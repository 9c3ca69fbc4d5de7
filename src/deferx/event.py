"""Named pub/sub on top of Handlers.

Each event name owns a repeatable, memory-less Handlers list, created the
first time something subscribes to it. Names are given as one
whitespace-separated string ("save close") or, for on()/off(), as a mapping
of name to callback.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TypeVar

from deferx._helpers import attach, each
from deferx.handlers import Handlers

logger = logging.getLogger("deferx.event")

H = TypeVar("H")


class Event:
    """Named event dispatcher.

    Usage:
        bus = Event()
        bus.on("save close", lambda name: print("saw", name))
        bus.trigger("save", "doc.txt")    # saw doc.txt
        bus.on({"open": print})
        bus.trigger("open close", "x")    # x, then saw x
    """

    __slots__ = ("_handlers", "_owner")

    def __init__(self) -> None:
        self._handlers: dict[str, Handlers] = {}
        self._owner: object = self

    @classmethod
    def mixin(cls, target: H) -> H:
        """Decorate target with on/off/trigger and return target."""
        event = cls()
        event._owner = target
        return attach(
            target,
            {"on": event.on, "off": event.off, "trigger": event.trigger, "events": event},
        )

    def _pairs(self, events, callbacks: tuple):
        if isinstance(events, Mapping):
            for name, callback in each(events):
                yield name, (callback,)
        else:
            for name in events.split():
                yield name, callbacks

    def on(self, events, *callbacks):
        """Subscribe callbacks to one or more event names."""
        for name, items in self._pairs(events, callbacks):
            handlers = self._handlers.get(name)
            if handlers is None:
                handlers = self._handlers[name] = Handlers()
                logger.debug("Created handlers for %r", name)
            handlers.add(*items)
        return self._owner

    def off(self, events, *callbacks):
        """Unsubscribe callbacks. Unknown names are ignored."""
        for name, items in self._pairs(events, callbacks):
            handlers = self._handlers.get(name)
            if handlers is not None:
                handlers.remove(*items)
        return self._owner

    def trigger(self, events: str, *args):
        """Fire each named event with args. The context is that event's list."""
        for name in events.split():
            handlers = self._handlers.get(name)
            if handlers is not None:
                handlers.fire_with(handlers, args)
        return self._owner

    def handlers(self, name: str) -> Handlers | None:
        """The list behind an event name, if anything ever subscribed to it."""
        return self._handlers.get(name)

    def __repr__(self) -> str:
        return f"Event({sorted(self._handlers)!r})"
