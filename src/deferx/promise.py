"""Promise — three Handlers lists composed into a settle-once state machine.

- success list ("once memory"): fired by resolve(), registered with done()
- failure list ("once memory"): fired by reject(), registered with fail()
- progress list ("memory"): fired by notify(), registered with progress()

Settling is one-way and exclusive. The first entry of the success and
failure lists is an internal transition callback: it records the new
status, disables the opposite list and locks the progress list before any
user callback of that fire runs. Because both settled lists keep memory,
callbacks registered after settlement are called straight away with the
settled arguments.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, TypeVar

from deferx._helpers import attach
from deferx.handlers import Handlers, Policy

logger = logging.getLogger("deferx.promise")

H = TypeVar("H")

_SETTLED = Policy(once=True, memory=True)
_PROGRESS = Policy(memory=True)

# Operations attached to a host by Promise.mixin().
_CAPABILITIES = (
    "resolve",
    "reject",
    "notify",
    "done",
    "fail",
    "progress",
    "then",
    "always",
)


class State(enum.IntEnum):
    INIT = 0
    RESOLVED = 1
    REJECTED = 2


class Promise:
    """A settle-once result with success, failure and progress callbacks.

    Usage:
        p = Promise()
        p.done(lambda value: print("got", value))
        p.fail(lambda err: print("failed", err))
        p.resolve(42)         # got 42
        p.reject("late")      # no-op, already resolved
        p.done(print)         # 42, replayed
    """

    __slots__ = ("_handlers", "_status", "_owner")

    def __init__(self) -> None:
        self._handlers = (Handlers(_SETTLED), Handlers(_SETTLED), Handlers(_PROGRESS))
        self._status = State.INIT
        # Context for fires and return value for chaining; a host after mixin().
        self._owner: object = self
        self._handlers[0].add(self._transition(0, State.RESOLVED))
        self._handlers[1].add(self._transition(1, State.REJECTED))

    @classmethod
    def mixin(cls, target: H) -> H:
        """Decorate target with promise operations and return target.

        The host's methods chain back to the host, and callbacks see the
        host as their context. The underlying Promise is attached as
        target.promise.
        """
        promise = cls()
        promise._owner = target
        capabilities = {name: getattr(promise, name) for name in _CAPABILITIES}
        capabilities["promise"] = promise
        return attach(target, capabilities)

    def _transition(self, index: int, state: State) -> Callable[..., None]:
        def settle(*args) -> None:
            self._status = state
            self._handlers[index ^ 1].disable()
            self._handlers[2].lock()
            logger.debug("Promise %s with %d args", state.name.lower(), len(args))

        return settle

    @property
    def status(self) -> State:
        return self._status

    @property
    def handlers(self) -> tuple[Handlers, Handlers, Handlers]:
        """The success, failure and progress lists, in that order."""
        return self._handlers

    # --- Settlement ---

    def resolve(self, *args):
        self._handlers[0].fire_with(self._owner, args)
        return self._owner

    def reject(self, *args):
        self._handlers[1].fire_with(self._owner, args)
        return self._owner

    def notify(self, *args):
        """Report progress. Accepted only until the promise settles."""
        self._handlers[2].fire_with(self._owner, args)
        return self._owner

    # --- Registration ---

    def done(self, *callbacks):
        self._handlers[0].add(*callbacks)
        return self._owner

    def fail(self, *callbacks):
        self._handlers[1].add(*callbacks)
        return self._owner

    def progress(self, *callbacks):
        self._handlers[2].add(*callbacks)
        return self._owner

    def then(self, on_done=None, on_fail=None, on_progress=None):
        """Register up to three callbacks positionally. Non-callables are skipped."""
        for register, callback in (
            (self.done, on_done),
            (self.fail, on_fail),
            (self.progress, on_progress),
        ):
            if callable(callback):
                register(callback)
        return self._owner

    def always(self, handler: Callable):
        """Call handler on settlement, whichever way it goes."""
        return self.then(handler, handler)

    def __repr__(self) -> str:
        return f"Promise({self._status.name.lower()})"
