"""Handlers — an ordered callback list with a once/memory lifecycle policy.

A Handlers instance owns its firing. Callbacks run synchronously, in
registration order. Fires requested while a pass is executing are queued
and run afterwards, strictly FIFO, instead of interleaving with it.
Callbacks may add or remove callbacks mid-pass; the pass bounds are adjusted
so nothing is skipped or run twice.

Policy flags:
- once: the list fires at most one pass, then empties (memory) or disables.
- memory: the arguments of the latest fire are kept and replayed to
  callbacks added afterwards.
"""

from __future__ import annotations

import enum
import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterable

from deferx._context import current_context
from deferx._helpers import flatten

logger = logging.getLogger("deferx.handlers")


@dataclass(frozen=True)
class Policy:
    """Lifecycle flags of a Handlers list. Fixed at creation."""

    once: bool = False
    memory: bool = False

    @classmethod
    def parse(cls, flags: str) -> Policy:
        """Build a Policy from whitespace-separated flag names.

        Policy.parse("once memory") == Policy(once=True, memory=True)
        Unknown names are ignored.
        """
        names = set(flags.split())
        return cls(once="once" in names, memory="memory" in names)


class Status(enum.IntEnum):
    INIT = 0
    FIRING = 1
    FIRED = 2


class Handlers:
    """Ordered callback list with deterministic, re-entrancy-safe firing.

    Usage:
        h = Handlers("once memory")
        h.add(lambda x: print("first", x))
        h.fire(1)                            # first 1
        h.add(lambda x: print("late", x))    # late 1, replayed from memory
        h.fire(2)                            # refused, once already fired
    """

    __slots__ = (
        "_policy",
        "_list",
        "_stack",
        "_memory",
        "_status",
        "_firing_start",
        "_firing_length",
        "_firing_index",
    )

    def __init__(self, policy: Policy | str | None = None) -> None:
        if policy is None:
            policy = Policy()
        elif isinstance(policy, str):
            policy = Policy.parse(policy)
        self._policy: Policy = policy
        self._list: list[Callable] | None = []
        # Pending (context, args) fires; repeatable lists only.
        self._stack: deque[tuple[object, tuple]] | None = None if policy.once else deque()
        self._memory: tuple[object, tuple] | None = None
        self._status = Status.INIT
        self._firing_start = 0
        self._firing_length = 0
        self._firing_index = 0

    @property
    def policy(self) -> Policy:
        return self._policy

    @property
    def status(self) -> Status:
        return self._status

    @property
    def disabled(self) -> bool:
        return self._list is None

    @property
    def locked(self) -> bool:
        """True when the list cannot queue repeat fires (once, locked or disabled)."""
        return self._stack is None

    # --- Dispatch ---

    def _fire(self, data: tuple[object, tuple]) -> None:
        """Run a dispatch pass, then drain fires queued while it ran."""
        while True:
            context, args = data
            self._firing_index = self._firing_start
            self._firing_start = 0
            self._firing_length = len(self._list)
            if self._policy.memory:
                self._memory = data

            self._status = Status.FIRING
            token = current_context.set(context)
            completed = False
            try:
                while self._list is not None and self._firing_index < self._firing_length:
                    self._list[self._firing_index](*args)
                    self._firing_index += 1
                completed = True
            finally:
                current_context.reset(token)
                self._status = Status.FIRED
                if not completed:
                    self._abort()

            if self._list is None:
                return
            if self._stack is not None:
                if not self._stack:
                    return
                data = self._stack.popleft()
            elif self._memory is not None:
                self.empty()
                return
            else:
                self.disable()
                return

    def _abort(self) -> None:
        """Settle the list after a callback raised mid-pass.

        Fires queued during the failed pass are dropped; a once list is
        emptied or disabled as if the pass had finished.
        """
        if self._list is None:
            return
        if self._stack is not None:
            if self._stack:
                logger.debug("Dropped %d queued fires after a callback raised", len(self._stack))
            self._stack.clear()
        elif self._memory is not None:
            self.empty()
        else:
            self.disable()

    def fire_with(self, context: object, args: Iterable | None = ()) -> Handlers:
        """Fire every callback as callback(*args), with context published.

        A fire requested while a pass is running is queued (repeatable
        lists) or refused (once lists). A once list that already fired
        refuses further fires.
        """
        if self._list is None:
            return self
        if self._status is not Status.FIRED or self._stack is not None:
            data = (context, () if args is None else tuple(args))
            if self._status is Status.FIRING:
                if self._stack is not None:
                    self._stack.append(data)
                    logger.debug("Queued re-entrant fire (%d pending)", len(self._stack))
                else:
                    logger.debug("Refused re-entrant fire on a once list")
            else:
                self._fire(data)
        return self

    def fire(self, *args) -> Handlers:
        """Fire with this list as the context."""
        return self.fire_with(self, args)

    # --- Structure ---

    def add(self, *items) -> Handlers:
        """Register callbacks. Nested lists/tuples are flattened, the rest ignored."""
        if self._list is None:
            return self
        start = len(self._list)
        self._list.extend(flatten(items))

        if self._status is Status.FIRING:
            self._firing_length = len(self._list)
        elif self._memory is not None:
            # Replay memory to the new callbacks only.
            self._firing_start = start
            self._fire(self._memory)
        return self

    def remove(self, *items) -> Handlers:
        """Remove every occurrence of each item.

        Callables compare by identity; bound methods compare equal when they
        wrap the same function and instance, so obj.method can be removed.
        """
        if self._list is None:
            return self
        for item in items:
            index = 0
            while index < len(self._list):
                if self._list[index] != item:
                    index += 1
                    continue
                del self._list[index]
                if self._status is Status.FIRING:
                    if index < self._firing_length:
                        self._firing_length -= 1
                    if index <= self._firing_index:
                        self._firing_index -= 1
        return self

    def has(self, item: Callable | None = None) -> bool:
        """Membership test, or "enabled and non-empty" without item."""
        if self._list is None:
            return False
        if item is None:
            return bool(self._list)
        return item in self._list

    def empty(self) -> Handlers:
        """Drop every callback but keep memory and the pending queue."""
        if self._list is not None:
            self._list.clear()
            self._firing_length = 0
        return self

    def disable(self) -> Handlers:
        """Make the list permanently inert."""
        if self._list is not None:
            logger.debug("Disabled %r", self)
        self._list = self._stack = self._memory = None
        return self

    def lock(self) -> Handlers:
        """Refuse repeat fires. Without memory this is disable()."""
        self._stack = None
        if self._memory is None:
            self.disable()
        return self

    def __len__(self) -> int:
        return len(self._list) if self._list is not None else 0

    def __repr__(self) -> str:
        flags = [name for name in ("once", "memory") if getattr(self._policy, name)]
        state = "disabled" if self._list is None else self._status.name.lower()
        return f"Handlers({' '.join(flags)!r}, {state}, {len(self)} callbacks)"
