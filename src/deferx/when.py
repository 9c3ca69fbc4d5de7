"""when() — compose N promises into one read-only derived promise.

The combinator watches every input through its public always() surface.
Each input counts once, on its first settlement, whether it resolved or
rejected. When the completion threshold is reached the derived promise
resolves with one positional argument per input: the tuple that input
settled with, or None if it had not settled yet.

Thresholds:
- all():   every input (the default for when())
- any():   the first input to settle
- some(n): any n inputs
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from deferx.promise import Promise, State

logger = logging.getLogger("deferx.when")


class Combinator:
    """Read-only view over a derived promise tracking several inputs.

    Only success registration is exposed (then()); the derived promise
    cannot be resolved, rejected or notified from outside.
    """

    __slots__ = ("_inputs", "_promise")

    def __init__(self, inputs: Sequence, count: int | None = None) -> None:
        self._inputs = tuple(inputs)
        self._promise = Promise()
        self._promise._owner = self

        remaining = len(self._inputs) if count is None else count
        completed = [False] * len(self._inputs)
        collected: list[tuple | None] = [None] * len(self._inputs)

        def _collect(index: int) -> Callable[..., None]:
            def settled(*args) -> None:
                nonlocal remaining
                if completed[index]:
                    return
                completed[index] = True
                collected[index] = args
                remaining -= 1
                if remaining == 0:
                    logger.debug("Combinator resolved after input %d", index)
                    self._promise.resolve(*collected)

            return settled

        # Nothing to wait for: resolve now rather than never.
        if remaining <= 0:
            self._promise.resolve(*collected)
            return
        for index, promise in enumerate(self._inputs):
            promise.always(_collect(index))

    @property
    def inputs(self) -> tuple:
        return self._inputs

    @property
    def status(self) -> State:
        return self._promise.status

    def then(self, *callbacks) -> Combinator:
        """Register callbacks for the aggregate result."""
        self._promise.done(*callbacks)
        return self

    # --- Policies: each returns an independent combinator ---

    def all(self) -> Combinator:
        return Combinator(self._inputs)

    def any(self) -> Combinator:
        return Combinator(self._inputs, 1)

    def some(self, n: int) -> Combinator:
        return Combinator(self._inputs, n)

    def __repr__(self) -> str:
        return f"Combinator({len(self._inputs)} inputs, {self.status.name.lower()})"


def when(*promises) -> Combinator:
    """Combine promises; the result resolves once all of them have settled.

    Usage:
        a, b = Promise(), Promise()
        when(a, b).then(lambda ra, rb: print(ra, rb))
        b.reject("nope")
        a.resolve(1)          # (1,) ('nope',)

        when(a, b).any()      # resolves on the first settlement instead
    """
    return Combinator(promises)
