"""Firing context: who fired the callback currently running.

Callbacks are plain Python callables invoked as ``callback(*args)``. The
object a list was fired with (the list itself, a Promise, a decorated host)
is published through a contextvar for the duration of each call, so a
callback can ask for it without it being threaded through every signature.
"""

from __future__ import annotations

import contextvars

# The context of the dispatch pass currently executing, if any.
current_context: contextvars.ContextVar[object | None] = contextvars.ContextVar(
    "current_context", default=None
)


def get_context() -> object | None:
    """Return the context the running callback was fired with.

    Outside of a dispatch pass this is None.

    Usage:
        p = Promise()
        p.done(lambda: print(get_context() is p))
        p.resolve()  # True
    """
    return current_context.get()
