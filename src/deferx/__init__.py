"""deferx: callback lists, promises and promise combinators for Python."""

from importlib.metadata import version as _version

__version__ = _version("deferx")

from deferx._context import get_context
from deferx._helpers import attach
from deferx.handlers import Handlers, Policy, Status
from deferx.promise import Promise, State
from deferx.when import Combinator, when
from deferx.event import Event

__all__ = [
    "Handlers",
    "Policy",
    "Status",
    "Promise",
    "State",
    "Combinator",
    "when",
    "Event",
    "attach",
    "get_context",
]
