"""Small collection helpers shared by Handlers, Promise and Event.

- each(): uniform (key, value) iteration over sequences and mappings.
- classify(): is a value a callable, a string, a sequence, or none of these?
- flatten(): pull the callables out of arbitrarily nested registration args.
- extend() / attach(): shallow merge, and decorating a host object with a
  capability bundle.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterator, Mapping, MutableMapping, Sequence
from typing import TypeVar

T = TypeVar("T")


class Kind(enum.Enum):
    CALLABLE = "callable"
    STRING = "string"
    SEQUENCE = "sequence"
    OTHER = "other"


def classify(value: object) -> Kind:
    """Report what kind of registration argument value is.

    Strings (and bytes) are sequences to Python, but never hold callbacks,
    so they are classified on their own before the sequence check.
    """
    if callable(value):
        return Kind.CALLABLE
    if isinstance(value, (str, bytes, bytearray)):
        return Kind.STRING
    if isinstance(value, Sequence):
        return Kind.SEQUENCE
    return Kind.OTHER


def each(collection) -> Iterator[tuple[object, object]]:
    """Yield (key, value) for a mapping, (index, item) for anything else."""
    if isinstance(collection, Mapping):
        yield from collection.items()
    else:
        yield from enumerate(collection)


def flatten(items) -> Iterator[Callable]:
    """Yield the callables found in items, depth-first, in order.

    Nested lists/tuples are walked with an explicit stack so deep nesting
    cannot exhaust the interpreter stack. Anything that is neither callable
    nor a sequence is dropped silently.
    """
    stack: list[Iterator] = [iter(items)]
    while stack:
        for item in stack[-1]:
            kind = classify(item)
            if kind is Kind.CALLABLE:
                yield item
            elif kind is Kind.SEQUENCE and item:
                stack.append(iter(item))
                break
        else:
            stack.pop()


def extend(target: T, source) -> T:
    """Shallow-copy source's entries onto target and return target.

    Mappings are merged key by key; any other target gets attributes.
    source may be a mapping or any object with a __dict__.
    """
    entries = source if isinstance(source, Mapping) else vars(source)
    for key, value in each(entries):
        if isinstance(target, MutableMapping):
            target[key] = value
        else:
            setattr(target, key, value)
    return target


def attach(target: T, capabilities: Mapping[str, object]) -> T:
    """Decorate target with a capability bundle and return target itself.

    Used instead of inheritance: the host keeps its own class, and gains
    the bundle's operations as plain attributes.
    """
    return extend(target, capabilities)
