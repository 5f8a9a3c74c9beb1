"""Identity-preserving deep copies of nested namespaces."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Optional

from .core import Namespace

# Mutable collections a scope may hold besides mappings. They are cloned so a
# snapshot never shares state with the live scope, but they never describe a
# mapping.
COLLECTION_TYPES = (list, set)


def is_container(value: Any) -> bool:
    return isinstance(value, dict)


def is_copyable(value: Any) -> bool:
    return isinstance(value, dict) or isinstance(value, COLLECTION_TYPES)


def descriptor_of(container: dict) -> Any:
    """Return the behavioural descriptor attached to *container*, if any.

    A chained namespace is described by its base. A sealed namespace hides
    its base behind the tag it was sealed with.
    """

    if not isinstance(container, Namespace):
        return None
    if container.tag is not None:
        return container.tag
    return container.base


def _allocate(original):
    cls = type(original)
    clone = cls.__new__(cls)
    if isinstance(original, defaultdict):
        clone.default_factory = original.default_factory
    return clone


def _fill(original, clone, seen) -> None:
    if isinstance(original, list):
        clone.extend(deep_copy(item, seen) for item in original)
    elif isinstance(original, set):
        clone.update(deep_copy(item, seen) for item in original)
    else:
        for key, item in list(dict.items(original)):
            clone[deep_copy(key, seen)] = deep_copy(item, seen)


def deep_copy(value: Any, seen: Optional[dict[int, tuple]] = None) -> Any:
    """Clone *value*, copying every reachable container at most once.

    ``seen`` maps ``id(original)`` to an ``(original, clone)`` pair. Holding
    the original keeps its id from being reused while the map is alive, so a
    map shared across calls never hands back the clone of another object.
    Shared sub-structures and cycles resolve to the clone already registered
    for them, giving the clone the same aliasing topology as the original.
    Keys are cloned as well as values; a container key therefore becomes a
    distinct object in the clone.
    """

    if not is_copyable(value):
        return value

    if seen is None:
        seen = {}

    entry = seen.get(id(value))
    if entry is not None and entry[0] is value:
        return entry[1]

    clone = _allocate(value)
    # Registered before recursing so self-references find the clone.
    seen[id(value)] = (value, clone)

    _fill(value, clone, seen)

    if is_container(value):
        descriptor = descriptor_of(value)
        if is_container(descriptor):
            clone.base = descriptor

    return clone


__all__ = [
    "COLLECTION_TYPES",
    "deep_copy",
    "descriptor_of",
    "is_container",
    "is_copyable",
]
