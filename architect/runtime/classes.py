"""Prototype classes built by flattening their bases."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..constants import RESERVED_PREFIX


def is_structural(key: str) -> bool:
    """Structural members (``__name__``, ``__prototypes__`` …) are never inherited."""
    return key.startswith(RESERVED_PREFIX)


def _members(base: Any) -> dict:
    if isinstance(base, Mapping):
        return dict(base)
    if isinstance(base, type):
        return dict(vars(base))
    return {}


class Prototype(type):
    """Metaclass of classified prototypes.

    Calling a prototype allocates a bare instance and returns whatever its
    ``init`` returns.
    """

    def __call__(cls, *args, **kwargs):
        instance = cls.__new__(cls)
        return instance.init(*args, **kwargs)

    def __repr__(cls):
        return f"class: {cls.__name__}"


def _default_init(self, *args, **kwargs):
    return self


def classify(name, *bases) -> Prototype:
    """Create a prototype named *name* from the members of *bases*.

    Bases are merged left to right, so a later base wins on a shared name.
    There is no diamond resolution; the result is a single flat prototype.
    """

    namespace: dict[str, Any] = {}
    for base in bases:
        for key, value in _members(base).items():
            if isinstance(key, str) and not is_structural(key):
                namespace[key] = value

    namespace.setdefault("init", _default_init)
    namespace["__prototypes__"] = bases

    return Prototype(name if isinstance(name, str) else "", (), namespace)


__all__ = [
    "Prototype",
    "classify",
    "is_structural",
]
