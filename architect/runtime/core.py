"""Core runtime data structures for architect."""

from __future__ import annotations

from typing import Any, Iterator, Optional

_MISSING = object()


class Namespace(dict):
    """A mutable mapping whose failed reads fall through to ``base``.

    Writes and deletes only ever touch the namespace's own entries. A
    namespace may be sealed with a plain ``tag``; a sealed namespace still
    delegates reads but reports the tag as its descriptor instead of the base.
    """

    base: Optional[dict] = None
    tag: Any = None

    def __init__(self, *args, base: Optional[dict] = None, tag: Any = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.base = base
        self.tag = tag

    # Identity semantics, like module globals: a namespace can key a mapping.
    __eq__ = object.__eq__
    __ne__ = object.__ne__
    __hash__ = object.__hash__

    def __missing__(self, key: Any) -> Any:
        if self.base is None:
            raise KeyError(key)
        return self.base[key]

    def __contains__(self, key: object) -> bool:
        if dict.__contains__(self, key):
            return True
        return self.base is not None and key in self.base

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        if self.tag is not None:
            return f"Namespace({dict.__repr__(self)}, tag={self.tag!r})"
        return f"Namespace({dict.__repr__(self)}, chained={self.base is not None})"

    def get(self, key: Any, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default

    def owns(self, key: Any) -> bool:
        """Return True when *key* is an entry of this namespace itself."""

        return dict.__contains__(self, key)

    def resolve(self, key: Any, default: Any = _MISSING) -> tuple[Any, Optional[dict]]:
        """Return ``(value, mapping)`` naming the layer that answered *key*."""

        for layer in iter_chain(self):
            if dict.__contains__(layer, key):
                return layer[key], layer
        if default is _MISSING:
            raise KeyError(key)
        return default, None


def iter_chain(namespace: Optional[dict]) -> Iterator[dict]:
    """Yield a namespace and every base it delegates to, nearest first."""

    seen: set[int] = set()
    while namespace is not None and id(namespace) not in seen:
        seen.add(id(namespace))
        yield namespace
        namespace = getattr(namespace, "base", None)


def chain(base: Optional[dict]) -> Namespace:
    """Return a fresh, empty namespace layered over *base*."""

    return Namespace(base=base)


def chain_depth(namespace: Optional[dict]) -> int:
    return sum(1 for _ in iter_chain(namespace))


__all__ = [
    "Namespace",
    "chain",
    "chain_depth",
    "iter_chain",
]
