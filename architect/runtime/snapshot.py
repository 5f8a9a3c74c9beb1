"""Process-wide snapshots of the designated global scopes and their restoration.

The snapshot of every designated scope is taken once, when this module is
first imported, before anything the engine loads can touch them. Restoring a
scope reconciles its *keys* with the snapshot:

* keys missing from the live scope (or left unset, i.e. ``None``/``False``)
  are put back from the snapshot;
* keys the live scope gained since the snapshot are deleted.

Values of keys present on both sides are left alone, even when they differ.
"""

from __future__ import annotations

import builtins
import sys
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Union

from .copier import deep_copy

ScopeSource = Union[dict, Callable[[], dict]]

PROCESS_SNAPSHOT = None


def _user_scope() -> dict:
    return sys.modules["__main__"].__dict__


def _host_scope() -> dict:
    return vars(builtins)


def _modules_scope() -> dict:
    return sys.modules


def _engine_scope() -> dict:
    return globals()


DESIGNATED_SCOPES: dict[str, Callable[[], dict]] = {
    "user": _user_scope,
    "host": _host_scope,
    "modules": _modules_scope,
    "engine": _engine_scope,
}


def _unset(live: dict, key: Any) -> bool:
    if key not in live:
        return True
    value = live[key]
    return value is None or value is False


def restore(snapshot: Mapping, live: dict) -> dict:
    """Bring the key set of *live* back to the key set of *snapshot*.

    Restored values share one identity map, so keys that alias a value in the
    snapshot alias a single clone in *live*.
    """

    seen: dict = {}
    for key in snapshot:
        if _unset(live, key):
            live[key] = deep_copy(snapshot[key], seen)

    for key in [k for k in live if k not in snapshot]:
        del live[key]

    return live


class NamespaceSnapshot:
    """Write-once deep copies of a fixed set of named scopes."""

    def __init__(self):
        self._sources: dict[str, ScopeSource] = {}
        self._copies: dict[str, dict] = {}

    @classmethod
    def capture(cls, scopes: Mapping[str, ScopeSource]) -> "NamespaceSnapshot":
        snapshot = cls()
        for name, source in scopes.items():
            snapshot._sources[name] = source
            snapshot._copies[name] = deep_copy(_resolve(source))
        return snapshot

    def __contains__(self, name: str) -> bool:
        return name in self._copies

    def __getitem__(self, name: str) -> Mapping:
        return MappingProxyType(self._copies[name])

    def __iter__(self):
        return iter(self._copies)

    def __len__(self) -> int:
        return len(self._copies)

    def names(self) -> list[str]:
        return list(self._copies)

    def live(self, name: str) -> dict:
        if name not in self._sources:
            raise KeyError(f"Unknown scope {name!r}")
        return _resolve(self._sources[name])

    def restore(self, name: str) -> dict:
        return restore(self[name], self.live(name))

    def restore_all(self, names: Iterable[str] | None = None) -> list[str]:
        """Restore every scope in capture order, stopping at the first failure."""

        restored = []
        for name in names if names is not None else self.names():
            self.restore(name)
            restored.append(name)
        return restored


def _resolve(source: ScopeSource) -> dict:
    if callable(source):
        return source()
    return source


def designated_scopes() -> dict[str, Callable[[], dict]]:
    return dict(DESIGNATED_SCOPES)


__all__ = [
    "DESIGNATED_SCOPES",
    "NamespaceSnapshot",
    "PROCESS_SNAPSHOT",
    "designated_scopes",
    "restore",
]


PROCESS_SNAPSHOT = NamespaceSnapshot.capture(DESIGNATED_SCOPES)
