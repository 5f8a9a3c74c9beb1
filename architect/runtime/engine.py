"""The architect: configuration, module loading and environment reversion."""

from __future__ import annotations

from dataclasses import dataclass, field
import gc
import json
from pathlib import Path
import tracemalloc
from typing import Any, Callable, Mapping, Optional

from ..constants import (
    MSG_FREED_MEMORY,
    MSG_GOT,
    MSG_REVERTED_ENVIRONMENTS,
    MSG_REVERTED_MEMORY,
)
from .classes import classify
from .core import Namespace
from .loader import ModuleLoader, Unit, resolve_url
from .logbook import OperationLog


@dataclass
class BuildConfig:
    """Configuration handed to :meth:`Architect.build`."""

    repository: str = ""
    ecosystem: dict = field(default_factory=dict)
    files: list = field(default_factory=list)
    exclusions: list = field(default_factory=list)

    def __post_init__(self):
        self.repository = self.repository or ""
        self.ecosystem = dict(self.ecosystem or {})
        self.files = [str(f) for f in (self.files or [])]
        self.exclusions = [str(e) for e in (self.exclusions or [])]

    def to_dict(self):
        return {
            "repository": self.repository,
            "ecosystem": dict(self.ecosystem),
            "files": list(self.files),
            "exclusions": list(self.exclusions),
        }

    @classmethod
    def from_dict(cls, data):
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise TypeError("Build configuration must be built from a mapping")
        return cls(
            repository=data.get("repository"),
            ecosystem=data.get("ecosystem"),
            files=data.get("files"),
            exclusions=data.get("exclusions"),
        )


def load_build_config(path) -> BuildConfig:
    """Read a JSON build configuration from *path*."""
    with open(Path(path), "r", encoding="utf-8") as f:
        return BuildConfig.from_dict(json.load(f))


def _traced_memory() -> Optional[int]:
    if not tracemalloc.is_tracing():
        return None
    return tracemalloc.get_traced_memory()[0]


class Architect:
    """Loads units from a repository into environments chained to an ecosystem.

    Every collaborator can be swapped out: ``loader`` fetches and compiles
    units, ``snapshot`` holds the scopes :meth:`revert` restores (the
    process-wide snapshot by default), and ``clock`` stamps log entries.
    """

    def __init__(
        self,
        loader: Optional[ModuleLoader] = None,
        snapshot=None,
        clock: Optional[Callable] = None,
    ):
        if snapshot is None:
            from .snapshot import PROCESS_SNAPSHOT as snapshot

        self.loader = loader or ModuleLoader()
        self.snapshot = snapshot
        self.logs = OperationLog(clock)
        self._reset()

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return (
            f"<Architect repository={self.repository!r} files={len(self.files)} "
            f"logs={len(self.logs)}>"
        )

    def _reset(self) -> None:
        self.repository = ""
        self.ecosystem = Namespace(base=self.loader.default_environment())
        self.files: list[str] = []
        self.exclusions: frozenset[str] = frozenset()
        self.units: list[Unit] = []
        self.config: Optional[BuildConfig] = None

    def build(self, config: BuildConfig | Mapping | None = None) -> "Architect":
        """Adopt *config* and pre-load every file it lists, in order."""

        if not isinstance(config, BuildConfig):
            config = BuildConfig.from_dict(config)

        self.config = config
        self.repository = config.repository
        self.ecosystem = Namespace(
            config.ecosystem, base=self.loader.default_environment()
        )
        self.files = []
        self.units = []
        self.exclusions = frozenset(config.exclusions)

        for path in config.files:
            address = self.repository + path
            if path not in self.exclusions:
                self.get(path, True, False)
            else:
                # Excluded entries go through get() by their joined address,
                # with integrate/exclude left unspecified.
                self.get(address)
            self.logs.log(MSG_GOT.format(address=address))

        return self

    def get(self, path: str, integrate: Any = None, exclude: Any = None) -> Unit:
        """Load ``<repository>/<path>.py`` and record *path*.

        Unless *exclude* is truthy, the unit runs in a fresh namespace chained
        to the ecosystem. When *integrate* is truthy the unit is executed
        immediately. Fetch, compile and execution errors propagate and leave
        ``files`` untouched.
        """

        url = resolve_url(self.repository, path)
        unit = self.loader.load(
            url, base=self.ecosystem, integrate=integrate, exclude=exclude
        )
        unit.path = path
        self.files.append(path)
        self.units.append(unit)
        return unit

    def revert(self) -> list[str]:
        """Restore every designated scope, then forget all configuration.

        Scopes are restored in snapshot order and the first failure
        propagates; the architect's own state is only reset once every scope
        has been restored.
        """

        before = _traced_memory()
        restored = self.snapshot.restore_all()

        self._reset()
        self.logs.clear()
        self.logs.log(MSG_REVERTED_ENVIRONMENTS)
        self.logs.log(MSG_REVERTED_MEMORY)

        gc.collect()
        after = _traced_memory()
        if before is not None and after is not None:
            self.logs.log(MSG_FREED_MEMORY.format(kb=(before - after) // 1024))

        return restored

    def classify(self, name, *bases):
        return classify(name, *bases)

    def unit(self, path: str) -> Optional[Unit]:
        """Return the most recent unit recorded under *path*."""

        for unit in reversed(self.units):
            if unit.path == path:
                return unit
        return None


__all__ = [
    "Architect",
    "BuildConfig",
    "load_build_config",
]
