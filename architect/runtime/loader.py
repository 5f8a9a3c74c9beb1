"""Fetching, compiling and executing remotely stored source units."""

from __future__ import annotations

import hashlib
from pathlib import Path
import sys
from typing import Any, Callable, Optional

import requests

from ..constants import FETCH_TIMEOUT, FILE_SCHEME, HTTP_SCHEMES, SOURCE_SUFFIX
from .core import Namespace, chain


class ArchitectError(RuntimeError):
    """Base class for errors raised while loading units."""


class FetchError(ArchitectError):
    """The source behind an address could not be retrieved."""


class CompileError(ArchitectError):
    """Retrieved source text is not valid Python."""


def resolve_url(repository: str, path: str, suffix: str = SOURCE_SUFFIX) -> str:
    return f"{repository}/{path}{suffix}"


def fetch_source(url: str, *, timeout: float = FETCH_TIMEOUT) -> str:
    """Return the source text stored at *url*.

    ``http://`` and ``https://`` addresses are requested over the network;
    anything else is treated as a ``file://`` URL or a filesystem path.
    """

    if url.startswith(HTTP_SCHEMES):
        try:
            response = requests.get(url, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise FetchError(f"Could not fetch {url}: {exc}") from exc
        return response.text

    path = Path(url[len(FILE_SCHEME):] if url.startswith(FILE_SCHEME) else url)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FetchError(f"Could not read {path}: {exc}") from exc


def default_environment() -> dict:
    """The user-global namespace top-level code runs in when left alone."""

    return sys.modules["__main__"].__dict__


class Unit:
    """An executable unit compiled from one source text."""

    def __init__(self, filename: str, code, environment: dict, source: str = ""):
        self.filename = filename
        self.code = code
        self.environment = environment
        self.default_environment = environment
        self.source_hash = hashlib.sha256(source.encode("utf-8")).hexdigest()
        self.url: Optional[str] = None
        self.path: Optional[str] = None
        self.chained = False
        self.executed = False

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        state = "executed" if self.executed else "pending"
        link = "chained" if self.chained else "default"
        return f"<Unit {self.filename} [{link}, {state}]>"


def compile_source(
    source: str,
    filename: str = "<unit>",
    environment: Optional[Callable[[], dict]] = None,
) -> Unit:
    """Compile *source* into a :class:`Unit` bound to its default environment."""

    try:
        code = compile(source, filename, "exec")
    except (SyntaxError, ValueError) as exc:
        raise CompileError(f"Could not compile {filename}: {exc}") from exc
    env_factory = environment or default_environment
    return Unit(filename, code, env_factory(), source)


def get_environment(unit: Unit) -> dict:
    return unit.environment


def set_environment(unit: Unit, env: dict) -> None:
    unit.environment = env
    unit.chained = env is not unit.default_environment


def execute(unit: Unit) -> Any:
    """Run *unit* inside whatever environment it is currently bound to."""

    exec(unit.code, unit.environment)
    unit.executed = True
    return unit.environment


class ModuleLoader:
    """Turns addresses into executable units bound to chained environments."""

    def __init__(
        self,
        fetch: Callable[[str], str] = fetch_source,
        compile: Callable[..., Unit] = compile_source,
        default_environment: Callable[[], dict] = default_environment,
    ):
        self.fetch = fetch
        self.compile = compile
        self.default_environment = default_environment

    def load(
        self,
        url: str,
        base: Optional[dict] = None,
        integrate: Any = None,
        exclude: Any = None,
    ) -> Unit:
        source = self.fetch(url)
        unit = self.compile(source, url, self.default_environment)
        unit.url = url

        current = get_environment(unit)
        env: Namespace = chain(current if base is None else base)

        if not exclude:
            set_environment(unit, env)

        if integrate:
            execute(unit)

        return unit


__all__ = [
    "ArchitectError",
    "CompileError",
    "FetchError",
    "ModuleLoader",
    "Unit",
    "compile_source",
    "default_environment",
    "execute",
    "fetch_source",
    "get_environment",
    "resolve_url",
    "set_environment",
]
