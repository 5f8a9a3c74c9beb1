"""Shared fixtures: in-memory repositories and private scopes."""

from __future__ import annotations

from datetime import datetime

import pytest

from architect.runtime.engine import Architect
from architect.runtime.loader import FetchError, ModuleLoader
from architect.runtime.snapshot import NamespaceSnapshot


class FakeRepository:
    """Serves source text by URL and remembers every URL requested."""

    def __init__(self, sources=None):
        self.sources = dict(sources or {})
        self.requested = []

    def __call__(self, url):
        self.requested.append(url)
        try:
            return self.sources[url]
        except KeyError:
            raise FetchError(f"Could not fetch {url}: 404") from None


@pytest.fixture
def user_scope():
    return {"suffix": "!", "keep": 1}


@pytest.fixture
def repository():
    return FakeRepository()


@pytest.fixture
def loader(repository, user_scope):
    return ModuleLoader(fetch=repository, default_environment=lambda: user_scope)


@pytest.fixture
def scope_snapshot(user_scope):
    return NamespaceSnapshot.capture({"user": user_scope})


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 1, 1, 9, 5, 7)


@pytest.fixture
def architect(loader, scope_snapshot, fixed_clock):
    return Architect(loader=loader, snapshot=scope_snapshot, clock=fixed_clock)
