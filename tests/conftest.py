"""Shared test fixtures."""

import pytest

from principal_store import NamespacedStore
from principal_store.backends import InMemoryBackend, SQLiteBackend


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def store(backend):
    return NamespacedStore(backend)


@pytest.fixture(params=["memory", "sqlite"])
async def any_store(request, tmp_path):
    """Store over each bundled backend, for behaviour both must share."""
    if request.param == "memory":
        backend = InMemoryBackend()
    else:
        backend = SQLiteBackend(str(tmp_path / "state.db"))
    store = NamespacedStore(backend)
    yield store
    await store.close()


@pytest.fixture
def u1(store):
    return store.bind("u1")
