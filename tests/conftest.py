"""Shared test fixtures."""

from __future__ import annotations

import pytest

from karma import BackendRegistry, KarmaConfig, KarmaService
from karma.storage import MemoryBackend


class FailingBackend:
    """Backend whose store is unreachable (for error-path tests)."""

    def __init__(self):
        self.calls = []

    async def get(self, key):
        from karma import BackendError

        self.calls.append(("get", key))
        raise BackendError("connection refused")

    async def increase(self, key, amount):
        self.calls.append(("increase", key, amount))

    async def decrease(self, key, amount):
        self.calls.append(("decrease", key, amount))


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def registry(backend):
    reg = BackendRegistry()
    reg.register("memory", lambda: backend)
    return reg


@pytest.fixture
def service(registry):
    return KarmaService(registry, "memory")


@pytest.fixture
def config():
    return KarmaConfig(token="secret", trigger="karma", storage="memory")
