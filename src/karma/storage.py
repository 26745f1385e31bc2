"""CounterBackend protocol + MemoryBackend implementation."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from karma.registry import BackendRegistry


class CounterBackend(Protocol):
    """Protocol for karma counter storage.

    Requirements:
    - get() MUST return 0 for unknown keys and never fail
    - increase()/decrease() MUST be atomic per key (no lost updates)
    - amount is always > 0; callers filter no-ops before calling

    Remote stores translate their own failures into BackendError.
    """

    async def get(self, key: str) -> int: ...
    async def increase(self, key: str, amount: int) -> None: ...
    async def decrease(self, key: str, amount: int) -> None: ...


class MemoryBackend:
    """In-memory storage for development and testing.

    WARNING: State lost on restart.
    Suitable for: local dev, tests, single-process servers.
    """

    def __init__(self):
        self._counters: dict[str, int] = {}
        self._lock = threading.Lock()

    async def get(self, key: str) -> int:
        with self._lock:
            return self._counters.get(key, 0)

    async def increase(self, key: str, amount: int) -> None:
        self._add(key, amount, 1)

    async def decrease(self, key: str, amount: int) -> None:
        self._add(key, amount, -1)

    def _add(self, key: str, amount: int, sign: int) -> None:
        if amount <= 0:
            raise ValueError(f"amount must be positive, got {amount}")
        with self._lock:
            self._counters[key] = self._counters.get(key, 0) + sign * amount


def register_memory_backend(registry: BackendRegistry, name: str = "memory") -> MemoryBackend:
    """Register a shared MemoryBackend under *name* and return it.

    Every resolve() of the name returns the same instance, so counters
    survive across requests for the lifetime of the registry.
    """
    backend = MemoryBackend()
    registry.register(name, lambda: backend)
    return backend
