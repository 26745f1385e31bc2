"""Behavior tests for CounterBackend and MemoryBackend.

Every accepted parameter must have an observable effect.
"""

from __future__ import annotations

import pytest

from karma.storage import CounterBackend, MemoryBackend


class TestMemoryBackendParameterEffects:
    async def test_increase_amount_parameter_has_effect(self):
        """increase(amount=N) must add N, not 1."""
        backend = MemoryBackend()
        await backend.increase("counter", amount=5)
        assert await backend.get("counter") == 5, "amount parameter must affect the increase"
        await backend.increase("counter", amount=3)
        assert await backend.get("counter") == 8, "subsequent increases must accumulate"

    async def test_decrease_amount_parameter_has_effect(self):
        backend = MemoryBackend()
        await backend.decrease("counter", amount=4)
        assert await backend.get("counter") == -4

    async def test_non_positive_amount_is_rejected_not_ignored(self):
        """A no-op amount must be filtered by the caller; the backend refuses it loudly."""
        backend = MemoryBackend()
        with pytest.raises(ValueError, match="positive"):
            await backend.increase("counter", amount=0)

    async def test_mutations_return_none(self):
        backend = MemoryBackend()
        assert await backend.increase("counter", 1) is None
        assert await backend.decrease("counter", 1) is None


class TestProtocolConformance:
    def test_memory_backend_has_protocol_methods(self):
        for name in ("get", "increase", "decrease"):
            assert hasattr(CounterBackend, name)
            assert callable(getattr(MemoryBackend(), name))
