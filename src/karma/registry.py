"""BackendRegistry: resolve a configured storage name to a live backend."""

from __future__ import annotations

import logging
from collections.abc import Callable

from karma.errors import UnknownBackendError
from karma.storage import CounterBackend, register_memory_backend

logger = logging.getLogger(__name__)

BackendFactory = Callable[[], CounterBackend]


class BackendRegistry:
    """Maps backend names to factories.

    Registering a name that already exists replaces its factory.
    """

    def __init__(self):
        self._factories: dict[str, BackendFactory] = {}

    def register(self, name: str, factory: BackendFactory) -> None:
        if name in self._factories:
            logger.warning("Storage backend '%s' registered twice, replacing factory", name)
        self._factories[name] = factory

    def resolve(self, name: str) -> CounterBackend:
        try:
            factory = self._factories[name]
        except KeyError:
            raise UnknownBackendError(name) from None
        return factory()

    def names(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories


def default_registry() -> BackendRegistry:
    """Build a registry with every built-in backend registered."""
    registry = BackendRegistry()
    register_memory_backend(registry)
    return registry
