"""KarmaService: apply parsed commands to the configured backend."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from karma.command import Command, Operation, OperationKind, parse
from karma.otel import get_tracer
from karma.registry import BackendRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command: the key, what was asked, and the value after it.

    applied is False when nothing was written (queries and no-op
    multipliers that fell back to a query).
    """

    key: str
    operation: Operation
    value: int
    applied: bool = False

    def render(self) -> str:
        return f"{self.key} = {self.value}"


class KarmaService:
    """Interprets chat text and applies it to a backend from the registry.

    The backend is resolved on every call, so an unknown storage name
    only fails the request that hit it.
    """

    def __init__(
        self,
        registry: BackendRegistry,
        storage: str,
        *,
        strict_amounts: bool = False,
    ):
        self._registry = registry
        self._storage = storage
        self._strict = strict_amounts
        self._tracer = get_tracer("karma.service")

    @property
    def storage(self) -> str:
        return self._storage

    def parse(self, text: str) -> Command:
        return parse(text, strict=self._strict)

    async def apply(self, text: str) -> CommandResult:
        """Parse *text* and run it.

        Raises ParseError, RegistryError or BackendError; nothing is
        written when any of them is raised before the mutation.
        """
        command = self.parse(text)
        return await self.execute(command)

    async def execute(self, command: Command) -> CommandResult:
        op = command.operation
        with self._tracer.start_as_current_span("karma.apply") as span:
            span.set_attribute("karma.key", command.key)
            span.set_attribute("karma.operation", op.kind.value)
            span.set_attribute("karma.amount", op.amount)
            span.set_attribute("karma.storage", self._storage)

            backend = self._registry.resolve(self._storage)

            if op.is_mutation:
                if op.kind == OperationKind.INCREASE:
                    await backend.increase(command.key, op.amount)
                else:
                    await backend.decrease(command.key, op.amount)
                logger.info("%s %s by %d", op.kind.value, command.key, op.amount)
            elif op.is_noop:
                logger.debug("No-op %s for %s, falling back to query", op.kind.value, command.key)

            value = await backend.get(command.key)
            span.set_attribute("karma.value", value)
            return CommandResult(key=command.key, operation=op, value=value, applied=op.is_mutation)
