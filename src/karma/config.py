"""Runtime configuration, built once at startup and passed explicitly."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_TRIGGER = "karma"
DEFAULT_STORAGE = "memory"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8081


@dataclass(frozen=True)
class KarmaConfig:
    """Settings for the karma service and its HTTP endpoint.

    token: shared secret every request must carry, compared exactly.
    trigger: trigger word the chat platform sends with each message.
    storage: name of the backend to resolve from the registry.
    strict_amounts: reject malformed '+=' / '-=' multipliers instead of
        treating them as queries.
    """

    token: str = ""
    trigger: str = DEFAULT_TRIGGER
    storage: str = DEFAULT_STORAGE
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    strict_amounts: bool = False
