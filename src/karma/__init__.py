"""Karma: chat-driven counters with pluggable storage."""

from __future__ import annotations

from importlib.metadata import version as _pkg_version

try:
    __version__ = _pkg_version("karma")
except Exception:  # pragma: no cover (editable installs, test envs)
    __version__ = "0.0.0-dev"

from karma.command import Command, Operation, OperationKind, extract_amount, normalize_key, parse
from karma.config import KarmaConfig
from karma.errors import (
    BackendError,
    KarmaError,
    MalformedAmountError,
    MissingPhraseError,
    ParseError,
    RegistryError,
    UnknownBackendError,
)
from karma.otel import configure_otel, get_tracer
from karma.registry import BackendRegistry, default_registry
from karma.service import CommandResult, KarmaService
from karma.storage import CounterBackend, MemoryBackend, register_memory_backend

__all__ = [
    "__version__",
    "Command",
    "Operation",
    "OperationKind",
    "extract_amount",
    "normalize_key",
    "parse",
    "KarmaConfig",
    "KarmaError",
    "ParseError",
    "MissingPhraseError",
    "MalformedAmountError",
    "RegistryError",
    "UnknownBackendError",
    "BackendError",
    "BackendRegistry",
    "default_registry",
    "CounterBackend",
    "MemoryBackend",
    "register_memory_backend",
    "KarmaService",
    "CommandResult",
    "configure_otel",
    "get_tracer",
]
