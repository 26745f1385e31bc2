"""Error categories raised by the karma core."""

from __future__ import annotations


class KarmaError(Exception):
    """Base class for every karma error."""


class ParseError(KarmaError):
    """Raised when command text cannot be interpreted."""


class MissingPhraseError(ParseError):
    """Raised when the text has no phrase to take a key from."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Cannot find the user in {text!r}")


class MalformedAmountError(ParseError):
    """Raised in strict mode when a '+=' or '-=' multiplier has no digits."""

    def __init__(self, phrase: str):
        self.phrase = phrase
        super().__init__(f"Cannot read an amount from {phrase!r}")


class RegistryError(KarmaError):
    """Raised for backend registry lookups."""


class UnknownBackendError(RegistryError):
    """Raised when no factory is registered under a backend name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown storage backend: {name!r}")


class BackendError(KarmaError):
    """Raised by a backend when its underlying store fails (timeouts, connectivity)."""

    pass
