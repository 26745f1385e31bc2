"""Command interpreter: turn chat text into a counter key and an operation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from karma.errors import MalformedAmountError, MissingPhraseError

_NON_LETTERS = re.compile(r"[^A-Za-z]+")
_NON_DIGITS = re.compile(r"[^0-9]+")


class OperationKind(StrEnum):
    """What a command asks the backend to do."""

    INCREASE = "increase"
    DECREASE = "decrease"
    QUERY = "query"


@dataclass(frozen=True)
class Operation:
    """An operation on a single counter.

    INCREASE/DECREASE with amount 0 are no-ops: the caller must not
    mutate and falls back to a query.
    """

    kind: OperationKind
    amount: int = 0

    @classmethod
    def increase(cls, amount: int = 1) -> Operation:
        return cls(OperationKind.INCREASE, amount)

    @classmethod
    def decrease(cls, amount: int = 1) -> Operation:
        return cls(OperationKind.DECREASE, amount)

    @classmethod
    def query(cls) -> Operation:
        return cls(OperationKind.QUERY)

    @property
    def is_noop(self) -> bool:
        return self.kind != OperationKind.QUERY and self.amount == 0

    @property
    def is_mutation(self) -> bool:
        return self.kind != OperationKind.QUERY and self.amount > 0


@dataclass(frozen=True)
class Command:
    """A parsed command: normalized key, operation and the phrase it came from."""

    key: str
    operation: Operation
    phrase: str = ""


def normalize_key(token: str) -> str:
    """Reduce a raw token to a counter key: ASCII letters only, lower-cased."""
    return _NON_LETTERS.sub("", token.strip("-")).lower()


def extract_amount(phrase: str) -> int:
    """Read the multiplier between the first and second '=' in *phrase*.

    Non-digits are dropped. Returns 0 when nothing usable remains.
    """
    parts = phrase.split("=")
    if len(parts) < 2:
        return 0
    digits = _NON_DIGITS.sub("", parts[1])
    if not digits:
        return 0
    return int(digits)


def _multiplied(phrase: str, strict: bool) -> int:
    amount = extract_amount(phrase)
    if amount == 0 and strict:
        raise MalformedAmountError(phrase)
    return amount


def parse(text: str, *, strict: bool = False) -> Command:
    """Parse chat text such as ``"karma alice++"`` into a Command.

    The first token is the trigger word and is ignored. The second token
    is the phrase; both the key and the operation come from it. Operators
    are tested in order ``++``, ``+=``, ``--``, ``-=``; first match wins,
    anything else is a query. For ``+=``/``-=`` the key is read from the
    text before the first ``=`` so letters in a bad multiplier never
    reach it.

    With ``strict=True`` a ``+=``/``-=`` multiplier that yields 0 raises
    MalformedAmountError instead of silently becoming a no-op.

    Raises:
        MissingPhraseError: the text has fewer than two tokens, or the
            phrase holds no letters to build a key from.
    """
    tokens = text.split()
    if len(tokens) < 2:
        raise MissingPhraseError(text)

    phrase = tokens[1]
    key = normalize_key(phrase)

    if "++" in phrase:
        operation = Operation.increase(1)
    elif "+=" in phrase:
        key = normalize_key(phrase.split("=", 1)[0])
        operation = Operation.increase(_multiplied(phrase, strict))
    elif "--" in phrase:
        operation = Operation.decrease(1)
    elif "-=" in phrase:
        key = normalize_key(phrase.split("=", 1)[0])
        operation = Operation.decrease(_multiplied(phrase, strict))
    else:
        operation = Operation.query()

    if not key:
        raise MissingPhraseError(text)

    return Command(key=key, operation=operation, phrase=phrase)
