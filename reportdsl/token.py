"""Token definitions for the filter language."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    """The kind of a lexical token."""

    # Keywords
    FILTER = auto()  # "Filter:"
    CROSS_FILTER = auto()  # "CrossFilter:"
    AND = auto()
    OR = auto()
    NOT = auto()
    IN = auto()
    IS = auto()
    NULL = auto()

    # Literals (carry a value on the token)
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Special value keywords
    TODAY = auto()
    YESTERDAY = auto()
    TOMORROW = auto()
    CURRENT_USER = auto()

    # Punctuation
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]
    SEMICOLON = auto()  # ;
    COMMA = auto()  # ,
    DASH = auto()  # -

    # Operators
    EQ = auto()  # =
    NOT_EQ = auto()  # !=
    GT = auto()  # >
    LT = auto()  # <
    GTE = auto()  # >=
    LTE = auto()  # <=

    # Special
    ILLEGAL = auto()
    EOF = auto()


@dataclass(frozen=True)
class Span:
    """A half-open range of character offsets in the source text."""

    start: int = 0
    end: int = 0


@dataclass(frozen=True)
class Token:
    """A single token: its kind, its position and, for literals, its value.

    ``value`` holds the text of an identifier, the contents of a string
    (without the quotes) or the integer of a number; it is ``None`` otherwise.
    """

    kind: TokenKind
    span: Span
    value: str | int | None = None