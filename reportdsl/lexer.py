"""Lexical analysis of filter strings."""

from __future__ import annotations

from collections.abc import Iterator

from reportdsl.token import Span, Token, TokenKind

_I64_MAX = 2**63 - 1
_ASCII_DIGITS = frozenset("0123456789")
_ASCII_LOWER = str.maketrans("ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz")

_SINGLE_CHAR = {
    "=": TokenKind.EQ,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    "-": TokenKind.DASH,
}

# Characters that may be followed by '=': (kind alone, kind with '=')
_WITH_EQUALS = {
    "<": (TokenKind.LT, TokenKind.LTE),
    ">": (TokenKind.GT, TokenKind.GTE),
    "!": (TokenKind.ILLEGAL, TokenKind.NOT_EQ),
}

_KEYWORDS = {
    "and": TokenKind.AND,
    "or": TokenKind.OR,
    "not": TokenKind.NOT,
    "in": TokenKind.IN,
    "is": TokenKind.IS,
    "null": TokenKind.NULL,
    "today": TokenKind.TODAY,
    "yesterday": TokenKind.YESTERDAY,
    "tomorrow": TokenKind.TOMORROW,
    "current_user": TokenKind.CURRENT_USER,
}

_SECTION_KEYWORDS = {
    "filter": TokenKind.FILTER,
    "crossfilter": TokenKind.CROSS_FILTER,
}


def _ascii_lower(text: str) -> str:
    return text.translate(_ASCII_LOWER)


class Lexer:
    """Splits a filter string into tokens.

    Iterating over a lexer yields its tokens from the start of the text;
    spans are character offsets into that text.
    """

    def __init__(self, text: str) -> None:
        self.text = text

    def __iter__(self) -> Iterator[Token]:
        text = self.text
        length = len(text)
        pos = 0
        while True:
            while pos < length and text[pos].isspace():
                pos += 1
            if pos >= length:
                return
            start = pos
            char = text[pos]
            pos += 1

            if char in _SINGLE_CHAR:
                yield Token(_SINGLE_CHAR[char], Span(start, pos))
            elif char in _WITH_EQUALS:
                alone, with_eq = _WITH_EQUALS[char]
                if pos < length and text[pos] == "=":
                    pos += 1
                    yield Token(with_eq, Span(start, pos))
                else:
                    yield Token(alone, Span(start, pos))
            elif char == '"':
                token, pos = self._read_string(start, pos)
                yield token
            elif char in _ASCII_DIGITS:
                token, pos = self._read_number(start, pos)
                yield token
            elif char.isalpha():
                token, pos = self._read_identifier(start, pos)
                yield token
            else:
                yield Token(TokenKind.ILLEGAL, Span(start, pos))

    def _read_string(self, start: int, pos: int) -> tuple[Token, int]:
        """Read a string whose opening quote ends just before ``pos``."""
        text = self.text
        close = text.find('"', pos)
        if close == -1:
            content = text[pos:]
            end = len(text)
        else:
            content = text[pos:close]
            end = close + 1
        return Token(TokenKind.STRING, Span(start, end), content), end

    def _read_number(self, start: int, pos: int) -> tuple[Token, int]:
        text = self.text
        while pos < len(text) and text[pos] in _ASCII_DIGITS:
            pos += 1
        value = int(text[start:pos])
        if value > _I64_MAX:
            value = 0
        return Token(TokenKind.NUMBER, Span(start, pos), value), pos

    def _read_identifier(self, start: int, pos: int) -> tuple[Token, int]:
        text = self.text
        while pos < len(text) and (text[pos].isalnum() or text[pos] in "-_"):
            pos += 1
        word = text[start:pos]
        lowered = _ascii_lower(word)

        if pos < len(text) and text[pos] == ":" and lowered in _SECTION_KEYWORDS:
            pos += 1
            return Token(_SECTION_KEYWORDS[lowered], Span(start, pos)), pos

        kind = _KEYWORDS.get(lowered)
        if kind is not None:
            return Token(kind, Span(start, pos)), pos
        return Token(TokenKind.IDENTIFIER, Span(start, pos), word), pos


def tokenize(text: str) -> list[Token]:
    """Return every token of ``text`` in order."""
    return list(Lexer(text))