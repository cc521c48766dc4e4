"""
Tokenizer for the tracecalc expression language.

The lexer is a single forward pass holding exactly one token of lookahead:
``Lexer.current`` is the token under the cursor and ``advance()`` replaces it
with the next one.
"""

from __future__ import annotations

import re
from enum import StrEnum, auto

from tracecalc.core.errors import ExpressionParseError
from tracecalc.core.ir.expressions import UINT64_MASK


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Literals and names
    INT = auto()
    IDENT = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    LSHIFT = auto()
    RSHIFT = auto()
    SCOPE = auto()  # ::

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()

    # Any character the grammar has no use for
    INVALID = auto()

    # End of input
    EOF = auto()


class Token:
    """A single token from the expression lexer."""

    __slots__ = ("kind", "value", "pos")

    def __init__(self, kind: TokenKind, value: int | str, pos: int) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"


class ExpressionTokenError(ExpressionParseError):
    """Error during expression tokenization (malformed integer literal)."""


_WHITESPACE = " \t\n"

_HEX_RE = re.compile(r"0[xX]([0-9a-fA-F]*)")
_DEC_RE = re.compile(r"[0-9]+")
# Identifier: letter, underscore or dollar, then alphanumerics/underscores/dollars
_IDENT_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")

_TWO_CHAR: dict[str, TokenKind] = {
    "<<": TokenKind.LSHIFT,
    ">>": TokenKind.RSHIFT,
    "::": TokenKind.SCOPE,
}

_SINGLE_CHAR: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}


class Lexer:
    """Streaming lexer over an expression string."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0
        self.current = self._next_token()

    def advance(self) -> Token:
        """Consume the current token and return it."""
        tok = self.current
        if tok.kind != TokenKind.EOF:
            self.current = self._next_token()
        return tok

    def _next_token(self) -> Token:
        source = self.source
        n = len(source)
        i = self.pos

        while i < n and source[i] in _WHITESPACE:
            i += 1

        if i >= n:
            self.pos = n
            return Token(TokenKind.EOF, "", n)

        # Hexadecimal before decimal, since both start with a digit
        m = _HEX_RE.match(source, i)
        if m:
            if not m.group(1):
                raise ExpressionTokenError("malformed hexadecimal literal", i, source)
            self.pos = m.end()
            return Token(TokenKind.INT, _literal_value(m.group(0), m.group(1), 16, source, i), i)

        m = _DEC_RE.match(source, i)
        if m:
            self.pos = m.end()
            return Token(TokenKind.INT, _literal_value(m.group(0), m.group(0), 10, source, i), i)

        m = _IDENT_RE.match(source, i)
        if m:
            self.pos = m.end()
            return Token(TokenKind.IDENT, m.group(0), i)

        two = source[i : i + 2]
        if two in _TWO_CHAR:
            self.pos = i + 2
            return Token(_TWO_CHAR[two], two, i)

        c = source[i]
        self.pos = i + 1
        return Token(_SINGLE_CHAR.get(c, TokenKind.INVALID), c, i)


def _literal_value(text: str, digits: str, base: int, source: str, pos: int) -> int:
    """Convert literal digits, rejecting values that do not fit in 64 bits."""
    value = int(digits, base)
    if value > UINT64_MASK:
        raise ExpressionTokenError(f"integer literal out of range: {text}", pos, source)
    return value


def tokenize(source: str) -> list[Token]:
    """Tokenize an expression string into a list of tokens ending with EOF."""
    lexer = Lexer(source)
    tokens = [lexer.current]
    while lexer.current.kind != TokenKind.EOF:
        lexer.advance()
        tokens.append(lexer.current)
    return tokens
