"""
Recursive descent parser for the tracecalc expression language.

Grammar (precedence low to high):
    expr     → add (("<<" | ">>") add)*
    add      → mul (("+" | "-") mul)*
    mul      → unary ("*" unary)*
    unary    → "+"* primary | "-" unary
    primary  → INT | IDENT ("::" IDENT)? | "(" expr ")"

All binary operators are left-associative.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TextIO

from tracecalc.core.errors import ExpressionParseError
from tracecalc.core.expression_lang.tokenizer import Lexer, TokenKind
from tracecalc.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    Constant,
    Expr,
    Negate,
    Scope,
    ScopedId,
    UnscopedId,
)

logger = logging.getLogger(__name__)

_SHIFT_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.LSHIFT: BinaryOp.SHL,
    TokenKind.RSHIFT: BinaryOp.SHR,
}

_ADD_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.PLUS: BinaryOp.ADD,
    TokenKind.MINUS: BinaryOp.SUB,
}

# Parenthesised sub-expressions are the only construct that recurses
MAX_NESTING_DEPTH = 100


class _Parser:
    """Recursive descent parser driven by a one-token-lookahead lexer."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.lexer = Lexer(source)
        self.depth = 0

    def error(self, message: str) -> ExpressionParseError:
        return ExpressionParseError(message, self.lexer.current.pos, self.source)

    # -- Grammar rules --

    def parse_expr(self) -> Expr:
        """add (('<<' | '>>') add)*"""
        left = self.parse_add()
        while self.lexer.current.kind in _SHIFT_OPS:
            op = _SHIFT_OPS[self.lexer.advance().kind]
            right = self.parse_add()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_add(self) -> Expr:
        """mul (('+' | '-') mul)*"""
        left = self.parse_mul()
        while self.lexer.current.kind in _ADD_OPS:
            op = _ADD_OPS[self.lexer.advance().kind]
            right = self.parse_mul()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_mul(self) -> Expr:
        """unary ('*' unary)*"""
        left = self.parse_unary()
        while self.lexer.current.kind == TokenKind.STAR:
            self.lexer.advance()
            right = self.parse_unary()
            left = BinaryExpr(op=BinaryOp.MUL, left=left, right=right)
        return left

    def parse_unary(self) -> Expr:
        """'+'* primary | '-' unary"""
        negations = 0
        while self.lexer.current.kind in (TokenKind.PLUS, TokenKind.MINUS):
            if self.lexer.advance().kind == TokenKind.MINUS:
                negations += 1

        expr = self.parse_primary()
        for _ in range(negations):
            expr = Negate(operand=expr)
        return expr

    def parse_primary(self) -> Expr:
        """INT | IDENT ('::' IDENT)? | '(' expr ')'"""
        tok = self.lexer.current

        if tok.kind == TokenKind.INT:
            self.lexer.advance()
            assert isinstance(tok.value, int)
            return Constant(value=tok.value)

        if tok.kind == TokenKind.IDENT:
            self.lexer.advance()
            if self.lexer.current.kind != TokenKind.SCOPE:
                return UnscopedId(name=str(tok.value))
            self.lexer.advance()
            if self.lexer.current.kind != TokenKind.IDENT:
                raise self.error("expected an identifier after '::'")
            name = str(self.lexer.advance().value)
            return ScopedId(name=name, scope=_parse_scope(str(tok.value), tok.pos, self.source))

        if tok.kind == TokenKind.LPAREN:
            if self.depth >= MAX_NESTING_DEPTH:
                raise self.error("expression too deeply nested")
            self.lexer.advance()
            self.depth += 1
            expr = self.parse_expr()
            if self.lexer.current.kind != TokenKind.RPAREN:
                raise self.error("expected closing ')'")
            self.lexer.advance()
            self.depth -= 1
            return expr

        if tok.kind == TokenKind.EOF:
            raise self.error("unexpected end of expression")

        raise self.error(f"unexpected token {tok.value!r}")


def _parse_scope(scope_name: str, pos: int, source: str) -> Scope:
    """Map a scope prefix to its Scope; only 'reg' and 'sym' exist."""
    try:
        return Scope(scope_name)
    except ValueError:
        raise ExpressionParseError(
            f"unrecognised identifier scope '{scope_name}'", pos, source
        ) from None


def parse_expr(source: str) -> Expr:
    """Parse an expression string into an AST.

    Args:
        source: Expression string (e.g., "reg::sp + 0x10")

    Returns:
        Parsed expression AST.

    Raises:
        ExpressionParseError: If the expression is invalid.
    """
    parser = _Parser(source)
    expr = parser.parse_expr()

    # Ensure all tokens consumed
    if parser.lexer.current.kind != TokenKind.EOF:
        raise parser.error("unexpected tokens after expression")

    return expr


@dataclass(frozen=True)
class ParseResult:
    """Outcome of ``parse_expression``: a complete tree or an error message."""

    expr: Expr | None = None
    error: str | None = None
    pos: int | None = None

    @property
    def ok(self) -> bool:
        return self.expr is not None

    def unwrap(self) -> Expr:
        """Return the tree, or raise the recorded parse error."""
        if self.expr is None:
            raise ExpressionParseError(self.error or "parse failed", self.pos or 0)
        return self.expr


def parse_expression(source: str, error: TextIO | None = None) -> ParseResult:
    """Parse a complete expression without raising.

    On failure the message is written to ``error`` (if given) and the
    result carries no tree; partial parses are never returned.
    """
    try:
        return ParseResult(expr=parse_expr(source))
    except ExpressionParseError as e:
        logger.debug("Failed to parse %r: %s", source, e.message)
        if error is not None:
            error.write(e.message)
        return ParseResult(error=e.message, pos=e.pos)
