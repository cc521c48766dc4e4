"""
Expression tree types for the tracecalc integer expression language.

Supports:
- Unsigned 64-bit integer constants: 42, 0x1000
- Arithmetic: +, -, * (wrapping modulo 2**64), unary -
- Shifts: <<, >> (shift by 64 or more yields 0)
- Identifiers: pc (register first, then symbol), reg::pc, sym::main
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

UINT64_MASK = (1 << 64) - 1

# ---------------------------------------------------------------------------
# Operators and scopes
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary operators for expressions."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    SHL = "<<"
    SHR = ">>"


# Binding strength, loosest first
_PRECEDENCE: dict[BinaryOp, int] = {
    BinaryOp.SHL: 0,
    BinaryOp.SHR: 0,
    BinaryOp.ADD: 1,
    BinaryOp.SUB: 1,
    BinaryOp.MUL: 2,
}


class Scope(StrEnum):
    """Identifier lookup namespaces, named by their source-level prefix."""

    REGISTER = "reg"
    SYMBOL = "sym"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Constant(BaseModel):
    """An integer literal."""

    value: int = Field(ge=0, le=UINT64_MASK, description="Unsigned 64-bit value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if self.value < 10:
            return str(self.value)
        return f"{self.value:#x}"


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return _render_source(self)


class Negate(BaseModel):
    """Two's-complement negation."""

    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return _render_source(self)


class UnscopedId(BaseModel):
    """
    A bare identifier.

    Resolved against registers first, then symbols.
    """

    name: str = Field(description="Identifier name")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class ScopedId(BaseModel):
    """
    An identifier restricted to one scope: reg::name or sym::name.
    """

    name: str = Field(description="Identifier name")
    scope: Scope = Field(description="Namespace the name is looked up in")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.scope.value}::{self.name}"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Constant | BinaryExpr | Negate | UnscopedId | ScopedId

# Rebuild models for recursive forward references
BinaryExpr.model_rebuild()
Negate.model_rebuild()


_SCOPE_DUMP_NAMES: dict[Scope, str] = {
    Scope.REGISTER: "register-id",
    Scope.SYMBOL: "symbol-id",
}


def left_spine(expr: Expr) -> tuple[Expr, list[BinaryExpr | Negate]]:
    """Split a tree into its bottom-left leaf and the operator nodes above it.

    Left operands and negated operands are followed in a loop, so long
    operator chains such as ``1 + 1 + ... + 1`` or ``---x`` cost no stack.
    The nodes are returned innermost first.
    """
    chain: list[BinaryExpr | Negate] = []
    while isinstance(expr, (BinaryExpr, Negate)):
        chain.append(expr)
        expr = expr.left if isinstance(expr, BinaryExpr) else expr.operand
    chain.reverse()
    return expr, chain


def _render_source(expr: Expr) -> str:
    """Infix source text with only the parentheses the grammar needs."""
    leaf, chain = left_spine(expr)
    text = str(leaf)
    below: Expr = leaf
    for node in chain:
        if isinstance(node, Negate):
            text = f"-({text})" if isinstance(below, BinaryExpr) else f"-{text}"
        else:
            precedence = _PRECEDENCE[node.op]
            if isinstance(below, BinaryExpr) and _PRECEDENCE[below.op] < precedence:
                text = f"({text})"
            right = str(node.right)
            # Equal precedence on the right needs grouping: operators are left-associative
            if isinstance(node.right, BinaryExpr) and _PRECEDENCE[node.right.op] <= precedence:
                right = f"({right})"
            text = f"{text} {node.op.value} {right}"
        below = node
    return text


def _dump_leaf(expr: Expr) -> str:
    if isinstance(expr, Constant):
        return f"(const {expr.value})"
    if isinstance(expr, UnscopedId):
        return f"(unscoped-id {expr.name})"
    if isinstance(expr, ScopedId):
        return f"({_SCOPE_DUMP_NAMES[expr.scope]} {expr.name})"
    raise TypeError(f"Unknown expression type: {type(expr).__name__}")


def dump(expr: Expr) -> str:
    """Render an expression tree as a debugging S-expression.

    Examples:
        - Constant(value=5) → (const 5)
        - 1 + x → (+ (const 1) (unscoped-id x))
        - -reg::sp → (- (register-id sp))
    """
    leaf, chain = left_spine(expr)
    text = _dump_leaf(leaf)
    for node in chain:
        if isinstance(node, Negate):
            text = f"(- {text})"
        else:
            text = f"({node.op.value} {text} {dump(node.right)})"
    return text
