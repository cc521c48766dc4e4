"""
Expression evaluator for the tracecalc expression language.

Evaluates expression AST nodes against an execution context that resolves
register and symbol names. Pure evaluation: no caching between calls, so
the same tree can be re-evaluated as the context changes.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from tracecalc.core.errors import ExpressionEvalError
from tracecalc.core.ir.expressions import (
    UINT64_MASK,
    BinaryOp,
    Constant,
    Expr,
    Negate,
    Scope,
    ScopedId,
    UnscopedId,
    left_spine,
)

logger = logging.getLogger(__name__)

# Lookup order for bare identifiers
UNSCOPED_LOOKUP_ORDER: tuple[Scope, ...] = (Scope.REGISTER, Scope.SYMBOL)


@runtime_checkable
class ExecutionContext(Protocol):
    """Name resolution for identifiers, supplied by the caller."""

    def lookup(self, name: str, scope: Scope) -> int | None:
        """Return the value bound to ``name`` in ``scope``, or None."""
        ...


class MappingContext:
    """Execution context backed by plain register and symbol dicts."""

    def __init__(
        self,
        registers: Mapping[str, int] | None = None,
        symbols: Mapping[str, int] | None = None,
    ) -> None:
        self._tables: dict[Scope, dict[str, int]] = {
            Scope.REGISTER: {k: v & UINT64_MASK for k, v in (registers or {}).items()},
            Scope.SYMBOL: {k: v & UINT64_MASK for k, v in (symbols or {}).items()},
        }

    @property
    def registers(self) -> dict[str, int]:
        return self._tables[Scope.REGISTER]

    @property
    def symbols(self) -> dict[str, int]:
        return self._tables[Scope.SYMBOL]

    def bind(self, name: str, value: int, scope: Scope) -> None:
        self._tables[scope][name] = value & UINT64_MASK

    def lookup(self, name: str, scope: Scope) -> int | None:
        return self._tables[scope].get(name)

    def __repr__(self) -> str:
        return f"MappingContext(registers={self.registers!r}, symbols={self.symbols!r})"


def evaluate(expr: Expr, context: ExecutionContext) -> int:
    """Evaluate an expression against an execution context.

    Arithmetic wraps modulo 2**64, matching unsigned 64-bit registers.

    Args:
        expr: Parsed expression AST.
        context: Resolves identifiers in the register and symbol scopes.

    Returns:
        The computed unsigned 64-bit value.

    Raises:
        ExpressionEvalError: If an identifier cannot be resolved, or a
            hand-built tree nests right operands too deeply to walk.
    """
    try:
        return _interpret(expr, context)
    except RecursionError:
        raise ExpressionEvalError("expression too deeply nested") from None


def _interpret(expr: Expr, ctx: ExecutionContext) -> int:
    """Evaluate the left spine in a loop; only right operands recurse."""
    leaf, chain = left_spine(expr)
    value = _interpret_leaf(leaf, ctx)
    for node in chain:
        if isinstance(node, Negate):
            value = -value & UINT64_MASK
        else:
            value = _interpret_binary(node.op, value, _interpret(node.right, ctx))
    return value


def _interpret_leaf(expr: Expr, ctx: ExecutionContext) -> int:
    """Dispatch evaluation of a leaf to the appropriate handler."""
    if isinstance(expr, Constant):
        return expr.value

    if isinstance(expr, UnscopedId):
        return _interpret_unscoped(expr, ctx)

    if isinstance(expr, ScopedId):
        return _interpret_scoped(expr, ctx)

    raise TypeError(f"Unknown expression type: {type(expr).__name__}")


def _interpret_binary(op: BinaryOp, left: int, right: int) -> int:
    """Apply a binary operator to already evaluated operands."""
    if op == BinaryOp.ADD:
        return (left + right) & UINT64_MASK
    if op == BinaryOp.SUB:
        return (left - right) & UINT64_MASK
    if op == BinaryOp.MUL:
        return (left * right) & UINT64_MASK
    # Shifting by the full width or more is defined to give 0
    if op == BinaryOp.SHL:
        return 0 if right >= 64 else (left << right) & UINT64_MASK
    if op == BinaryOp.SHR:
        return 0 if right >= 64 else left >> right

    raise TypeError(f"Unknown binary op: {op}")


def _interpret_unscoped(expr: UnscopedId, ctx: ExecutionContext) -> int:
    for scope in UNSCOPED_LOOKUP_ORDER:
        value = ctx.lookup(expr.name, scope)
        if value is not None:
            return value & UINT64_MASK
    logger.debug("No register or symbol named %r", expr.name)
    raise ExpressionEvalError(f"unrecognised symbol name '{expr.name}'", expr.name)


def _interpret_scoped(expr: ScopedId, ctx: ExecutionContext) -> int:
    value = ctx.lookup(expr.name, expr.scope)
    if value is None:
        logger.debug("No %s named %r", expr.scope.name.lower(), expr.name)
        raise ExpressionEvalError(f"unrecognised identifier name '{expr.name}'", expr.name)
    return value & UINT64_MASK


@dataclass(frozen=True)
class EvalResult:
    """Outcome of ``try_evaluate``: a value or an error message."""

    value: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.value is not None


def try_evaluate(expr: Expr, context: ExecutionContext) -> EvalResult:
    """Evaluate without raising; the error message is returned instead."""
    try:
        return EvalResult(value=evaluate(expr, context))
    except ExpressionEvalError as e:
        return EvalResult(error=e.message)
