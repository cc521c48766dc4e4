"""
tracecalc Intermediate Representation (IR) types.

Expression tree nodes produced by the parser and consumed by the evaluator.
"""

from .expressions import (
    UINT64_MASK,
    BinaryExpr,
    BinaryOp,
    Constant,
    Expr,
    Negate,
    Scope,
    ScopedId,
    UnscopedId,
    dump,
    left_spine,
)

__all__ = [
    "UINT64_MASK",
    "BinaryExpr",
    "BinaryOp",
    "Constant",
    "Expr",
    "Negate",
    "Scope",
    "ScopedId",
    "UnscopedId",
    "dump",
    "left_spine",
]
