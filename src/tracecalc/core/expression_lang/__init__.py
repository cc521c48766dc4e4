"""
tracecalc integer expression language.

Tokenizer, parser and evaluator for address/register arithmetic such as
``reg::sp + 0x10`` or ``main + (1 << 12)``.

Usage:
    from tracecalc.core.expression_lang import MappingContext, evaluate, parse_expr

    expr = parse_expr("pc + 4")
    result = evaluate(expr, MappingContext(registers={"pc": 0x8000}))
    # result == 0x8004
"""

from tracecalc.core.expression_lang.evaluator import (
    EvalResult,
    ExecutionContext,
    MappingContext,
    evaluate,
    try_evaluate,
)
from tracecalc.core.expression_lang.parser import ParseResult, parse_expr, parse_expression

__all__ = [
    "EvalResult",
    "ExecutionContext",
    "MappingContext",
    "ParseResult",
    "evaluate",
    "parse_expr",
    "parse_expression",
    "try_evaluate",
]
