"""Core tracecalc functionality: IR, expression language, exact float rendering, context loading."""

from . import ir
from .context_loader import ContextConfig, load_context, load_context_config
from .errors import (
    ContextConfigError,
    ErrorContext,
    ExpressionEvalError,
    ExpressionParseError,
    TracecalcError,
)
from .expression_lang import MappingContext, evaluate, parse_expr, parse_expression
from .float_format import double_to_decimal_string, float_to_decimal_string

__all__ = [
    "ir",
    "TracecalcError",
    "ExpressionParseError",
    "ExpressionEvalError",
    "ContextConfigError",
    "ErrorContext",
    "ContextConfig",
    "MappingContext",
    "load_context",
    "load_context_config",
    "evaluate",
    "parse_expr",
    "parse_expression",
    "float_to_decimal_string",
    "double_to_decimal_string",
]
