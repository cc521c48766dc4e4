"""
tracecalc - exact float rendering and register/symbol expression evaluation
for trace analysis tools.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.errors import (
    ContextConfigError,
    ExpressionEvalError,
    ExpressionParseError,
    TracecalcError,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "TracecalcError",
    "ExpressionParseError",
    "ExpressionEvalError",
    "ContextConfigError",
]
