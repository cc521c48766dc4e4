"""
Error types for tracecalc expression parsing, evaluation, and configuration.
"""

from dataclasses import dataclass


class TracecalcError(Exception):
    """Base exception for all tracecalc errors."""

    def __init__(self, message: str, context: "ErrorContext | None" = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ExpressionParseError(TracecalcError):
    """
    Raised when an expression cannot be parsed.

    Examples:
    - Unexpected or invalid tokens
    - Missing closing parenthesis
    - Unknown identifier scope (anything other than ``reg``/``sym``)
    - Trailing input after a complete expression
    - Integer literal out of the 64-bit range
    """

    def __init__(self, message: str, pos: int = 0, source: str | None = None):
        self.pos = pos
        context = ErrorContext(source=source, pos=pos) if source is not None else None
        super().__init__(message, context)


class ExpressionEvalError(TracecalcError):
    """
    Raised when a parsed expression cannot be evaluated.

    The only semantic failure is an identifier that no applicable
    scope of the execution context knows about.
    """

    def __init__(self, message: str, name: str | None = None):
        self.name = name
        super().__init__(message)


class ContextConfigError(TracecalcError):
    """
    Raised when an execution context file cannot be loaded.

    Examples:
    - Missing file
    - Invalid TOML
    - Register/symbol values outside the 64-bit range
    """

    pass


@dataclass
class ErrorContext:
    """
    Location of an error inside an expression string.

    Attributes:
        source: The full expression text
        pos: Zero-based character offset of the offending token
    """

    source: str
    pos: int

    def format(self) -> str:
        """
        Format the expression with a marker under the error position.

        Returns:
            Two lines: the expression, then ``^`` under the column
        """
        column = max(0, min(self.pos, len(self.source)))
        return f"  {self.source}\n  {' ' * column}^"
