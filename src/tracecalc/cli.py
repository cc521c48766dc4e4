"""
tracecalc command line interface.

Commands:
  • eval: parse and evaluate a register/symbol expression
  • float / double: render an IEEE-754 bit pattern exactly in decimal
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from tracecalc._version import get_version
from tracecalc.core.context_loader import load_context, parse_assignment
from tracecalc.core.errors import ContextConfigError, ExpressionEvalError, ExpressionParseError
from tracecalc.core.expression_lang import MappingContext, evaluate, parse_expr
from tracecalc.core.float_format import FLOAT32, FLOAT64, FloatFormat
from tracecalc.core.ir import Scope, dump

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="tracecalc – exact float rendering and trace expression evaluation",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tracecalc {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """tracecalc CLI main callback for global options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _build_context(context_file: Path | None, regs: list[str], syms: list[str]) -> MappingContext:
    """Load the optional context file, then apply NAME=VALUE overrides."""
    try:
        context = load_context(context_file) if context_file else MappingContext()
        for text in regs:
            name, value = parse_assignment(text)
            context.bind(name, value, Scope.REGISTER)
        for text in syms:
            name, value = parse_assignment(text)
            context.bind(name, value, Scope.SYMBOL)
    except ContextConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    return context


@app.command("eval")
def eval_command(
    expression: str = typer.Argument(..., help="Expression, e.g. 'reg::sp + 0x10'"),
    context_file: Path | None = typer.Option(
        None, "--context", "-c", help="TOML file with [registers] and [symbols] tables"
    ),
    reg: list[str] = typer.Option([], "--reg", "-r", help="Register value NAME=VALUE"),
    sym: list[str] = typer.Option([], "--sym", "-s", help="Symbol value NAME=VALUE"),
    show_tree: bool = typer.Option(False, "--dump", help="Print the parsed tree instead of evaluating"),
    decimal: bool = typer.Option(False, "--decimal", "-d", help="Print the result in decimal"),
) -> None:
    """Parse and evaluate an expression."""
    try:
        expr = parse_expr(expression)
    except ExpressionParseError as e:
        typer.echo(f"Parse error: {e.message}", err=True)
        if e.context:
            typer.echo(e.context.format(), err=True)
        raise typer.Exit(code=1)

    if show_tree:
        typer.echo(dump(expr))
        return

    context = _build_context(context_file, reg, sym)
    try:
        value = evaluate(expr, context)
    except ExpressionEvalError as e:
        typer.echo(f"Evaluation error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(str(value) if decimal else f"{value:#x}")


def _render(fmt: FloatFormat, bits: str) -> None:
    try:
        pattern = int(bits, 0)
    except ValueError:
        raise typer.BadParameter(f"not an integer literal: {bits!r}", param_hint="BITS")
    if not 0 <= pattern < 1 << fmt.width:
        raise typer.BadParameter(f"does not fit in {fmt.width} bits: {bits}", param_hint="BITS")
    typer.echo(fmt.render(pattern))


@app.command("float")
def float_command(
    bits: str = typer.Argument(..., help="32-bit pattern, e.g. 0x3f800000"),
) -> None:
    """Render a binary32 bit pattern with 9 significant digits."""
    _render(FLOAT32, bits)


@app.command("double")
def double_command(
    bits: str = typer.Argument(..., help="64-bit pattern, e.g. 0x3ff0000000000000"),
) -> None:
    """Render a binary64 bit pattern with 17 significant digits."""
    _render(FLOAT64, bits)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
