"""
Execution context configuration for tracecalc.

Register and symbol values are loaded from a TOML file:

    [registers]
    pc = 0x8000
    sp = "0xfffffff0"

    [symbols]
    main = 0x1000
"""

from __future__ import annotations

import logging
import re
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from tracecalc.core.errors import ContextConfigError
from tracecalc.core.expression_lang.evaluator import MappingContext
from tracecalc.core.ir.expressions import UINT64_MASK

logger = logging.getLogger(__name__)

_IDENT_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


def _coerce_value(value: Any) -> int:
    """Accept ints, or strings holding a decimal/hex integer literal."""
    if isinstance(value, bool):
        raise ValueError("booleans are not register values")
    if isinstance(value, str):
        try:
            value = int(value.strip(), 0)
        except ValueError:
            raise ValueError(f"not an integer literal: {value!r}") from None
    if not isinstance(value, int):
        raise ValueError(f"expected an integer, got {type(value).__name__}")
    if not 0 <= value <= UINT64_MASK:
        raise ValueError(f"value {value} does not fit in 64 bits")
    return value


class ContextConfig(BaseModel):
    """Register and symbol tables for an execution context."""

    registers: dict[str, int] = Field(default_factory=dict)
    symbols: dict[str, int] = Field(default_factory=dict)

    @field_validator("registers", "symbols", mode="before")
    @classmethod
    def validate_table(cls, table: Any) -> dict[str, int]:
        if not isinstance(table, dict):
            raise ValueError("expected a table of name = value entries")
        result: dict[str, int] = {}
        for name, value in table.items():
            if not _IDENT_RE.fullmatch(name):
                raise ValueError(f"invalid identifier name: {name!r}")
            result[name] = _coerce_value(value)
        return result

    def to_context(self) -> MappingContext:
        return MappingContext(registers=self.registers, symbols=self.symbols)


def load_context_config(toml_path: Path) -> ContextConfig:
    """
    Load context configuration from a TOML file.

    Args:
        toml_path: Path to the context file

    Returns:
        Validated ContextConfig

    Raises:
        ContextConfigError: If the file is missing or malformed
    """
    if not toml_path.exists():
        raise ContextConfigError(f"Context file not found: {toml_path}")

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ContextConfigError(f"Invalid TOML in {toml_path}: {e}") from e

    unknown = set(data) - {"registers", "symbols"}
    if unknown:
        logger.warning("Ignoring unknown sections in %s: %s", toml_path, ", ".join(sorted(unknown)))

    try:
        config = ContextConfig(
            registers=data.get("registers", {}),
            symbols=data.get("symbols", {}),
        )
    except ValidationError as e:
        raise ContextConfigError(f"Invalid context in {toml_path}: {e}") from e

    logger.debug(
        "Loaded %d registers and %d symbols from %s",
        len(config.registers),
        len(config.symbols),
        toml_path,
    )
    return config


def load_context(toml_path: Path) -> MappingContext:
    """Load a TOML context file straight into a MappingContext."""
    return load_context_config(toml_path).to_context()


def parse_assignment(text: str) -> tuple[str, int]:
    """
    Parse a ``name=value`` override as given on the command line.

    Raises:
        ContextConfigError: If the name or value is malformed
    """
    name, sep, raw = text.partition("=")
    name = name.strip()
    if not sep or not _IDENT_RE.fullmatch(name):
        raise ContextConfigError(f"Expected NAME=VALUE, got {text!r}")
    try:
        return name, _coerce_value(raw)
    except ValueError as e:
        raise ContextConfigError(f"Bad value for {name}: {e}") from e
