"""Shared pytest fixtures for tracecalc tests."""

from pathlib import Path

import pytest

from tracecalc.core.expression_lang import MappingContext
from tracecalc.core.float_format import PowerCache


@pytest.fixture
def trace_context() -> MappingContext:
    """Context where ``x`` is both a register (5) and a symbol (9)."""
    return MappingContext(
        registers={"x": 5, "pc": 0x8000, "sp": 0xFFFFFFF0},
        symbols={"x": 9, "main": 0x1000},
    )


@pytest.fixture
def power_cache() -> PowerCache:
    """A fresh, empty power cache independent of the process-wide one."""
    return PowerCache()


@pytest.fixture
def context_file(tmp_path: Path) -> Path:
    """Write a TOML execution context and return its path."""
    path = tmp_path / "context.toml"
    path.write_text(
        """
[registers]
pc = 0x8000
sp = "0xfffffff0"
x = 5

[symbols]
main = 4096
x = 9
"""
    )
    return path
