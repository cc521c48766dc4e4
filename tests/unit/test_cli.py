"""Tests for CLI commands."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from tracecalc import __version__
from tracecalc._version import _checkout_version
from tracecalc.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


def test_version(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"tracecalc {__version__}" in result.stdout


def test_eval_constant_prints_hex(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "0x10 + 2 * 3"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "0x16"


def test_eval_decimal_output(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "--decimal", "1 << 10"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "1024"


def test_eval_wraps_to_64_bits(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "0 - 1"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "0xffffffffffffffff"


def test_eval_with_register_and_symbol_overrides(cli_runner: CliRunner):
    result = cli_runner.invoke(
        app,
        ["eval", "--reg", "x=5", "--sym", "x=0x9", "-d", "x + reg::x * sym::x"],
    )
    assert result.exit_code == 0
    # Unscoped x resolves to the register
    assert result.stdout.strip() == "50"


def test_eval_with_context_file(cli_runner: CliRunner, context_file: Path):
    result = cli_runner.invoke(app, ["eval", "--context", str(context_file), "reg::sp + sym::main"])
    assert result.exit_code == 0
    assert result.stdout.strip() == hex(0xFFFFFFF0 + 0x1000)


def test_override_replaces_context_file_value(cli_runner: CliRunner, context_file: Path):
    result = cli_runner.invoke(
        app, ["eval", "-c", str(context_file), "-r", "pc=1", "-d", "pc"]
    )
    assert result.exit_code == 0
    assert result.stdout.strip() == "1"


def test_eval_dump(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "--dump", "reg::sp + 0x10"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "(+ (register-id sp) (const 16))"


def test_eval_parse_error(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "1 +"])
    assert result.exit_code == 1
    assert "Parse error: unexpected end of expression" in result.output
    assert "  1 +\n" in result.output
    assert "^" in result.output


def test_eval_unknown_identifier(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "missing + 1"])
    assert result.exit_code == 1
    assert "Evaluation error: unrecognised symbol name 'missing'" in result.output


def test_eval_bad_override(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "--reg", "pc", "pc"])
    assert result.exit_code == 1
    assert "Expected NAME=VALUE" in result.output


def test_eval_missing_context_file(cli_runner: CliRunner, tmp_path: Path):
    result = cli_runner.invoke(app, ["eval", "-c", str(tmp_path / "nope.toml"), "1"])
    assert result.exit_code == 1
    assert "Context file not found" in result.output


def test_float_command(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["float", "0x40490fdb"])
    assert result.exit_code == 0
    assert result.stdout.rstrip("\n") == " 3.14159274e+00"


def test_double_command(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["double", "0x3ff0000000000001"])
    assert result.exit_code == 0
    assert result.stdout.rstrip("\n") == " 1.0000000000000002e+00"


def test_double_accepts_decimal_bits(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["double", "0"])
    assert result.exit_code == 0
    assert result.stdout.rstrip("\n") == " 0.0000000000000000e+00"


def test_float_rejects_bad_bits(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["float", "pi"])
    assert result.exit_code == 2


def test_float_rejects_wide_pattern(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["float", "0x100000000"])
    assert result.exit_code == 2


def test_checkout_version_reads_project_table(tmp_path: Path):
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text('[project]\nname = "tracecalc"\nversion = "9.8.7"\n')
    assert _checkout_version(pyproject) == "9.8.7"


def test_checkout_version_ignores_other_projects(tmp_path: Path):
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text('[project]\nname = "something-else"\nversion = "1.0"\n')
    assert _checkout_version(pyproject) is None
    assert _checkout_version(tmp_path / "missing.toml") is None
