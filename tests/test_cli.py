# tests/test_cli.py

import json

import pytest
from click.testing import CliRunner

from trigeval.cli.main import cli
from trigeval.config import TrigevalConfig
from trigeval.core.evaluator import BENCHMARK_EXPRESSIONS

# --- Test Fixtures ---

@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, args):
    """Invokes the CLI with default configuration (no config files or env)."""
    return runner.invoke(cli, args, obj={"config": TrigevalConfig()})

# --- General ---

def test_cli_help(runner):
    """Test the main help message."""
    result = invoke(runner, ["--help"])
    assert result.exit_code == 0
    assert "trigeval: validate, evaluate and sample formulas" in result.output
    assert "Commands:" in result.output
    for command in ("validate", "eval", "sample", "benchmark"):
        assert command in result.output


def test_cli_version(runner):
    result = invoke(runner, ["--version"])
    assert result.exit_code == 0
    assert "trigeval, version 1.0.0" in result.output.lower()


def test_cli_setup_failure(runner, mocker):
    mocker.patch("trigeval.cli.base_cmd.load_configuration", side_effect=RuntimeError("bad config"))
    result = runner.invoke(cli, ["eval", "t"])
    assert result.exit_code == 1
    assert "CRITICAL SETUP ERROR" in result.output

# --- validate ---

def test_validate_valid_expression(runner):
    result = invoke(runner, ["validate", "sin(t) + a"])
    assert result.exit_code == 0
    assert "valid" in result.output
    assert "sin" in result.output


def test_validate_invalid_expression_json(runner):
    result = invoke(runner, ["-q", "validate", "--json", "eval(1)"])
    assert result.exit_code == 1
    payload = json.loads(result.output)
    assert payload["is_valid"] is False
    assert "Forbidden pattern detected: eval function" in payload["errors"]

# --- eval ---

def test_eval_prints_value(runner):
    result = invoke(runner, ["-q", "eval", "cos(t)"])
    assert result.exit_code == 0
    assert result.output.splitlines()[0] == "1.0"


def test_eval_with_parameters(runner):
    result = invoke(runner, ["-q", "eval", "a * t + time", "-t", "2", "--time", "1", "--var", "a=3"])
    assert result.exit_code == 0
    assert result.output.splitlines()[0] == "7.0"


def test_eval_failure_prints_zero(runner):
    result = invoke(runner, ["-q", "eval", "foo(t)"])
    assert result.exit_code == 0
    assert result.output.splitlines()[0] == "0.0"


def test_eval_strict_failure(runner):
    result = invoke(runner, ["-q", "eval", "--strict", "foo(t)"])
    assert result.exit_code == 1
    assert result.output.splitlines()[0] == "0.0"
    assert "Unknown or forbidden function: foo" in result.output


def test_eval_bad_variable(runner):
    result = invoke(runner, ["-q", "eval", "t", "--var", "oops"])
    assert result.exit_code == 2
    assert "NAME=VALUE" in result.output

# --- sample ---

def test_sample_to_csv(runner, tmp_path):
    out = tmp_path / "curve.csv"
    result = invoke(runner, ["-q", "sample", "cos(t)", "sin(t)", "--steps", "20", "-o", str(out)])
    assert result.exit_code == 0
    assert "Saved 21 points" in result.output
    assert out.exists()
    assert len(out.read_text(encoding="utf-8").strip().splitlines()) == 22 # header + points


def test_sample_summary(runner):
    result = invoke(runner, ["-q", "sample", "cos(t)", "sin(t)", "--steps", "8"])
    assert result.exit_code == 0
    assert "Curve Samples" in result.output
    assert "x_max" in result.output


def test_sample_invalid_expression(runner):
    result = invoke(runner, ["-q", "sample", "cos(t", "sin(t)"])
    assert result.exit_code == 1
    assert "x expression is invalid" in result.output


def test_sample_unsupported_format(runner, tmp_path):
    result = invoke(runner, ["-q", "sample", "t", "t", "--steps", "2", "-o", str(tmp_path / "c.txt")])
    assert result.exit_code == 2
    assert "Unsupported output format" in result.output

# --- benchmark ---

def test_benchmark_json(runner):
    result = invoke(runner, ["-q", "benchmark", "-n", "16", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["iterations"] == 16
    assert payload["success_rate"] == 100.0
    assert payload["evaluation_stats"]["total_evaluations"] == 16
    assert payload["cache_stats"]["expression_cache_size"] == len(BENCHMARK_EXPRESSIONS)


def test_benchmark_table(runner):
    result = invoke(runner, ["-q", "benchmark", "-n", "8"])
    assert result.exit_code == 0
    assert "Benchmark" in result.output
    assert "Success rate" in result.output
