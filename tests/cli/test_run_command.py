#
# tests/cli/test_run_command.py
#
"""
Tests for the 'run' command and its argument parsing helpers.
"""

import operator

import pytest
from click.testing import CliRunner

from microtest.cli.main import cli
from microtest.cli.run_cmds import parse_argument_group, parse_expectation, resolve_target
from microtest.exceptions import ConfigurationError


class TestMainCLI:
    """Test main CLI entry point."""

    def test_cli_help(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "microtest" in result.output.lower()
        assert "run" in result.output

    def test_cli_version(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "0.2.0" in result.output

    def test_invalid_log_level(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["--log-level", "INVALID", "run", "--help"])
        assert result.exit_code != 0

    def test_json_logs_option(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["--json-logs", "run", "--help"])
        assert result.exit_code == 0


class TestRunCommand:
    """Test verification from the command line."""

    def test_run_help(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["run", "--help"])
        assert result.exit_code == 0
        assert "--args" in result.output
        assert "--expect" in result.output
        assert "--performance" in result.output

    def test_passing_run(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["run", "operator:add", "-a", "[24, 48]", "-e", "72", "-n", "3"])
        assert result.exit_code == 0
        assert "✓ operator:add test passed." in result.output

    def test_groups_with_predicate(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "run", "operator:add",
                "-a", "[24, 48]", "-a", "[162, 5]",
                "-e", "72", "-e", "@operator:truth",
                "--name", "Addition",
            ],
        )
        assert result.exit_code == 0
        assert "✓ Addition test passed." in result.output

    def test_failing_run(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["run", "operator:add", "-a", '["Hello", " world"]', "-e", "9"])
        assert result.exit_code == 1
        assert "Expected: 9" in result.output
        assert "Received: Hello world" in result.output

    def test_warn_failure_is_printed_once(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["run", "operator:add", "-a", "[1, 2]", "-e", "4", "--severity", "warn"])
        assert result.exit_code == 1
        assert result.output.count("test failed") == 1
        assert "Received: 3" in result.output

    def test_logged_report_is_printed_once(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli, ["--log-level", "INFO", "run", "operator:add", "-a", "[1, 2]", "-e", "3"]
        )
        assert result.exit_code == 0
        assert result.output.count("operator:add test passed.") == 1

    def test_error_severity(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli, ["run", "operator:add", "-a", "[1, 1]", "-e", "3", "--severity", "error", "--icons", "Y", "N"]
        )
        assert result.exit_code == 1
        assert "N operator:add test failed." in result.output

    def test_candidate_error_fails(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["run", "operator:truediv", "-a", "[1, 0]", "-e", "1"])
        assert result.exit_code == 1
        assert "test failed." in result.output

    def test_async_run(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["run", "asyncio:sleep", "--async", "-a", "[0.01, 5]", "-e", "5"])
        assert result.exit_code == 0
        assert "✓ asyncio:sleep test passed." in result.output

    def test_performance_table(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli, ["run", "operator:add", "-a", "[1, 2]", "-e", "3", "-n", "2", "--performance", "table"]
        )
        assert result.exit_code == 0
        assert "over 2 runs):" in result.output
        assert "Duration (ms)" in result.output

    @pytest.mark.parametrize(
        "arguments",
        [
            ["run", "no_such_module_for_microtest:fn"],
            ["run", "operator"],
            ["run", "operator:no_such_function"],
            ["run", "operator:add", "-a", "[1,"],
            ["run", "operator:add", "-a", "5"],
        ],
    )
    def test_configuration_errors(self, arguments) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, arguments)
        assert result.exit_code == 2
        assert "Error:" in result.output


class TestParsing:
    """Argument and expectation parsing."""

    def test_resolve_target(self) -> None:
        assert resolve_target("operator:add") is operator.add
        assert resolve_target("os:path.join").__name__ == "join"

    def test_resolve_non_callable(self) -> None:
        with pytest.raises(ConfigurationError, match="not callable"):
            resolve_target("math:pi")

    def test_parse_argument_group(self) -> None:
        assert parse_argument_group('[24, "a", null]') == (24, "a", None)
        assert parse_argument_group("[]") == ()

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("72", 72), ('"72"', "72"), ("hello", "hello"), ("null", None), ("[1, 2]", [1, 2])],
    )
    def test_parse_literal_expectation(self, text, expected) -> None:
        assert parse_expectation(text) == expected

    def test_parse_predicate_expectation(self) -> None:
        assert parse_expectation("@operator:truth") is operator.truth
