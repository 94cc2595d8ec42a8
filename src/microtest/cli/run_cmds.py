# src/microtest/cli/run_cmds.py

import asyncio
import importlib
import json
from typing import Any

import click
import structlog

from microtest.cli.utils import logging_options, setup_logging_from_context
from microtest.config import PerformanceFormat, Severity
from microtest.exceptions import ConfigurationError, VerificationFailedError
from microtest.report import report_level
from microtest.runner import MicroTestRunner
from microtest.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.run")

PREDICATE_PREFIX = "@"


def resolve_target(target: str) -> Any:
    """
    Imports `package.module:attribute.path` and returns the attribute.
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ConfigurationError(f"Target '{target}' must look like 'package.module:callable'.")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import module '{module_name}': {e}") from e

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ConfigurationError(f"'{module_name}' has no attribute '{attr_path}'.") from e

    if not callable(obj):
        raise ConfigurationError(f"Target '{target}' is not callable.")
    return obj


def parse_argument_group(text: str) -> tuple[Any, ...]:
    """Parses one argument group, given as a JSON array."""
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Arguments '{text}' are not valid JSON: {e}") from e
    if not isinstance(value, list):
        raise ConfigurationError(f"Arguments '{text}' must be a JSON array.")
    return tuple(value)


def parse_expectation(text: str) -> Any:
    """
    Parses one expectation: `@module:callable` names a predicate, anything else
    is a JSON literal. Text that is not valid JSON is taken as a plain string.
    """
    if text.startswith(PREDICATE_PREFIX):
        return resolve_target(text[len(PREDICATE_PREFIX):])
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def build_runner(
    target: str,
    argument_groups: tuple[str, ...],
    times: float,
    use_async: bool,
    name: str | None,
    severity: str,
    performance: str,
    icons: tuple[str, str] | None,
) -> MicroTestRunner:
    """Creates a configured runner from command line values."""
    runner = MicroTestRunner(resolve_target(target)).repeat(times)
    for group in argument_groups:
        runner.with_arguments(*parse_argument_group(group))
    if use_async:
        runner.enable_async()
    return runner.configure_reporting(
        name or target,
        severity=Severity.coerce(severity),
        icons=icons,
        performance=PerformanceFormat.coerce(performance),
    )


@click.command(name="run")
@click.argument("target")
@click.option(
    "-a",
    "--args",
    "argument_groups",
    multiple=True,
    help='One argument group as a JSON array, e.g. \'[24, 48]\'. Repeatable.',
)
@click.option(
    "-e",
    "--expect",
    "expectations",
    multiple=True,
    help="Expected result as JSON, or '@module:callable' for a predicate. Repeatable.",
)
@click.option("-n", "--times", type=float, default=1, show_default=True, help="Runs per argument group.")
@click.option("--async", "use_async", is_flag=True, help="Await the candidate's results.")
@click.option("--name", default=None, help="Test name used in the report (defaults to TARGET).")
@click.option(
    "--severity",
    type=click.Choice(["info", "warn", "error"], case_sensitive=False),
    default="info",
    show_default=True,
    envvar="MICROTEST_SEVERITY",
    show_envvar=True,
    help="How a failure is reported.",
)
@click.option(
    "--performance",
    type=click.Choice([fmt.value for fmt in PerformanceFormat], case_sensitive=False),
    default=PerformanceFormat.NONE.value,
    show_default=True,
    envvar="MICROTEST_PERFORMANCE",
    show_envvar=True,
    help="Include run timings in the report.",
)
@click.option("--icons", nargs=2, default=None, help="Pass and fail icons.")
@logging_options
@click.pass_context
def run_cli(
    ctx: click.Context,
    target: str,
    argument_groups: tuple[str, ...],
    expectations: tuple[str, ...],
    times: float,
    use_async: bool,
    name: str | None,
    severity: str,
    performance: str,
    icons: tuple[str, str] | None,
    **kwargs,
):
    """Verify TARGET (package.module:callable) and print the report."""
    global_config = setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
    )
    log.info("Executing 'run' command", target=target, groups=len(argument_groups))

    try:
        runner = build_runner(
            target, argument_groups, times, use_async, name, severity, performance, icons
        )
        validators = [parse_expectation(text) for text in expectations]
    except ConfigurationError as e:
        log.error("Invalid run configuration", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(2)

    try:
        if use_async:
            passed = asyncio.run(runner.expect_async(*validators))
        else:
            passed = runner.expect(*validators)
    except VerificationFailedError as e:
        click.echo(str(e), err=True)
        ctx.exit(1)

    # The runner already logged the report when the configured level shows it.
    if report_level(runner.result, runner.report_config) < global_config.numeric_log_level:
        click.echo(runner.report)
    log.info("'run' command finished.", passed=passed)
    if not passed:
        ctx.exit(1)

# 🔼⚙️
