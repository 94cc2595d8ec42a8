# src/microtest/report.py

"""
Renders and emits the human-readable report of a verification pass.
"""

import logging
from collections.abc import Sequence

import structlog

from microtest.config.models import PerformanceFormat, ReportConfig, Severity
from microtest.exceptions import VerificationFailedError
from microtest.state import Measurement, RunOutcome
from microtest.telemetry import StructLogger

log: StructLogger = structlog.get_logger("report")

_TABLE_TOP = "\n  ╭───────┬───────┬───────────────╮\n  │ Test  │ Run   │ Duration (ms) │"
_TABLE_SEPARATOR = "\n  ├───────┼───────┼───────────────┤"
_TABLE_BOTTOM = "\n  ╰───────┴───────┴───────────────╯"


def _table_row(group_index: int, run_index: int, duration: float) -> str:
    group_cell = f"{group_index + 1:<5}" if run_index == 0 else " " * 5
    return f"\n  │ {group_cell} │ {run_index + 1:<5} │ {duration:>13.3f} │"


def render_performance_table(measurements: Sequence[Sequence[Measurement]]) -> str:
    """Box-drawn table with one row per run, grouped by argument group."""
    lines = [_TABLE_TOP]
    for group_index, group in enumerate(measurements):
        lines.append(_TABLE_SEPARATOR)
        for run_index, measurement in enumerate(group):
            lines.append(_table_row(group_index, run_index, measurement.duration))
    lines.append(_TABLE_BOTTOM)
    return "".join(lines)


def render_performance_summary(measurements: Sequence[Sequence[Measurement]]) -> str:
    """
    Total wall time from the first run's start to the last run's end, plus the
    per-run average when there was more than one run.
    """
    runs = [measurement for group in measurements for measurement in group]
    if not runs:
        return ""
    last = runs[-1]
    total = (last.end if last.end is not None else last.start) - runs[0].start
    summary = f" in {total:.3f}ms"
    if len(runs) > 1:
        average = sum(run.duration for run in runs) / len(runs)
        summary += f" (x̄ {average:.3f}ms per run, over {len(runs)} runs)"
    return summary


def render_report(
    result: RunOutcome,
    config: ReportConfig,
    measurements: Sequence[Sequence[Measurement]],
) -> str:
    """Builds the report message for a finished verification pass."""
    timed = config.performance is not PerformanceFormat.NONE and any(measurements)
    show_table = result.passed and timed and config.performance is PerformanceFormat.TABLE

    icon = config.pass_icon if result.passed else config.fail_icon
    verdict = "passed" if result.passed else "failed"
    message = f"{icon} {config.name} test {verdict}"

    if result.passed and timed:
        message += render_performance_summary(measurements)

    if show_table:
        message += ":" + render_performance_table(measurements)
    else:
        message += "."

    if not result.passed:
        if result.has_expected:
            message += f"\nExpected: {result.expected}"
        if result.has_received:
            message += f"\nReceived: {result.received}"
    return message


def report_level(result: RunOutcome, config: ReportConfig) -> int:
    """Logging level a report is emitted at: warning for WARN failures, else info."""
    if not result.passed and config.severity is Severity.WARN:
        return logging.WARNING
    return logging.INFO


def emit_report(
    message: str,
    result: RunOutcome,
    config: ReportConfig,
    logger: StructLogger | None = None,
) -> None:
    """
    Routes a rendered report by severity.

    Passing reports are always informational. A failure is logged at info or
    warning level, or raised as VerificationFailedError under ERROR severity.
    """
    sink = logger if logger is not None else log
    if not result.passed and config.severity is Severity.ERROR:
        raise VerificationFailedError(message, result)
    if report_level(result, config) == logging.WARNING:
        sink.warning(message)
        return
    sink.info(message)


# 🔼⚙️
