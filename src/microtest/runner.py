# src/microtest/runner.py
"""
The runner: accumulates configuration through chained calls, then executes a
single verification pass over every argument group and reduces the runs to a
boolean verdict.
"""

import inspect
import math
from collections.abc import Callable, Coroutine, Iterator
from typing import Any

import structlog

from microtest.config.models import PerformanceFormat, ReportConfig, Severity, normalize_icons
from microtest.exceptions import RunnerReusedError
from microtest.report import emit_report, render_report
from microtest.state import ExecutionMode, Measurement, RunOutcome, RunRecord
from microtest.telemetry import StructLogger
from microtest.timing import Clock, resolve_clock
from microtest.validators import Literal, Validator, as_validator, select_validator

log: StructLogger = structlog.get_logger("runner")

_UNBOUND = object()


class MicroTestRunner:
    """
    Verifies one candidate callable against argument groups and validators.

    Configuration methods mutate the runner and return it, so calls chain::

        passed = (
            MicroTestRunner(add)
            .repeat(3)
            .with_arguments(24, 48)
            .with_arguments(162, 5)
            .expect(72, lambda value: str(value).isdigit())
        )

    A runner performs exactly one verification pass.
    """

    def __init__(
        self,
        candidate: Callable[..., Any],
        *,
        clock: Clock | None = None,
        logger: StructLogger | None = None,
    ):
        self.candidate = candidate
        self._clock = clock if clock is not None else resolve_clock()
        self._log = logger if logger is not None else log
        self._context: Any = _UNBOUND
        self._mode = ExecutionMode.SYNC
        self._repetitions = 1
        self._argument_groups: list[tuple[Any, ...]] = []
        self._validators: list[Validator] = []
        self._report_config = ReportConfig()
        self._measurements: list[list[Measurement]] = []
        self._records: list[RunRecord] = []
        self._result = RunOutcome()
        self._report: str | None = None
        self._halted = False
        self._started = False

    def __repr__(self) -> str:
        return (
            f"<MicroTestRunner candidate={self.candidate_name!r} mode={self._mode.name} "
            f"repetitions={self._repetitions} groups={len(self._argument_groups)}>"
        )

    # --- Read-only state ---
    @property
    def candidate_name(self) -> str:
        return getattr(self.candidate, "__qualname__", None) or repr(self.candidate)

    @property
    def mode(self) -> ExecutionMode:
        return self._mode

    @property
    def repetitions(self) -> int:
        return self._repetitions

    @property
    def argument_groups(self) -> list[tuple[Any, ...]]:
        return list(self._argument_groups)

    @property
    def validators(self) -> list[Validator]:
        return list(self._validators)

    @property
    def report_config(self) -> ReportConfig:
        return self._report_config

    @property
    def measurements(self) -> list[list[Measurement]]:
        """Per-group timings; empty unless performance reporting is enabled."""
        return [list(group) for group in self._measurements]

    @property
    def records(self) -> list[RunRecord]:
        return list(self._records)

    @property
    def result(self) -> RunOutcome:
        return self._result

    @property
    def report(self) -> str | None:
        """The rendered report, once a named verification has run."""
        return self._report

    @property
    def _timed(self) -> bool:
        return self._report_config.performance is not PerformanceFormat.NONE

    # --- Configuration ---
    def bind(self, context: Any) -> "MicroTestRunner":
        """Pass `context` as the first argument of every invocation, like a receiver."""
        self._context = context
        return self

    def repeat(self, times: float) -> "MicroTestRunner":
        """Run each argument group `times` times (rounded up, at least once)."""
        if not math.isfinite(times):
            times = 1
        self._repetitions = max(math.ceil(times), 1)
        return self

    def with_arguments(self, *args: Any) -> "MicroTestRunner":
        """Add one argument group. Each call adds a group."""
        self._argument_groups.append(args)
        return self

    def enable_async(self) -> "MicroTestRunner":
        """Await each invocation's result; `expect` then returns a coroutine."""
        self._mode = ExecutionMode.ASYNC
        return self

    def configure_reporting(
        self,
        name: str,
        severity: Any = Severity.INFO,
        icons: Any = None,
        performance: Any = PerformanceFormat.NONE,
    ) -> "MicroTestRunner":
        """
        Report the verdict under `name` once the verification completes.

        Args:
            name: Name of the test shown in the report.
            severity: How a failure is surfaced: INFO logs, WARN logs a warning,
                ERROR raises VerificationFailedError. Names and ordinals are accepted.
            icons: Pass/fail icon pair. Ignored unless it has exactly two items.
            performance: None, "average", "table", or any truthy flag for average.
                Ignored when no high-resolution clock is available.
        """
        resolved = PerformanceFormat.coerce(performance)
        if resolved is not PerformanceFormat.NONE and self._clock is None:
            self._log.debug(
                "No high-resolution clock; performance reporting disabled",
                requested=resolved.value,
            )
            resolved = PerformanceFormat.NONE

        self._report_config = ReportConfig(
            name=name,
            severity=severity,
            icons=normalize_icons(icons, self._report_config.icons),
            performance=resolved,
        )
        return self

    def expecting(self, *validators: Any) -> "MicroTestRunner":
        """Pre-configure validators used when `expect` is called without any."""
        self._validators = [as_validator(value) for value in validators]
        return self

    # --- Verification ---
    def expect(self, *validators: Any) -> bool | Coroutine[Any, Any, bool]:
        """
        Run the verification pass.

        Validators are literals (compared by equality) or predicates called with
        (result, run_index, duration_ms). Group N uses validator N, the last
        validator covering any remaining groups.

        Returns:
            The verdict. When async mode is enabled, a coroutine resolving to it.
        """
        if self._mode is ExecutionMode.ASYNC:
            return self.expect_async(*validators)

        self._prepare(validators)
        for group_index, run_index, args in self._schedule():
            measurement = self._start_measurement(group_index)
            try:
                value = self._invoke(args)
            except Exception as e:
                self._stop_measurement(measurement)
                self._record_error(group_index, run_index, e)
                continue
            if inspect.iscoroutine(value):
                self._log.warning(
                    "Candidate returned a coroutine in synchronous mode; call enable_async()",
                    candidate=self.candidate_name,
                )
                value.close()
            duration = self._stop_measurement(measurement)
            self._judge(group_index, run_index, value, duration)
        return self._finish()

    async def expect_async(self, *validators: Any) -> bool:
        """Run the verification pass, awaiting awaitable results."""
        self._prepare(validators)
        for group_index, run_index, args in self._schedule():
            measurement = self._start_measurement(group_index)
            try:
                value = self._invoke(args)
                if inspect.isawaitable(value):
                    value = await value
            except Exception as e:
                self._stop_measurement(measurement)
                self._record_error(group_index, run_index, e)
                continue
            duration = self._stop_measurement(measurement)
            self._judge(group_index, run_index, value, duration)
        return self._finish()

    # --- Run loop internals ---
    def _prepare(self, validators: tuple[Any, ...]) -> None:
        if self._started:
            raise RunnerReusedError(self.candidate_name)
        self._started = True

        if validators:
            self._validators = [as_validator(value) for value in validators]
        if not self._argument_groups:
            self._argument_groups.append(())

        self._log.debug(
            "Starting verification",
            candidate=self.candidate_name,
            mode=self._mode.name,
            groups=len(self._argument_groups),
            repetitions=self._repetitions,
            validators=len(self._validators),
            performance=self._report_config.performance.value,
        )

    def _schedule(self) -> Iterator[tuple[int, int, tuple[Any, ...]]]:
        """Yields (group, run, args) in order, stopping after the first failing run."""
        for group_index, args in enumerate(self._argument_groups):
            if self._timed:
                self._measurements.append([])
            for run_index in range(self._repetitions):
                yield group_index, run_index, args
                if self._halted:
                    return

    def _invoke(self, args: tuple[Any, ...]) -> Any:
        if self._context is _UNBOUND:
            return self.candidate(*args)
        return self.candidate(self._context, *args)

    def _start_measurement(self, group_index: int) -> Measurement | None:
        if not self._timed:
            return None
        measurement = Measurement(start=self._clock())
        self._measurements[group_index].append(measurement)
        return measurement

    def _stop_measurement(self, measurement: Measurement | None) -> float | None:
        if measurement is None:
            return None
        measurement.end = self._clock()
        return measurement.duration

    def _record_error(self, group_index: int, run_index: int, error: Exception) -> None:
        self._log.warning(
            "Run failed with error",
            candidate=self.candidate_name,
            group=group_index,
            run=run_index,
            error=f"{type(error).__name__}: {error}",
            exc_info=error,
        )
        self._records.append(RunRecord(group_index, run_index, False, error=str(error)))

    def _judge(self, group_index: int, run_index: int, value: Any, duration: float | None) -> None:
        validator = select_validator(self._validators, group_index)
        try:
            passed = validator.matches(value, run_index, duration)
        except Exception as e:
            self._record_error(group_index, run_index, e)
            return

        self._records.append(RunRecord(group_index, run_index, passed))
        if passed:
            return

        self._halted = True
        self._result.received = value
        if isinstance(validator, Literal):
            self._result.expected = validator.value
        self._log.debug(
            "Run did not match its validator; halting",
            candidate=self.candidate_name,
            group=group_index,
            run=run_index,
        )

    def _finish(self) -> bool:
        self._result.passed = all(record.passed for record in self._records)
        self._log.debug(
            "Verification finished",
            candidate=self.candidate_name,
            passed=self._result.passed,
            runs=len(self._records),
        )
        if self._report_config.name:
            self._report = render_report(self._result, self._report_config, self._measurements)
            emit_report(self._report, self._result, self._report_config, self._log)
        return self._result.passed


def test(candidate: Callable[..., Any], **kwargs: Any) -> MicroTestRunner:
    """Start verifying `candidate`. Keyword arguments go to MicroTestRunner."""
    return MicroTestRunner(candidate, **kwargs)


# Keeps pytest from collecting the factory when it is imported into test modules.
test.__test__ = False  # type: ignore[attr-defined]

# 🔼⚙️
