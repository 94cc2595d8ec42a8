#
# src/microtest/__init__.py
#
"""
microtest: run a callable against argument groups and expected outcomes,
and reduce the runs to a single pass/fail verdict.
"""

from microtest.config import PerformanceFormat, ReportConfig, Severity
from microtest.exceptions import (
    ConfigurationError,
    MicroTestError,
    RunnerReusedError,
    VerificationFailedError,
)
from microtest.runner import MicroTestRunner, test
from microtest.state import MISSING, ExecutionMode, Measurement, RunOutcome
from microtest.validators import Literal, Predicate, as_validator

__all__ = [
    "MISSING",
    "ConfigurationError",
    "ExecutionMode",
    "Literal",
    "Measurement",
    "MicroTestError",
    "MicroTestRunner",
    "PerformanceFormat",
    "Predicate",
    "ReportConfig",
    "RunOutcome",
    "RunnerReusedError",
    "Severity",
    "VerificationFailedError",
    "as_validator",
    "test",
]

# 🔼⚙️
