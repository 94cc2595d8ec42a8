# src/microtest/state.py
#
"""
Run-time state records produced by a verification pass.
"""

from enum import Enum, auto
from typing import Any

from attrs import define, field, mutable


class ExecutionMode(Enum):
    """Whether candidate results are awaited."""

    SYNC = auto()
    ASYNC = auto()


class _Missing:
    """Marks an outcome field that was never captured."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@mutable(slots=True)
class Measurement:
    """Start and end timestamps (milliseconds) of a single run."""

    start: float = field()
    end: float | None = field(default=None)

    @property
    def duration(self) -> float:
        if self.end is None:
            return 0.0
        return self.end - self.start


@mutable(slots=True)
class RunOutcome:
    """
    Aggregate outcome of a verification pass.

    `expected` and `received` hold MISSING until a mismatch captures them.
    `expected` is only captured for literal validators.
    """

    passed: bool = field(default=False)
    expected: Any = field(default=MISSING)
    received: Any = field(default=MISSING)

    @property
    def has_expected(self) -> bool:
        return self.expected is not MISSING

    @property
    def has_received(self) -> bool:
        return self.received is not MISSING


@define(frozen=True, slots=True)
class RunRecord:
    """Pass/fail record of one run, kept in run order."""

    group: int
    run: int
    passed: bool
    error: str | None = None


# 🔼⚙️
