import itertools
from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Undo logging configuration applied by CLI invocations."""
    yield
    structlog.reset_defaults()


class StepClock:
    """Deterministic clock advancing `step` milliseconds per reading."""

    def __init__(self, step: float = 10.0, start: float = 0.0):
        self.step = step
        self._ticks = itertools.count()
        self.start = start
        self.readings: list[float] = []

    def __call__(self) -> float:
        value = self.start + next(self._ticks) * self.step
        self.readings.append(value)
        return value


@pytest.fixture
def step_clock() -> StepClock:
    return StepClock()


@pytest.fixture
def mock_logger() -> MagicMock:
    """Stands in for the structlog logger a runner reports to."""
    return MagicMock(spec=["debug", "info", "warning", "error"])


def add(a, b):
    return a + b


@pytest.fixture
def adder():
    return add
