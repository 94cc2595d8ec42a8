# src/microtest/timing.py

"""
High-resolution clock used for performance measurements.
"""

import time
from collections.abc import Callable
from typing import TypeAlias

import structlog

log = structlog.get_logger("timing")

Clock: TypeAlias = Callable[[], float]

_NS_PER_MS = 1_000_000


def perf_counter_ms() -> float:
    """Monotonic timestamp in milliseconds."""
    return time.perf_counter_ns() / _NS_PER_MS


def resolve_clock() -> Clock | None:
    """
    Returns the millisecond clock when the platform offers a monotonic
    performance counter, otherwise None (performance reporting is then disabled).
    """
    try:
        info = time.get_clock_info("perf_counter")
    except ValueError:
        log.debug("perf_counter clock is not available")
        return None
    if not info.monotonic:
        log.debug("perf_counter clock is not monotonic", implementation=info.implementation)
        return None
    return perf_counter_ms


# 🔼⚙️
