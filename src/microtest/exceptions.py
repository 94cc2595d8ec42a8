# src/microtest/exceptions.py

"""
Exception hierarchy for microtest.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from microtest.state import RunOutcome


class MicroTestError(Exception):
    """Base class for all microtest errors."""

    pass


class ConfigurationError(MicroTestError):
    """Raised when a runner or the CLI cannot be configured as requested."""

    pass


class RunnerReusedError(MicroTestError):
    """Raised when a runner's terminal call is made more than once."""

    def __init__(self, candidate_name: str):
        self.candidate_name = candidate_name
        super().__init__(
            f"Runner for '{candidate_name}' has already completed its verification pass. "
            "Create a new runner for each verification."
        )


class VerificationFailedError(MicroTestError):
    """
    Raised for a failed verification when reporting severity is ERROR.

    The message is the rendered report; the outcome is kept for inspection.
    """

    def __init__(self, message: str, result: "RunOutcome | None" = None):
        self.result = result
        super().__init__(message)


# 🔼⚙️
