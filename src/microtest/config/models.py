#
# config/models.py
#
"""
Attrs-based data models for microtest configuration.
"""

import logging
from collections.abc import Sequence
from enum import Enum
from typing import Any

from attrs import define, field

DEFAULT_ICONS: tuple[str, str] = ("✓", "✕")


class Severity(Enum):
    """How a failed verification is surfaced."""

    INFO = 0  # Informational log message.
    WARN = 1  # Warning log message on failure.
    ERROR = 2  # Raise on failure.

    @classmethod
    def coerce(cls, value: Any) -> "Severity":
        """Normalizes an enum member, name or ordinal. Unknown values become INFO."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return _SEVERITY_NAMES.get(value.strip().lower(), cls.INFO)
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                return cls.INFO
        return cls.INFO


_SEVERITY_NAMES = {
    "info": Severity.INFO,
    "log": Severity.INFO,
    "warn": Severity.WARN,
    "warning": Severity.WARN,
    "error": Severity.ERROR,
}


class PerformanceFormat(Enum):
    """How run timings are rendered in the report."""

    NONE = "none"
    AVERAGE = "average"
    TABLE = "table"

    @classmethod
    def coerce(cls, value: Any) -> "PerformanceFormat":
        """
        Normalizes a performance flag.

        Strings are matched by name, any other truthy value means AVERAGE.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return cls.NONE
        return cls.AVERAGE if value else cls.NONE


# --- Validators ---
def _validate_icons(inst: Any, attr: Any, value: tuple[str, str]) -> None:
    """Validator ensures icons form a pass/fail pair."""
    if len(value) != 2:
        raise ValueError(f"Field '{attr.name}' must hold exactly two icons, got {value!r}")


def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging._nameToLevel.keys()
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def normalize_icons(icons: Any, fallback: tuple[str, str]) -> tuple[str, str]:
    """Returns icons as a pair when they are a 2-element sequence, otherwise the fallback."""
    if isinstance(icons, Sequence) and not isinstance(icons, str) and len(icons) == 2:
        return (str(icons[0]), str(icons[1]))
    return fallback


@define(frozen=True, slots=True)
class ReportConfig:
    """Reporting options of a single runner. No name means no report."""

    name: str | None = field(default=None)
    severity: Severity = field(default=Severity.INFO, converter=Severity.coerce)
    icons: tuple[str, str] = field(default=DEFAULT_ICONS, validator=_validate_icons)
    performance: PerformanceFormat = field(
        default=PerformanceFormat.NONE, converter=PerformanceFormat.coerce
    )

    @property
    def pass_icon(self) -> str:
        return self.icons[0]

    @property
    def fail_icon(self) -> str:
        return self.icons[1]


@define(frozen=True, slots=True)
class GlobalConfig:
    """Process-wide settings used by the command line."""

    log_level: str = field(default="WARNING", validator=_validate_log_level)
    log_file: str | None = field(default=None)
    json_logs: bool = field(default=False)

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())


# 🔼⚙️
