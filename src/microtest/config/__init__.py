#
# config/__init__.py
#
"""
Configuration models for microtest.
"""

from .models import (
    DEFAULT_ICONS,
    GlobalConfig,
    PerformanceFormat,
    ReportConfig,
    Severity,
    normalize_icons,
)

__all__ = [
    "DEFAULT_ICONS",
    "GlobalConfig",
    "PerformanceFormat",
    "ReportConfig",
    "Severity",
    "normalize_icons",
]

# 🔼⚙️
