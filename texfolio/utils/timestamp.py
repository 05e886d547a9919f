"""Timestamp helpers shared by rendering, events and analytics."""

import time
from datetime import datetime

MONTH_ABBREVIATIONS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def now() -> str:
    """Filesystem-friendly local timestamp, e.g. 20251114_123456."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def now_exact() -> str:
    """ISO 8601 timestamp with microseconds, used in event logs."""
    return datetime.now().isoformat()


def now_ms() -> int:
    """Milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def month_label(month: int, year: int) -> str:
    """
    Format a month/year pair for chart labels.

    Examples:
        month_label(3, 2025)
        # "Mar 2025"
    """
    return f"{MONTH_ABBREVIATIONS[month - 1]} {year}"
