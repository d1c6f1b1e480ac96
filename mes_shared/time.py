"""
Time utilities for timestamps and uptime measurement.
"""
from __future__ import annotations

import time
from datetime import datetime, timezone

_PROCESS_START = time.monotonic()


def now() -> float:
    """Get current timestamp in seconds (float)."""
    return time.time()


def format_timestamp(ts: float | None = None) -> str:
    """
    Format timestamp as an ISO 8601 UTC string with millisecond precision.

    Args:
        ts: Timestamp in seconds (default: now())

    Returns:
        ISO 8601 formatted string (e.g., "2025-12-29T19:30:45.123Z")
    """
    if ts is None:
        ts = now()
    dt = datetime.fromtimestamp(ts, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def uptime_seconds() -> float:
    """Seconds elapsed since this process imported the module."""
    return time.monotonic() - _PROCESS_START
