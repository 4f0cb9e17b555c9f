from __future__ import annotations

import time
from datetime import datetime, timezone


def now_utc() -> datetime:
    """Return current time as timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def monotonic() -> float:
    """Return a monotonic clock reading in seconds."""
    return time.monotonic()


def format_duration(seconds: float) -> str:
    """Format an elapsed duration for log output (e.g. ``850ms``, ``2.31s``)."""
    if seconds < 0:
        seconds = 0.0
    if seconds < 1.0:
        return f"{int(round(seconds * 1000))}ms"
    return f"{seconds:.2f}s"
