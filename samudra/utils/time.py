"""
Time utility functions.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def epoch_millis(dt: datetime | None = None) -> int:
    """Milliseconds since the epoch, used in generated keys and file paths."""
    return int((dt or utc_now()).timestamp() * 1000)
