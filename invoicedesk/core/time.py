"""Time utilities for timezone-aware UTC datetimes."""

import time
from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def epoch_millis(moment: float | None = None) -> int:
    """Milliseconds since the epoch for ``moment`` (seconds), defaulting to now."""
    return int((time.time() if moment is None else moment) * 1000)
