"""
Date and time utility functions for CarePlus queue.
"""

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def get_current_timestamp() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


def is_valid_timezone(tz_name: str) -> bool:
    """Check if an IANA timezone name can be resolved."""
    try:
        ZoneInfo(tz_name)
        return True
    except (ZoneInfoNotFoundError, ValueError):
        return False


def local_midnight(moment: Optional[datetime] = None, tz_name: str = "UTC") -> datetime:
    """Return the start of ``moment``'s calendar day in ``tz_name``.

    The result is naive (wall clock of that zone) so it can be used as a
    stable per-day key in storage. Naive inputs are treated as UTC.
    """
    if moment is None:
        moment = get_current_timestamp()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    local = moment.astimezone(ZoneInfo(tz_name))
    return datetime(local.year, local.month, local.day)
