"""
Utility functions for CarePlus queue.
"""

from .datetime_utils import (
    get_current_timestamp,
    is_valid_timezone,
    local_midnight,
)

__all__ = [
    "get_current_timestamp",
    "is_valid_timezone",
    "local_midnight",
]
