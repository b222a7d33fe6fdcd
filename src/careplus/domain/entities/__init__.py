"""
Domain entities package.
"""

from .clinic import Clinic
from .queue_day import QueueDay, QueueEntry

__all__ = [
    "Clinic",
    "QueueDay",
    "QueueEntry",
]
