"""
Queue entry status and doctor action enums.
"""

from enum import Enum


class EntryStatus(str, Enum):
    """Lifecycle states of a queue entry."""

    WAITING = "waiting"
    IN_CONSULTATION = "in-consultation"
    FINISHED = "finished"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        """Waiting or being seen right now."""
        return self in (EntryStatus.WAITING, EntryStatus.IN_CONSULTATION)


class QueueAction(str, Enum):
    """Actions a doctor can apply to a queue entry."""

    START_CONSULTATION = "start-consultation"
    FINISH = "finish"
    CANCEL = "cancel"
