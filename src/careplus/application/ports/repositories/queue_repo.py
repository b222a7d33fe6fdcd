"""
Queue day repository interface for data access abstraction.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ....domain.entities.queue_day import QueueDay


class QueueDayRepository(ABC):
    """Abstract repository for per-clinic, per-day queues.

    Every write goes through ``save_if_version`` so a read-modify-write
    against one QueueDay either fully applies or not at all.
    """

    @abstractmethod
    async def find_by_clinic_and_date(self, clinic_id: str, date: datetime) -> Optional[QueueDay]:
        """Find the queue of a clinic for a given day (local midnight)."""
        pass

    @abstractmethod
    async def create(self, queue_day: QueueDay) -> QueueDay:
        """Insert a new queue day.

        If another writer created the same (clinic_id, date) first, the stored
        queue day is returned instead of raising.
        """
        pass

    @abstractmethod
    async def save_if_version(self, queue_day: QueueDay, expected_version: int) -> bool:
        """
        Atomically persist entries and flags of a queue day.

        The write only happens if the stored version still equals
        ``expected_version``; on success the stored version is incremented and
        ``queue_day.version`` is updated to match.

        Returns:
            True if the queue day was written, False on a version conflict
        """
        pass

    @abstractmethod
    async def find_latest_active_for_patient(self, patient_id: str) -> Optional[QueueDay]:
        """Find the most recently updated active queue day where the patient is waiting or in consultation."""
        pass
