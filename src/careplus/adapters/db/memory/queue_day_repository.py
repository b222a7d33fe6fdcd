"""
In-process implementation of QueueDayRepository.

Used for local development and tests (``STORE_BACKEND=memory``). Stored queue
days are deep-copied on the way in and out so callers never share state with
the store, mirroring a real database round trip.
"""

import asyncio
import copy
from datetime import datetime
from typing import Dict, Optional, Tuple

from careplus.application.ports.repositories.queue_repo import QueueDayRepository
from careplus.domain.entities.queue_day import QueueDay


class InMemoryQueueDayRepository(QueueDayRepository):
    """Dict-backed queue store with compare-and-swap writes."""

    def __init__(self) -> None:
        self._days: Dict[Tuple[str, datetime], QueueDay] = {}
        self._lock = asyncio.Lock()

    async def find_by_clinic_and_date(self, clinic_id: str, date: datetime) -> Optional[QueueDay]:
        stored = self._days.get((clinic_id, date))
        return copy.deepcopy(stored) if stored is not None else None

    async def create(self, queue_day: QueueDay) -> QueueDay:
        key = (queue_day.clinic_id, queue_day.date)
        async with self._lock:
            if key not in self._days:
                self._days[key] = copy.deepcopy(queue_day)
            return copy.deepcopy(self._days[key])

    async def save_if_version(self, queue_day: QueueDay, expected_version: int) -> bool:
        key = (queue_day.clinic_id, queue_day.date)
        async with self._lock:
            stored = self._days.get(key)
            if stored is None or stored.version != expected_version:
                return False

            updated = copy.deepcopy(queue_day)
            updated.version = expected_version + 1
            self._days[key] = updated

        queue_day.version = expected_version + 1
        return True

    async def find_latest_active_for_patient(self, patient_id: str) -> Optional[QueueDay]:
        candidates = [
            day
            for day in self._days.values()
            if day.is_active and day.active_entry_for(patient_id) is not None
        ]
        if not candidates:
            return None
        return copy.deepcopy(max(candidates, key=lambda day: day.updated_at))
