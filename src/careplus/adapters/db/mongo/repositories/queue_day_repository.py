"""
MongoDB implementation of QueueDayRepository.
"""

from datetime import datetime
from typing import Optional

from pymongo.errors import DuplicateKeyError, PyMongoError

from careplus.application.ports.repositories.queue_repo import QueueDayRepository
from careplus.core.structured_logger import get_logger
from careplus.domain.entities.queue_day import QueueDay, QueueEntry
from careplus.domain.enums.queue import EntryStatus
from careplus.domain.errors import StoreUnavailableError
from careplus.domain.value_objects.entry_id import EntryId

from ..models.queue_day_m import QueueDayMongo, QueueEntryMongo

logger = get_logger("careplus.db")

_ACTIVE_STATUSES = [EntryStatus.WAITING.value, EntryStatus.IN_CONSULTATION.value]


def _naive(value: datetime) -> datetime:
    # Queue dates are local midnights stored without an offset
    return value.replace(tzinfo=None) if value.tzinfo else value


class MongoQueueDayRepository(QueueDayRepository):
    """MongoDB implementation of QueueDayRepository."""

    async def find_by_clinic_and_date(self, clinic_id: str, date: datetime) -> Optional[QueueDay]:
        """Find the queue of a clinic for a given day."""
        try:
            queue_day_mongo = await QueueDayMongo.find_one(
                QueueDayMongo.clinic_id == clinic_id,
                QueueDayMongo.date == _naive(date),
            )
        except PyMongoError as e:
            raise StoreUnavailableError("find_queue_day", str(e)) from e

        if not queue_day_mongo:
            return None

        return self._mongo_to_domain(queue_day_mongo)

    async def create(self, queue_day: QueueDay) -> QueueDay:
        """Insert a new queue day, or return the one a concurrent writer created."""
        queue_day_mongo = self._domain_to_mongo(queue_day)
        try:
            await queue_day_mongo.insert()
        except DuplicateKeyError:
            logger.info(
                "Queue day already created by another request",
                clinic_id=queue_day.clinic_id,
                date=queue_day.date.date().isoformat(),
            )
            existing = await self.find_by_clinic_and_date(queue_day.clinic_id, queue_day.date)
            if existing is None:
                raise StoreUnavailableError("create_queue_day", "duplicate key but no stored queue day")
            return existing
        except PyMongoError as e:
            raise StoreUnavailableError("create_queue_day", str(e)) from e

        return self._mongo_to_domain(queue_day_mongo)

    async def save_if_version(self, queue_day: QueueDay, expected_version: int) -> bool:
        """Replace entries and flags in one update guarded by the version field."""
        entries = [self._entry_to_mongo(entry).model_dump() for entry in queue_day.entries]
        try:
            result = await QueueDayMongo.get_motor_collection().update_one(
                {
                    "clinic_id": queue_day.clinic_id,
                    "date": _naive(queue_day.date),
                    "version": expected_version,
                },
                {
                    "$set": {
                        "entries": entries,
                        "is_active": queue_day.is_active,
                        "updated_at": queue_day.updated_at,
                    },
                    "$inc": {"version": 1},
                },
            )
        except PyMongoError as e:
            raise StoreUnavailableError("save_queue_day", str(e)) from e

        if result.modified_count != 1:
            return False

        queue_day.version = expected_version + 1
        return True

    async def find_latest_active_for_patient(self, patient_id: str) -> Optional[QueueDay]:
        """Find the most recently updated active queue day holding the patient."""
        try:
            queue_day_mongo = await QueueDayMongo.find(
                {
                    "is_active": True,
                    "entries": {
                        "$elemMatch": {"patient_id": patient_id, "status": {"$in": _ACTIVE_STATUSES}}
                    },
                }
            ).sort("-updated_at").first_or_none()
        except PyMongoError as e:
            raise StoreUnavailableError("find_patient_queue_day", str(e)) from e

        if not queue_day_mongo:
            return None

        return self._mongo_to_domain(queue_day_mongo)

    def _entry_to_mongo(self, entry: QueueEntry) -> QueueEntryMongo:
        return QueueEntryMongo(
            entry_id=entry.entry_id.value,
            patient_id=entry.patient_id,
            patient_name=entry.patient_name,
            position=entry.position,
            status=entry.status.value,
            joined_at=entry.joined_at,
            updated_at=entry.updated_at,
        )

    def _domain_to_mongo(self, queue_day: QueueDay) -> QueueDayMongo:
        """Convert domain entity to MongoDB model."""
        return QueueDayMongo(
            clinic_id=queue_day.clinic_id,
            doctor_id=queue_day.doctor_id,
            date=_naive(queue_day.date),
            entries=[self._entry_to_mongo(entry) for entry in queue_day.entries],
            is_active=queue_day.is_active,
            version=queue_day.version,
            created_at=queue_day.created_at,
            updated_at=queue_day.updated_at,
        )

    def _mongo_to_domain(self, queue_day_mongo: QueueDayMongo) -> QueueDay:
        """Convert MongoDB model to domain entity."""
        return QueueDay(
            clinic_id=queue_day_mongo.clinic_id,
            doctor_id=queue_day_mongo.doctor_id,
            date=_naive(queue_day_mongo.date),
            entries=[
                QueueEntry(
                    entry_id=EntryId(e.entry_id),
                    patient_id=e.patient_id,
                    patient_name=e.patient_name,
                    position=e.position,
                    status=EntryStatus(e.status),
                    joined_at=e.joined_at,
                    updated_at=e.updated_at,
                )
                for e in queue_day_mongo.entries
            ],
            is_active=queue_day_mongo.is_active,
            version=queue_day_mongo.version,
            created_at=queue_day_mongo.created_at,
            updated_at=queue_day_mongo.updated_at,
        )
