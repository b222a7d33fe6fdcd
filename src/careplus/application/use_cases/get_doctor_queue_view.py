"""Get Doctor Queue View use case: today's full entry list of a clinic."""

from datetime import datetime
from typing import Callable, Optional

from ...core.config import QueueSettings, get_settings
from ...core.utils.datetime_utils import get_current_timestamp, local_midnight
from ...domain.entities.queue_day import QueueDay
from ...domain.errors import ClinicNotFoundError, NotQueueOwnerError
from ..ports.repositories.clinic_repo import ClinicRepository
from ..ports.repositories.queue_repo import QueueDayRepository


class GetDoctorQueueViewUseCase:
    """Use case for the unfiltered queue used by queue-management screens."""

    def __init__(
        self,
        queue_repository: QueueDayRepository,
        clinic_repository: ClinicRepository,
        settings: Optional[QueueSettings] = None,
        clock: Callable[[], datetime] = get_current_timestamp,
    ):
        self._queue_repository = queue_repository
        self._clinic_repository = clinic_repository
        self._settings = settings or get_settings().queue
        self._clock = clock

    async def execute(self, clinic_id: str, doctor_id: Optional[str] = None) -> QueueDay:
        """
        Return today's queue day as stored.

        When nobody joined yet an empty, unsaved queue day is returned so
        callers always get the same shape. If ``doctor_id`` is given it must
        own the clinic.
        """
        today = local_midnight(self._clock(), self._settings.timezone)
        queue_day = await self._queue_repository.find_by_clinic_and_date(clinic_id, today)

        if queue_day is None:
            clinic = await self._clinic_repository.find_by_id(clinic_id)
            if clinic is None:
                raise ClinicNotFoundError(clinic_id)
            queue_day = QueueDay(clinic_id=clinic_id, doctor_id=clinic.doctor_id, date=today)

        if doctor_id is not None and not queue_day.is_owned_by(doctor_id):
            raise NotQueueOwnerError(clinic_id, doctor_id)
        return queue_day
