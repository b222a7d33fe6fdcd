"""Join Queue use case: admit a patient into today's queue of a clinic."""

from datetime import datetime
from typing import Callable, Optional

from ...core.config import QueueSettings, get_settings
from ...core.structured_logger import get_logger
from ...core.utils.datetime_utils import get_current_timestamp, local_midnight
from ...domain.entities.queue_day import QueueDay
from ...domain.errors import ClinicNotFoundError
from ..dto.queue_dto import JoinQueueRequest, JoinQueueResponse
from ..ports.repositories.clinic_repo import ClinicRepository
from ..ports.repositories.queue_repo import QueueDayRepository
from ..utils.queue_writes import commit_with_retry

logger = get_logger("careplus.queue")


class JoinQueueUseCase:
    """Use case for a patient joining a clinic's queue for today."""

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

    async def _load_or_create(self, clinic_id: str, today: datetime) -> QueueDay:
        queue_day = await self._queue_repository.find_by_clinic_and_date(clinic_id, today)
        if queue_day is not None:
            return queue_day

        clinic = await self._clinic_repository.find_by_id(clinic_id)
        if clinic is None:
            raise ClinicNotFoundError(clinic_id)

        # First join of the day; a concurrent creator may win, create() then returns theirs
        created = await self._queue_repository.create(
            QueueDay(clinic_id=clinic_id, doctor_id=clinic.doctor_id, date=today)
        )
        logger.info("Queue day opened", clinic_id=clinic_id, date=today.date().isoformat())
        return created

    async def execute(self, request: JoinQueueRequest) -> JoinQueueResponse:
        """Execute the join queue use case."""
        now = self._clock()
        today = local_midnight(now, self._settings.timezone)

        async def load() -> QueueDay:
            return await self._load_or_create(request.clinic_id, today)

        def admit(queue_day: QueueDay):
            return queue_day.admit(
                request.patient_id,
                request.patient_name,
                renumber=self._settings.renumber_on_join,
                now=now,
            )

        _, entry = await commit_with_retry(
            self._queue_repository,
            request.clinic_id,
            load,
            admit,
            self._settings.max_write_attempts,
        )

        logger.info(
            "Patient joined queue",
            clinic_id=request.clinic_id,
            patient_id=request.patient_id,
            entry_id=entry.entry_id.value,
            position=entry.position,
        )
        return JoinQueueResponse(
            clinic_id=request.clinic_id,
            entry_id=entry.entry_id.value,
            position=entry.position,
            date=today,
            message="Joined queue",
        )
