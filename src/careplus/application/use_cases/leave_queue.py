"""Leave Queue use case: a patient cancels their own waiting entry."""

from datetime import datetime
from typing import Callable, Optional

from ...core.config import QueueSettings, get_settings
from ...core.structured_logger import get_logger
from ...core.utils.datetime_utils import get_current_timestamp, local_midnight
from ...domain.entities.queue_day import QueueDay
from ...domain.errors import NotInQueueError
from ..dto.queue_dto import LeaveQueueRequest, UpdateQueueEntryResponse
from ..ports.repositories.queue_repo import QueueDayRepository
from ..utils.queue_writes import commit_with_retry

logger = get_logger("careplus.queue")


class LeaveQueueUseCase:
    """Use case for a patient leaving today's queue before being seen."""

    def __init__(
        self,
        queue_repository: QueueDayRepository,
        settings: Optional[QueueSettings] = None,
        clock: Callable[[], datetime] = get_current_timestamp,
    ):
        self._queue_repository = queue_repository
        self._settings = settings or get_settings().queue
        self._clock = clock

    async def execute(self, request: LeaveQueueRequest) -> UpdateQueueEntryResponse:
        """Execute the leave queue use case."""
        now = self._clock()
        today = local_midnight(now, self._settings.timezone)

        async def load() -> QueueDay:
            queue_day = await self._queue_repository.find_by_clinic_and_date(request.clinic_id, today)
            if queue_day is None:
                raise NotInQueueError(request.patient_id, request.clinic_id)
            return queue_day

        def leave(queue_day: QueueDay):
            entry = queue_day.active_entry_for(request.patient_id)
            if entry is None:
                raise NotInQueueError(request.patient_id, request.clinic_id)
            # Only waiting entries can be cancelled; in-consultation raises InvalidStateError
            return queue_day.cancel(entry.entry_id, now=now)

        _, entry = await commit_with_retry(
            self._queue_repository,
            request.clinic_id,
            load,
            leave,
            self._settings.max_write_attempts,
        )

        logger.info(
            "Patient left queue",
            clinic_id=request.clinic_id,
            patient_id=request.patient_id,
            entry_id=entry.entry_id.value,
        )
        return UpdateQueueEntryResponse(
            entry_id=entry.entry_id.value,
            status=entry.status.value,
            position=entry.position,
            message="Left queue",
        )
