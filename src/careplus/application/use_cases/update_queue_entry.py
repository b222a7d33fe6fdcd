"""Update Queue Entry use case: the doctor's state transitions on today's queue."""

from datetime import datetime
from typing import Callable, Optional

from ...core.config import QueueSettings, get_settings
from ...core.structured_logger import get_logger
from ...core.utils.datetime_utils import get_current_timestamp, local_midnight
from ...domain.entities.queue_day import QueueDay
from ...domain.enums.queue import QueueAction
from ...domain.errors import EntryNotFoundError, NotQueueOwnerError
from ...domain.value_objects.entry_id import EntryId
from ..dto.queue_dto import UpdateQueueEntryRequest, UpdateQueueEntryResponse
from ..ports.repositories.queue_repo import QueueDayRepository
from ..utils.queue_writes import commit_with_retry

logger = get_logger("careplus.queue")

_MESSAGES = {
    QueueAction.START_CONSULTATION: "Consultation started",
    QueueAction.FINISH: "Patient consultation completed",
    QueueAction.CANCEL: "Queue entry cancelled",
}


class UpdateQueueEntryUseCase:
    """Use case for start-consultation, finish and cancel actions."""

    def __init__(
        self,
        queue_repository: QueueDayRepository,
        settings: Optional[QueueSettings] = None,
        clock: Callable[[], datetime] = get_current_timestamp,
    ):
        self._queue_repository = queue_repository
        self._settings = settings or get_settings().queue
        self._clock = clock

    async def execute(self, request: UpdateQueueEntryRequest) -> UpdateQueueEntryResponse:
        """Execute the update queue entry use case."""
        action = QueueAction(request.action)
        try:
            entry_id = EntryId(request.entry_id)
        except ValueError:
            # A malformed id cannot match any stored entry
            raise EntryNotFoundError(request.clinic_id, request.entry_id)
        now = self._clock()
        today = local_midnight(now, self._settings.timezone)

        async def load() -> QueueDay:
            queue_day = await self._queue_repository.find_by_clinic_and_date(request.clinic_id, today)
            if queue_day is None:
                raise EntryNotFoundError(request.clinic_id, entry_id.value)
            return queue_day

        def transition(queue_day: QueueDay):
            if not queue_day.is_owned_by(request.doctor_id):
                raise NotQueueOwnerError(request.clinic_id, request.doctor_id)
            return queue_day.apply(action, entry_id, now=now)

        queue_day, entry = await commit_with_retry(
            self._queue_repository,
            request.clinic_id,
            load,
            transition,
            self._settings.max_write_attempts,
        )

        logger.info(
            "Queue entry updated",
            clinic_id=request.clinic_id,
            entry_id=entry_id.value,
            action=action.value,
            status=entry.status.value,
            waiting=len(queue_day.waiting_entries()),
        )
        return UpdateQueueEntryResponse(
            entry_id=entry_id.value,
            status=entry.status.value,
            position=entry.position,
            message=_MESSAGES[action],
        )
