"""Get Patient Queue View use case: where am I and how long will it take."""

from datetime import datetime
from typing import Callable, Optional

from ...core.config import QueueSettings, get_settings
from ...core.utils.datetime_utils import get_current_timestamp, local_midnight
from ...domain.errors import NotInQueueError
from ..dto.queue_dto import PatientQueueView
from ..ports.repositories.clinic_repo import ClinicRepository
from ..ports.repositories.queue_repo import QueueDayRepository
from ..utils.queue_projection import build_patient_view


class GetPatientQueueViewUseCase:
    """Use case for the patient-facing queue snapshot."""

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

    async def execute(self, patient_id: str, clinic_id: Optional[str] = None) -> PatientQueueView:
        """
        Build the view for ``patient_id``.

        With a clinic, today's queue of that clinic is used. Without one, the
        most recently updated active queue holding the patient is used. The
        clinic name is left empty if the clinic record is gone.
        """
        if clinic_id:
            today = local_midnight(self._clock(), self._settings.timezone)
            queue_day = await self._queue_repository.find_by_clinic_and_date(clinic_id, today)
        else:
            queue_day = await self._queue_repository.find_latest_active_for_patient(patient_id)

        if queue_day is None:
            raise NotInQueueError(patient_id, clinic_id)

        view = build_patient_view(queue_day, patient_id, self._settings.service_minutes)

        clinic = await self._clinic_repository.find_by_id(queue_day.clinic_id)
        if clinic is not None:
            view.clinic_name = clinic.clinic_name
        return view
