"""Patient-facing queue endpoints."""

from typing import Optional

from fastapi import APIRouter, Query, Request

from ...application.use_cases.get_patient_queue_view import GetPatientQueueViewUseCase
from ...domain.errors import DomainError
from ..deps import ClinicRepositoryDep, PatientDep, QueueRepositoryDep, QueueSettingsDep
from ..errors import status_for
from ..schemas.common import ApiResponse, ErrorResponse
from ..schemas.queue import PatientQueueViewResponse
from ..utils.responses import fail, ok

router = APIRouter(prefix="/patients", tags=["patients"])


@router.get(
    "/queue/active",
    response_model=ApiResponse[PatientQueueViewResponse],
    summary="Where the calling patient stands in the queue",
    responses={
        404: {"model": ErrorResponse, "description": "Patient is not in an active queue"},
        503: {"model": ErrorResponse, "description": "Store unavailable"},
    },
)
async def get_active_queue(
    http_request: Request,
    patient: PatientDep,
    queue_repo: QueueRepositoryDep,
    clinic_repo: ClinicRepositoryDep,
    queue_settings: QueueSettingsDep,
    clinic_id: Optional[str] = Query(None, max_length=100),
):
    """
    Get the caller's position, people ahead, estimated wait and the live queue.

    Without ``clinic_id`` the most recently updated active queue holding the
    patient is used.
    """
    try:
        use_case = GetPatientQueueViewUseCase(queue_repo, clinic_repo, queue_settings)
        view = await use_case.execute(patient.user_id, clinic_id=clinic_id)
    except DomainError as e:
        return fail(http_request, error=e.error_code, message=e.message, details=e.details, status_code=status_for(e))

    return ok(http_request, data=PatientQueueViewResponse.from_view(view), message="OK")
