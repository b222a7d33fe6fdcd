"""Queue endpoints: join, leave, doctor actions and the doctor's queue view."""

from fastapi import APIRouter, Query, Request, status

from ...application.dto.queue_dto import (
    JoinQueueRequest as JoinQueueRequestDTO,
    LeaveQueueRequest as LeaveQueueRequestDTO,
    UpdateQueueEntryRequest as UpdateQueueEntryRequestDTO,
)
from ...application.use_cases.get_doctor_queue_view import GetDoctorQueueViewUseCase
from ...application.use_cases.join_queue import JoinQueueUseCase
from ...application.use_cases.leave_queue import LeaveQueueUseCase
from ...application.use_cases.update_queue_entry import UpdateQueueEntryUseCase
from ...core.structured_logger import get_logger
from ...domain.errors import DomainError
from ..deps import ClinicRepositoryDep, DoctorDep, PatientDep, QueueRepositoryDep, QueueSettingsDep
from ..errors import status_for
from ..schemas.common import ApiResponse, ErrorResponse
from ..schemas.queue import (
    JoinQueueRequest,
    JoinQueueResponse,
    LeaveQueueRequest,
    QueueDaySchema,
    UpdateQueueEntryRequest,
    UpdateQueueEntryResponse,
)
from ..utils.responses import fail, ok

router = APIRouter(prefix="/queue", tags=["queue"])
logger = get_logger("careplus.api")


def _domain_failure(request: Request, e: DomainError, operation: str):
    logger.info(
        "Queue request rejected",
        operation=operation,
        error=e.error_code,
        request_id=getattr(request.state, "request_id", None),
    )
    return fail(request, error=e.error_code, message=e.message, details=e.details, status_code=status_for(e))


@router.post(
    "/join",
    response_model=ApiResponse[JoinQueueResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Join today's queue of a clinic",
    responses={
        404: {"model": ErrorResponse, "description": "Clinic not found"},
        409: {"model": ErrorResponse, "description": "Already queued or concurrent update"},
        422: {"model": ErrorResponse, "description": "Invalid input"},
        503: {"model": ErrorResponse, "description": "Store unavailable"},
    },
)
async def join_queue(
    http_request: Request,
    request: JoinQueueRequest,
    patient: PatientDep,
    queue_repo: QueueRepositoryDep,
    clinic_repo: ClinicRepositoryDep,
    queue_settings: QueueSettingsDep,
):
    """
    Append the calling patient to today's queue.

    The queue day is created on first join. The returned position is the
    patient's token.
    """
    try:
        use_case = JoinQueueUseCase(queue_repo, clinic_repo, queue_settings)
        result = await use_case.execute(
            JoinQueueRequestDTO(
                clinic_id=request.clinic_id,
                patient_id=patient.user_id,
                patient_name=request.patient_name,
            )
        )
    except DomainError as e:
        return _domain_failure(http_request, e, "join")

    return ok(
        http_request,
        data=JoinQueueResponse(
            clinic_id=result.clinic_id,
            entry_id=result.entry_id,
            position=result.position,
            date=result.date,
            message=result.message,
        ),
        message="Created",
    )


@router.put(
    "/update",
    response_model=ApiResponse[UpdateQueueEntryResponse],
    summary="Start, finish or cancel a queue entry",
    responses={
        403: {"model": ErrorResponse, "description": "Caller does not own this queue"},
        404: {"model": ErrorResponse, "description": "Entry not found"},
        409: {"model": ErrorResponse, "description": "Invalid state or concurrent update"},
        503: {"model": ErrorResponse, "description": "Store unavailable"},
    },
)
async def update_queue_entry(
    http_request: Request,
    request: UpdateQueueEntryRequest,
    doctor: DoctorDep,
    queue_repo: QueueRepositoryDep,
    queue_settings: QueueSettingsDep,
):
    """Apply a doctor action to one entry of today's queue."""
    try:
        use_case = UpdateQueueEntryUseCase(queue_repo, queue_settings)
        result = await use_case.execute(
            UpdateQueueEntryRequestDTO(
                clinic_id=request.clinic_id,
                entry_id=request.entry_id,
                action=request.action.value,
                doctor_id=doctor.user_id,
            )
        )
    except DomainError as e:
        return _domain_failure(http_request, e, request.action.value)

    return ok(
        http_request,
        data=UpdateQueueEntryResponse(
            entry_id=result.entry_id,
            status=result.status,
            position=result.position,
            message=result.message,
        ),
        message=result.message,
    )


@router.post(
    "/leave",
    response_model=ApiResponse[UpdateQueueEntryResponse],
    summary="Leave today's queue before being seen",
    responses={
        404: {"model": ErrorResponse, "description": "Not in queue"},
        409: {"model": ErrorResponse, "description": "Already in consultation"},
    },
)
async def leave_queue(
    http_request: Request,
    request: LeaveQueueRequest,
    patient: PatientDep,
    queue_repo: QueueRepositoryDep,
    queue_settings: QueueSettingsDep,
):
    try:
        use_case = LeaveQueueUseCase(queue_repo, queue_settings)
        result = await use_case.execute(
            LeaveQueueRequestDTO(clinic_id=request.clinic_id, patient_id=patient.user_id)
        )
    except DomainError as e:
        return _domain_failure(http_request, e, "leave")

    return ok(
        http_request,
        data=UpdateQueueEntryResponse(
            entry_id=result.entry_id,
            status=result.status,
            position=result.position,
            message=result.message,
        ),
        message=result.message,
    )


@router.get(
    "",
    response_model=ApiResponse[QueueDaySchema],
    summary="Today's full queue for the owning doctor",
    responses={
        403: {"model": ErrorResponse, "description": "Caller does not own this queue"},
        404: {"model": ErrorResponse, "description": "Clinic not found"},
    },
)
async def get_queue(
    http_request: Request,
    doctor: DoctorDep,
    queue_repo: QueueRepositoryDep,
    clinic_repo: ClinicRepositoryDep,
    queue_settings: QueueSettingsDep,
    clinic_id: str = Query(..., min_length=1, max_length=100),
):
    """Return every entry of today's queue, including finished and cancelled ones."""
    try:
        use_case = GetDoctorQueueViewUseCase(queue_repo, clinic_repo, queue_settings)
        queue_day = await use_case.execute(clinic_id, doctor_id=doctor.user_id)
    except DomainError as e:
        return _domain_failure(http_request, e, "doctor_view")

    return ok(http_request, data=QueueDaySchema.from_queue_day(queue_day), message="OK")
