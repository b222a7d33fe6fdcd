"""Read-only clinic lookup."""

from fastapi import APIRouter, Path, Request

from ...application.use_cases.get_clinic import GetClinicUseCase
from ...domain.errors import DomainError
from ..deps import ClinicRepositoryDep
from ..errors import status_for
from ..schemas.common import ApiResponse, ErrorResponse
from ..schemas.queue import ClinicResponse
from ..utils.responses import fail, ok

router = APIRouter(prefix="/clinics", tags=["clinics"])


@router.get(
    "/{clinic_id}",
    response_model=ApiResponse[ClinicResponse],
    summary="Clinic owner and consultation fee",
    responses={404: {"model": ErrorResponse, "description": "Clinic not found"}},
)
async def get_clinic(
    http_request: Request,
    clinic_repo: ClinicRepositoryDep,
    clinic_id: str = Path(..., min_length=1, max_length=100),
):
    try:
        clinic = await GetClinicUseCase(clinic_repo).execute(clinic_id)
    except DomainError as e:
        return fail(http_request, error=e.error_code, message=e.message, details=e.details, status_code=status_for(e))

    return ok(http_request, data=ClinicResponse.from_clinic(clinic), message="OK")
