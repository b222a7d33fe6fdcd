"""Get Clinic use case: read-only clinic and consultation fee lookup."""

from ...domain.entities.clinic import Clinic
from ...domain.errors import ClinicNotFoundError
from ..ports.repositories.clinic_repo import ClinicRepository


class GetClinicUseCase:
    """Use case for looking up a clinic's owner and fee."""

    def __init__(self, clinic_repository: ClinicRepository):
        self._clinic_repository = clinic_repository

    async def execute(self, clinic_id: str) -> Clinic:
        """Execute the get clinic use case."""
        clinic = await self._clinic_repository.find_by_id(clinic_id)
        if clinic is None:
            raise ClinicNotFoundError(clinic_id)
        return clinic
