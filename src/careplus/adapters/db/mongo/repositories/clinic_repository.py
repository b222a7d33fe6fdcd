"""
MongoDB implementation of ClinicRepository.
"""

from typing import Optional

from pymongo.errors import PyMongoError

from careplus.application.ports.repositories.clinic_repo import ClinicRepository
from careplus.domain.entities.clinic import Clinic
from careplus.domain.errors import StoreUnavailableError

from ..models.clinic_m import ClinicMongo


class MongoClinicRepository(ClinicRepository):
    """MongoDB implementation of ClinicRepository."""

    async def find_by_id(self, clinic_id: str) -> Optional[Clinic]:
        """Find a clinic by ID."""
        try:
            clinic_mongo = await ClinicMongo.find_one(ClinicMongo.clinic_id == clinic_id)
        except PyMongoError as e:
            raise StoreUnavailableError("find_clinic", str(e)) from e

        if not clinic_mongo:
            return None

        return Clinic(
            clinic_id=clinic_mongo.clinic_id,
            doctor_id=clinic_mongo.doctor_id,
            clinic_name=clinic_mongo.clinic_name,
            consultation_fee=clinic_mongo.consultation_fee,
            is_active=clinic_mongo.is_active,
        )
