"""
In-process implementation of ClinicRepository.
"""

import json
from typing import Dict, Iterable, Optional

from careplus.application.ports.repositories.clinic_repo import ClinicRepository
from careplus.domain.entities.clinic import Clinic


class InMemoryClinicRepository(ClinicRepository):
    """Clinic lookup over a fixed set of clinics."""

    def __init__(self, clinics: Optional[Iterable[Clinic]] = None) -> None:
        self._clinics: Dict[str, Clinic] = {}
        for clinic in clinics or []:
            self.add(clinic)

    def add(self, clinic: Clinic) -> None:
        """Register or replace a clinic."""
        self._clinics[clinic.clinic_id] = clinic

    async def find_by_id(self, clinic_id: str) -> Optional[Clinic]:
        return self._clinics.get(clinic_id)

    @classmethod
    def from_json_file(cls, path: str) -> "InMemoryClinicRepository":
        """Load clinics from a JSON list of clinic objects."""
        with open(path, encoding="utf-8") as f:
            records = json.load(f)
        return cls(
            Clinic(
                clinic_id=record["clinic_id"],
                doctor_id=record["doctor_id"],
                clinic_name=record.get("clinic_name", ""),
                consultation_fee=record.get("consultation_fee"),
                is_active=record.get("is_active", True),
            )
            for record in records
        )
