"""
Clinic repository interface for read-only clinic lookup.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ....domain.entities.clinic import Clinic


class ClinicRepository(ABC):
    """Abstract repository for clinic data access."""

    @abstractmethod
    async def find_by_id(self, clinic_id: str) -> Optional[Clinic]:
        """Find a clinic by ID."""
        pass
