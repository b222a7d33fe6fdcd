"""FastAPI dependency providers."""

from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from ..adapters.db.memory import InMemoryClinicRepository, InMemoryQueueDayRepository
from ..adapters.db.mongo.repositories.clinic_repository import MongoClinicRepository
from ..adapters.db.mongo.repositories.queue_day_repository import MongoQueueDayRepository
from ..application.ports.repositories.clinic_repo import ClinicRepository
from ..application.ports.repositories.queue_repo import QueueDayRepository
from ..core.config import QueueSettings, get_settings
from .errors import ForbiddenError, UnauthorizedError


@lru_cache()
def get_queue_repository() -> QueueDayRepository:
    """Get queue day repository instance for the configured store backend."""
    if get_settings().uses_memory_store:
        return InMemoryQueueDayRepository()
    return MongoQueueDayRepository()


@lru_cache()
def get_clinic_repository() -> ClinicRepository:
    """Get clinic repository instance for the configured store backend."""
    settings = get_settings()
    if settings.uses_memory_store:
        if settings.store.seed_clinics_file:
            return InMemoryClinicRepository.from_json_file(settings.store.seed_clinics_file)
        return InMemoryClinicRepository()
    return MongoClinicRepository()


def get_queue_settings() -> QueueSettings:
    return get_settings().queue


@dataclass
class CurrentUser:
    user_id: str
    role: str

    @property
    def is_doctor(self) -> bool:
        return self.role == "doctor"

    @property
    def is_patient(self) -> bool:
        return self.role == "patient"


def get_current_user(request: Request) -> CurrentUser:
    """
    Get the caller's identity from request state.

    The identity middleware must have run first (which it does for every
    non-public path).
    """
    user_id = getattr(request.state, "user_id", None)
    role = getattr(request.state, "user_role", None)
    if not user_id or not role:
        raise UnauthorizedError("User not authenticated")
    return CurrentUser(user_id=user_id, role=role)


def require_doctor(user: Annotated[CurrentUser, Depends(get_current_user)]) -> CurrentUser:
    if not user.is_doctor:
        raise ForbiddenError("Doctor role required", {"role": user.role})
    return user


def require_patient(user: Annotated[CurrentUser, Depends(get_current_user)]) -> CurrentUser:
    if not user.is_patient:
        raise ForbiddenError("Patient role required", {"role": user.role})
    return user


# Dependency annotations for FastAPI
QueueRepositoryDep = Annotated[QueueDayRepository, Depends(get_queue_repository)]
ClinicRepositoryDep = Annotated[ClinicRepository, Depends(get_clinic_repository)]
QueueSettingsDep = Annotated[QueueSettings, Depends(get_queue_settings)]
DoctorDep = Annotated[CurrentUser, Depends(require_doctor)]
PatientDep = Annotated[CurrentUser, Depends(require_patient)]
