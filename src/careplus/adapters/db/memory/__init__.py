from .clinic_repository import InMemoryClinicRepository
from .queue_day_repository import InMemoryQueueDayRepository

__all__ = ["InMemoryClinicRepository", "InMemoryQueueDayRepository"]
