"""Beanie document models registered with ``init_beanie``."""

from .clinic_m import ClinicMongo
from .queue_day_m import QueueDayMongo, QueueEntryMongo

DOCUMENT_MODELS = [QueueDayMongo, ClinicMongo]

__all__ = ["ClinicMongo", "QueueDayMongo", "QueueEntryMongo", "DOCUMENT_MODELS"]
