"""
Shared fixtures. The in-memory store is selected before the app is imported.
"""

import os
from datetime import datetime, timezone

import pytest

os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("LOG_FORMAT", "text")

from careplus.adapters.db.memory import InMemoryClinicRepository, InMemoryQueueDayRepository  # noqa: E402
from careplus.core.config import QueueSettings  # noqa: E402
from careplus.domain.entities.clinic import Clinic  # noqa: E402

NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def clinic():
    return Clinic(clinic_id="C1", doctor_id="D1", clinic_name="Sunrise Clinic", consultation_fee=500.0)


@pytest.fixture
def clinic_repo(clinic):
    return InMemoryClinicRepository([clinic])


@pytest.fixture
def queue_repo():
    return InMemoryQueueDayRepository()


@pytest.fixture
def queue_settings():
    return QueueSettings(service_minutes=15, timezone="UTC", renumber_on_join=False, max_write_attempts=3)


@pytest.fixture
def clock():
    return lambda: NOW
