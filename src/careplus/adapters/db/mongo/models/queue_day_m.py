"""
MongoDB Beanie models used by the queue persistence layer.

One document per (clinic_id, date); entries are embedded so a whole queue day
is written with a single version-guarded update.
"""

from datetime import datetime, timezone
from typing import List

import pymongo
from beanie import Document
from pydantic import BaseModel, Field
from pymongo import IndexModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QueueEntryMongo(BaseModel):
    """Embedded model for one queue entry (no revision_id)."""

    entry_id: str = Field(..., description="Entry ID (32 hex chars)")
    patient_id: str = Field(..., description="Patient user ID")
    patient_name: str = Field(..., description="Display name snapshot at join time")
    position: int = Field(..., description="Queue position, 0 when not waiting after a renumber")
    status: str = Field(default="waiting", description="Status: waiting, in-consultation, finished, cancelled")
    joined_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class QueueDayMongo(Document):
    """MongoDB model for a clinic's queue on one calendar day."""

    clinic_id: str = Field(..., description="Clinic ID")
    doctor_id: str = Field(..., description="Doctor owning the clinic")
    date: datetime = Field(..., description="Local midnight of the queue day")
    entries: List[QueueEntryMongo] = Field(default_factory=list)
    is_active: bool = Field(default=True)
    version: int = Field(default=0, description="Incremented on every committed write")
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    class Settings:
        name = "queue_days"
        indexes = [
            IndexModel(
                [("clinic_id", pymongo.ASCENDING), ("date", pymongo.ASCENDING)],
                unique=True,
                name="clinic_date_unique",
            ),
            [("entries.patient_id", 1), ("entries.status", 1)],  # find_latest_active_for_patient
            "updated_at",
        ]
