"""MongoDB Beanie model for Clinic documents."""

from datetime import datetime, timezone
from typing import Optional

from beanie import Document
from pydantic import Field


class ClinicMongo(Document):
    """MongoDB model for Clinic entity (read-only from the queue's side)."""

    clinic_id: str = Field(..., description="Clinic ID")
    doctor_id: str = Field(..., description="Owning doctor's user ID")
    clinic_name: str = Field(default="", description="Clinic display name")
    consultation_fee: Optional[float] = Field(None, description="Consultation fee")
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "clinics"
        indexes = [
            "clinic_id",
            "doctor_id",
        ]
