"""
Queue API schemas: request bodies and response payloads.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ...application.dto.queue_dto import PatientQueueView, QueueRow
from ...application.utils.queue_projection import ROW_CONSULTING
from ...domain.entities.clinic import Clinic
from ...domain.entities.queue_day import QueueDay, QueueEntry
from ...domain.enums.queue import QueueAction


# ============================================================================
# REQUESTS
# ============================================================================


class JoinQueueRequest(BaseModel):
    clinic_id: str = Field(..., min_length=1, max_length=100, description="Clinic to queue at")
    patient_name: str = Field(..., min_length=1, max_length=120, description="Display name shown in the queue")

    @field_validator("patient_name")
    @classmethod
    def validate_patient_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("patient_name cannot be blank")
        return v.strip()


class UpdateQueueEntryRequest(BaseModel):
    clinic_id: str = Field(..., min_length=1, max_length=100, description="Clinic whose queue is updated")
    entry_id: str = Field(..., min_length=1, max_length=64, description="Queue entry to act on")
    action: QueueAction = Field(..., description="start-consultation, finish or cancel")


class LeaveQueueRequest(BaseModel):
    clinic_id: str = Field(..., min_length=1, max_length=100, description="Clinic whose queue to leave")


# ============================================================================
# RESPONSES
# ============================================================================


class JoinQueueResponse(BaseModel):
    clinic_id: str
    entry_id: str
    position: int
    date: datetime
    message: str


class UpdateQueueEntryResponse(BaseModel):
    entry_id: str
    status: str
    position: int
    message: str


class QueueEntrySchema(BaseModel):
    entry_id: str
    patient_id: str
    patient_name: str
    position: int
    status: str
    joined_at: datetime
    updated_at: datetime

    @classmethod
    def from_entry(cls, entry: QueueEntry) -> "QueueEntrySchema":
        return cls(
            entry_id=entry.entry_id.value,
            patient_id=entry.patient_id,
            patient_name=entry.patient_name,
            position=entry.position,
            status=entry.status.value,
            joined_at=entry.joined_at,
            updated_at=entry.updated_at,
        )


class QueueDaySchema(BaseModel):
    """Full, unfiltered queue of a clinic for one day."""

    clinic_id: str
    doctor_id: str
    date: datetime
    is_active: bool
    version: int
    entries: List[QueueEntrySchema] = Field(default_factory=list)
    updated_at: Optional[datetime] = None

    @classmethod
    def from_queue_day(cls, queue_day: QueueDay) -> "QueueDaySchema":
        return cls(
            clinic_id=queue_day.clinic_id,
            doctor_id=queue_day.doctor_id,
            date=queue_day.date,
            is_active=queue_day.is_active,
            version=queue_day.version,
            entries=[QueueEntrySchema.from_entry(e) for e in queue_day.entries],
            updated_at=queue_day.updated_at,
        )


class QueueRowSchema(BaseModel):
    token: str
    name: str = Field(..., description="'You' for the caller's own row")
    status: str
    time: str
    is_me: bool

    @classmethod
    def from_row(cls, row: QueueRow) -> "QueueRowSchema":
        consulting = row.status == ROW_CONSULTING
        return cls(
            token=row.token,
            name="You" if row.is_me else row.patient_name,
            status=row.status,
            time="Now" if consulting else "Wait...",
            is_me=row.is_me,
        )


class PatientQueueViewResponse(BaseModel):
    clinic_id: str
    clinic_name: str = ""
    doctor_id: str
    date: datetime
    entry_id: str
    my_position: int
    status: str
    people_ahead: int
    estimated_wait_minutes: int
    estimated_time: str = Field(..., description="Human readable wait, e.g. '30 mins'")
    current_serving_token: str
    queue_list: List[QueueRowSchema] = Field(default_factory=list)

    @classmethod
    def from_view(cls, view: PatientQueueView) -> "PatientQueueViewResponse":
        return cls(
            clinic_id=view.clinic_id,
            clinic_name=view.clinic_name,
            doctor_id=view.doctor_id,
            date=view.date,
            entry_id=view.entry_id,
            my_position=view.my_position,
            status=view.status,
            people_ahead=view.people_ahead,
            estimated_wait_minutes=view.estimated_wait_minutes,
            estimated_time=f"{view.estimated_wait_minutes} mins",
            current_serving_token=view.current_serving_token,
            queue_list=[QueueRowSchema.from_row(r) for r in view.queue_list],
        )


class ClinicResponse(BaseModel):
    clinic_id: str
    doctor_id: str
    clinic_name: str
    consultation_fee: Optional[float] = None
    is_active: bool

    @classmethod
    def from_clinic(cls, clinic: Clinic) -> "ClinicResponse":
        return cls(
            clinic_id=clinic.clinic_id,
            doctor_id=clinic.doctor_id,
            clinic_name=clinic.clinic_name,
            consultation_fee=clinic.consultation_fee,
            is_active=clinic.is_active,
        )
