"""Queue DTOs exchanged between the HTTP layer and the use cases."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class JoinQueueRequest:
    """Request DTO for joining today's queue of a clinic."""

    clinic_id: str
    patient_id: str
    patient_name: str


@dataclass
class JoinQueueResponse:
    """Response DTO for joining a queue."""

    clinic_id: str
    entry_id: str
    position: int
    date: datetime
    message: str


@dataclass
class UpdateQueueEntryRequest:
    """Request DTO for a doctor action on a queue entry."""

    clinic_id: str
    entry_id: str
    action: str
    doctor_id: str


@dataclass
class UpdateQueueEntryResponse:
    """Response DTO for a doctor action."""

    entry_id: str
    status: str
    position: int
    message: str


@dataclass
class LeaveQueueRequest:
    """Request DTO for a patient leaving today's queue."""

    clinic_id: str
    patient_id: str


@dataclass
class QueueRow:
    """One visible row of the live queue."""

    token: str
    patient_name: str
    status: str  # consulting, waiting
    is_me: bool = False


@dataclass
class PatientQueueView:
    """Patient-facing snapshot of the queue the patient is in."""

    clinic_id: str
    doctor_id: str
    date: datetime
    entry_id: str
    my_position: int
    status: str
    people_ahead: int
    estimated_wait_minutes: int
    current_serving_token: str
    queue_list: List[QueueRow] = field(default_factory=list)
    updated_at: Optional[datetime] = None
    clinic_name: str = ""
