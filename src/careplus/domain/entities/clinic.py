"""Clinic domain entity as seen by the queue: who owns it and what it charges."""

from dataclasses import dataclass
from typing import Optional

from ..errors import InvalidQueueDataError


@dataclass
class Clinic:
    """Read-only clinic record.

    Profile fields beyond these live with the clinic management collaborator.
    """

    clinic_id: str
    doctor_id: str
    clinic_name: str = ""
    consultation_fee: Optional[float] = None
    is_active: bool = True

    def __post_init__(self) -> None:
        if not self.clinic_id or not self.clinic_id.strip():
            raise InvalidQueueDataError("clinic_id", self.clinic_id)
        if not self.doctor_id or not self.doctor_id.strip():
            raise InvalidQueueDataError("doctor_id", self.doctor_id)
        if self.consultation_fee is not None and self.consultation_fee < 0:
            raise InvalidQueueDataError("consultation_fee", self.consultation_fee)
