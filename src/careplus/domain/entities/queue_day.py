"""QueueDay aggregate: one clinic's first-come-first-served queue for one calendar day.

The aggregate owns its entries and is the only place where entry status and
position change. Positions of waiting entries are only guaranteed to be the
contiguous sequence 1..n right after a renumbering; a join appends with the
running entry counter unless renumbering on join is requested.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from ..enums.queue import EntryStatus, QueueAction
from ..errors import (
    AlreadyQueuedError,
    EntryNotFoundError,
    InvalidQueueDataError,
    InvalidStateError,
)
from ..value_objects.entry_id import EntryId


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class QueueEntry:
    """One patient-join event within a QueueDay."""

    entry_id: EntryId
    patient_id: str
    patient_name: str
    position: int
    status: EntryStatus = EntryStatus.WAITING
    joined_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    def _move_to(self, status: EntryStatus, now: datetime) -> None:
        self.status = status
        self.updated_at = now


@dataclass
class QueueDay:
    """Aggregate root keyed by (clinic_id, date)."""

    clinic_id: str
    doctor_id: str
    date: datetime
    entries: List[QueueEntry] = field(default_factory=list)
    is_active: bool = True
    version: int = 0
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not self.clinic_id or not self.clinic_id.strip():
            raise InvalidQueueDataError("clinic_id", self.clinic_id)
        if not self.doctor_id or not self.doctor_id.strip():
            raise InvalidQueueDataError("doctor_id", self.doctor_id)
        if (self.date.hour, self.date.minute, self.date.second, self.date.microsecond) != (0, 0, 0, 0):
            raise InvalidQueueDataError("date", self.date.isoformat())

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_entry(self, entry_id: EntryId) -> Optional[QueueEntry]:
        for entry in self.entries:
            if entry.entry_id == entry_id:
                return entry
        return None

    def active_entry_for(self, patient_id: str) -> Optional[QueueEntry]:
        """Return the patient's waiting or in-consultation entry, if any."""
        for entry in self.entries:
            if entry.patient_id == patient_id and entry.is_active:
                return entry
        return None

    def in_consultation_entry(self) -> Optional[QueueEntry]:
        for entry in self.entries:
            if entry.status == EntryStatus.IN_CONSULTATION:
                return entry
        return None

    def waiting_entries(self) -> List[QueueEntry]:
        """Waiting entries in join order."""
        return [e for e in self.entries if e.status == EntryStatus.WAITING]

    def is_owned_by(self, doctor_id: str) -> bool:
        return self.doctor_id == doctor_id

    # ------------------------------------------------------------------
    # Position assignment
    # ------------------------------------------------------------------

    def admit(
        self,
        patient_id: str,
        patient_name: str,
        renumber: bool = False,
        now: Optional[datetime] = None,
    ) -> QueueEntry:
        """Append a waiting entry for the patient and return it.

        The new position is the running count of every entry appended today
        plus one. Finished and cancelled entries still count, so the position
        can be inflated until the next renumbering unless ``renumber`` is set.
        """
        if not patient_id or not patient_id.strip():
            raise InvalidQueueDataError("patient_id", patient_id)
        name = (patient_name or "").strip()
        if not name:
            raise InvalidQueueDataError("patient_name", patient_name)
        if len(name) > 120:
            raise InvalidQueueDataError("patient_name", name[:50])

        existing = self.active_entry_for(patient_id)
        if existing is not None:
            raise AlreadyQueuedError(self.clinic_id, patient_id, existing.entry_id.value)

        now = now or _utcnow()
        entry = QueueEntry(
            entry_id=EntryId.generate(),
            patient_id=patient_id,
            patient_name=name,
            position=len(self.entries) + 1,
            joined_at=now,
            updated_at=now,
        )
        self.entries.append(entry)
        if renumber:
            self.renumber()
        self.updated_at = now
        return entry

    def renumber(self) -> None:
        """Give waiting entries 1..n in join order; everything else gets 0."""
        position = 1
        for entry in self.entries:
            if entry.status == EntryStatus.WAITING:
                entry.position = position
                position += 1
            else:
                entry.position = 0

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def _require_entry(self, entry_id: EntryId) -> QueueEntry:
        entry = self.find_entry(entry_id)
        if entry is None:
            raise EntryNotFoundError(self.clinic_id, entry_id.value)
        return entry

    def start_consultation(self, entry_id: EntryId, now: Optional[datetime] = None) -> QueueEntry:
        """waiting -> in-consultation. Position is left untouched."""
        entry = self._require_entry(entry_id)
        action = QueueAction.START_CONSULTATION.value
        if entry.status != EntryStatus.WAITING:
            raise InvalidStateError(entry_id.value, entry.status.value, action)

        current = self.in_consultation_entry()
        if current is not None:
            raise InvalidStateError(
                entry_id.value,
                entry.status.value,
                action,
                f"entry '{current.entry_id.value}' is already in consultation",
            )

        now = now or _utcnow()
        entry._move_to(EntryStatus.IN_CONSULTATION, now)
        self.updated_at = now
        return entry

    def finish(self, entry_id: EntryId, now: Optional[datetime] = None) -> QueueEntry:
        """in-consultation (or waiting) -> finished, then renumber."""
        entry = self._require_entry(entry_id)
        if not entry.is_active:
            raise InvalidStateError(entry_id.value, entry.status.value, QueueAction.FINISH.value)

        now = now or _utcnow()
        entry._move_to(EntryStatus.FINISHED, now)
        self.renumber()
        self.updated_at = now
        return entry

    def cancel(self, entry_id: EntryId, now: Optional[datetime] = None) -> QueueEntry:
        """waiting -> cancelled, then renumber."""
        entry = self._require_entry(entry_id)
        if entry.status != EntryStatus.WAITING:
            raise InvalidStateError(entry_id.value, entry.status.value, QueueAction.CANCEL.value)

        now = now or _utcnow()
        entry._move_to(EntryStatus.CANCELLED, now)
        self.renumber()
        self.updated_at = now
        return entry

    def apply(self, action: QueueAction, entry_id: EntryId, now: Optional[datetime] = None) -> QueueEntry:
        """Dispatch a doctor action to its transition."""
        if action == QueueAction.START_CONSULTATION:
            return self.start_consultation(entry_id, now)
        if action == QueueAction.FINISH:
            return self.finish(entry_id, now)
        return self.cancel(entry_id, now)
