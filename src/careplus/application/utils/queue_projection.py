"""
Read-only projections of a QueueDay for patients.

Nothing here mutates the queue; every value is derived from the entry list as
it was loaded.
"""

from typing import List

from ...domain.entities.queue_day import QueueDay, QueueEntry
from ...domain.enums.queue import EntryStatus
from ...domain.errors import NotInQueueError
from ..dto.queue_dto import PatientQueueView, QueueRow

NO_TOKEN = "-"
ROW_CONSULTING = "consulting"
ROW_WAITING = "waiting"


def count_people_ahead(queue_day: QueueDay, me: QueueEntry) -> int:
    """Waiting entries with a lower position, plus whoever is being seen now.

    The in-consultation entry has position 0 after a renumbering, so it is
    counted by status rather than by position. The caller is never ahead of
    themselves.
    """
    if me.status == EntryStatus.IN_CONSULTATION:
        return 0

    waiting_ahead = sum(
        1
        for entry in queue_day.entries
        if entry.status == EntryStatus.WAITING
        and entry.entry_id != me.entry_id
        and entry.position < me.position
    )
    consulting = queue_day.in_consultation_entry()
    return waiting_ahead + (1 if consulting is not None else 0)


def current_serving_token(queue_day: QueueDay) -> str:
    """Position being served, else the next waiting position, else ``-``."""
    consulting = queue_day.in_consultation_entry()
    if consulting is not None:
        return str(consulting.position)

    waiting = queue_day.waiting_entries()
    if not waiting:
        return NO_TOKEN
    return str(min(entry.position for entry in waiting))


def _row_sort_key(entry: QueueEntry):
    # Currently serving first, whatever its position value
    return (0 if entry.status == EntryStatus.IN_CONSULTATION else 1, entry.position)


def visible_rows(queue_day: QueueDay, patient_id: str) -> List[QueueRow]:
    """Waiting and in-consultation entries, serving row first then by position."""
    active = sorted((e for e in queue_day.entries if e.is_active), key=_row_sort_key)
    return [
        QueueRow(
            token=str(entry.position),
            patient_name=entry.patient_name,
            status=ROW_CONSULTING if entry.status == EntryStatus.IN_CONSULTATION else ROW_WAITING,
            is_me=entry.patient_id == patient_id,
        )
        for entry in active
    ]


def build_patient_view(queue_day: QueueDay, patient_id: str, service_minutes: int) -> PatientQueueView:
    """Derive the patient-facing snapshot of ``queue_day`` for ``patient_id``."""
    me = queue_day.active_entry_for(patient_id)
    if me is None:
        raise NotInQueueError(patient_id, queue_day.clinic_id)

    people_ahead = count_people_ahead(queue_day, me)
    return PatientQueueView(
        clinic_id=queue_day.clinic_id,
        doctor_id=queue_day.doctor_id,
        date=queue_day.date,
        entry_id=me.entry_id.value,
        my_position=me.position,
        status=me.status.value,
        people_ahead=people_ahead,
        estimated_wait_minutes=people_ahead * service_minutes,
        current_serving_token=current_serving_token(queue_day),
        queue_list=visible_rows(queue_day, patient_id),
        updated_at=queue_day.updated_at,
    )
