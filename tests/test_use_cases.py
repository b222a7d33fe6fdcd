"""
Use case tests against the in-memory store.
"""

from datetime import datetime, timezone

import pytest

from careplus.application.dto.queue_dto import (
    JoinQueueRequest,
    LeaveQueueRequest,
    UpdateQueueEntryRequest,
)
from careplus.application.use_cases.get_clinic import GetClinicUseCase
from careplus.application.use_cases.get_doctor_queue_view import GetDoctorQueueViewUseCase
from careplus.application.use_cases.get_patient_queue_view import GetPatientQueueViewUseCase
from careplus.application.use_cases.join_queue import JoinQueueUseCase
from careplus.application.use_cases.leave_queue import LeaveQueueUseCase
from careplus.application.use_cases.update_queue_entry import UpdateQueueEntryUseCase
from careplus.core.config import QueueSettings
from careplus.core.utils.datetime_utils import local_midnight
from careplus.domain.entities.queue_day import QueueDay
from careplus.domain.errors import (
    AlreadyQueuedError,
    ClinicNotFoundError,
    ConcurrentUpdateError,
    EntryNotFoundError,
    InvalidStateError,
    NotInQueueError,
    NotQueueOwnerError,
)

TODAY = datetime(2026, 10, 19)


async def join(queue_repo, clinic_repo, settings, clock, patient_id, name, clinic_id="C1"):
    use_case = JoinQueueUseCase(queue_repo, clinic_repo, settings, clock=clock)
    return await use_case.execute(JoinQueueRequest(clinic_id=clinic_id, patient_id=patient_id, patient_name=name))


async def update(queue_repo, settings, clock, entry_id, action, doctor_id="D1"):
    use_case = UpdateQueueEntryUseCase(queue_repo, settings, clock=clock)
    return await use_case.execute(
        UpdateQueueEntryRequest(clinic_id="C1", entry_id=entry_id, action=action, doctor_id=doctor_id)
    )


class ConflictingRepository:
    """Delegates to a real repository but loses the first ``conflicts`` writes."""

    def __init__(self, inner, conflicts, on_conflict=None):
        self._inner = inner
        self._conflicts = conflicts
        self._on_conflict = on_conflict
        self.save_calls = 0

    async def find_by_clinic_and_date(self, clinic_id, date):
        return await self._inner.find_by_clinic_and_date(clinic_id, date)

    async def create(self, queue_day):
        return await self._inner.create(queue_day)

    async def find_latest_active_for_patient(self, patient_id):
        return await self._inner.find_latest_active_for_patient(patient_id)

    async def save_if_version(self, queue_day, expected_version):
        self.save_calls += 1
        if self._conflicts > 0:
            self._conflicts -= 1
            if self._on_conflict is not None:
                await self._on_conflict()
            return False
        return await self._inner.save_if_version(queue_day, expected_version)


# ----------------------------------------------------------------------------
# join
# ----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_join_opens_queue_day_and_assigns_positions(queue_repo, clinic_repo, queue_settings, clock):
    first = await join(queue_repo, clinic_repo, queue_settings, clock, "p1", "Alice")
    second = await join(queue_repo, clinic_repo, queue_settings, clock, "p2", "Bob")

    assert (first.position, second.position) == (1, 2)
    assert first.date == TODAY

    stored = await queue_repo.find_by_clinic_and_date("C1", TODAY)
    assert stored.doctor_id == "D1"
    assert [e.patient_id for e in stored.entries] == ["p1", "p2"]
    assert stored.version == 2


@pytest.mark.asyncio
async def test_join_unknown_clinic(queue_repo, clinic_repo, queue_settings, clock):
    with pytest.raises(ClinicNotFoundError):
        await join(queue_repo, clinic_repo, queue_settings, clock, "p1", "Alice", clinic_id="nope")

    assert await queue_repo.find_by_clinic_and_date("nope", TODAY) is None


@pytest.mark.asyncio
async def test_join_twice_is_rejected(queue_repo, clinic_repo, queue_settings, clock):
    await join(queue_repo, clinic_repo, queue_settings, clock, "p1", "Alice")

    with pytest.raises(AlreadyQueuedError):
        await join(queue_repo, clinic_repo, queue_settings, clock, "p1", "Alice")

    stored = await queue_repo.find_by_clinic_and_date("C1", TODAY)
    assert len(stored.entries) == 1


@pytest.mark.asyncio
async def test_join_with_renumber_on_join(queue_repo, clinic_repo, clock):
    settings = QueueSettings(renumber_on_join=True)
    alice = await join(queue_repo, clinic_repo, settings, clock, "p1", "Alice")
    await join(queue_repo, clinic_repo, settings, clock, "p2", "Bob")
    await LeaveQueueUseCase(queue_repo, settings, clock=clock).execute(
        LeaveQueueRequest(clinic_id="C1", patient_id="p1")
    )

    carol = await join(queue_repo, clinic_repo, settings, clock, "p3", "Carol")

    assert alice.position == 1
    assert carol.position == 2


@pytest.mark.asyncio
async def test_queue_day_follows_configured_timezone(queue_repo, clinic_repo):
    settings = QueueSettings(timezone="Asia/Kolkata")
    late_evening_utc = datetime(2026, 10, 19, 20, 0, tzinfo=timezone.utc)

    result = await join(queue_repo, clinic_repo, settings, lambda: late_evening_utc, "p1", "Alice")

    assert result.date == datetime(2026, 10, 20)
    assert local_midnight(late_evening_utc, "UTC") == TODAY


# ----------------------------------------------------------------------------
# update / leave
# ----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_start_then_finish_renumbers(queue_repo, clinic_repo, queue_settings, clock):
    alice = await join(queue_repo, clinic_repo, queue_settings, clock, "p1", "Alice")
    await join(queue_repo, clinic_repo, queue_settings, clock, "p2", "Bob")

    started = await update(queue_repo, queue_settings, clock, alice.entry_id, "start-consultation")
    assert (started.status, started.position) == ("in-consultation", 1)

    finished = await update(queue_repo, queue_settings, clock, alice.entry_id, "finish")
    assert (finished.status, finished.position) == ("finished", 0)
    assert finished.message == "Patient consultation completed"

    view = await GetPatientQueueViewUseCase(queue_repo, clinic_repo, queue_settings, clock=clock).execute("p2", clinic_id="C1")
    assert view.my_position == 1
    assert view.people_ahead == 0
    assert view.current_serving_token == "1"


@pytest.mark.asyncio
async def test_update_by_other_doctor_is_rejected(queue_repo, clinic_repo, queue_settings, clock):
    alice = await join(queue_repo, clinic_repo, queue_settings, clock, "p1", "Alice")

    with pytest.raises(NotQueueOwnerError):
        await update(queue_repo, queue_settings, clock, alice.entry_id, "finish", doctor_id="D2")

    stored = await queue_repo.find_by_clinic_and_date("C1", TODAY)
    assert stored.entries[0].status.value == "waiting"


@pytest.mark.asyncio
async def test_update_unknown_entry(queue_repo, clinic_repo, queue_settings, clock):
    with pytest.raises(EntryNotFoundError):
        await update(queue_repo, queue_settings, clock, "0" * 32, "finish")

    await join(queue_repo, clinic_repo, queue_settings, clock, "p1", "Alice")
    before = await queue_repo.find_by_clinic_and_date("C1", TODAY)

    with pytest.raises(EntryNotFoundError):
        await update(queue_repo, queue_settings, clock, "0" * 32, "cancel")
    with pytest.raises(EntryNotFoundError):
        await update(queue_repo, queue_settings, clock, "not-an-id", "cancel")

    assert await queue_repo.find_by_clinic_and_date("C1", TODAY) == before


@pytest.mark.asyncio
async def test_leave_cancels_only_callers_entry(queue_repo, clinic_repo, queue_settings, clock):
    await join(queue_repo, clinic_repo, queue_settings, clock, "p1", "Alice")
    await join(queue_repo, clinic_repo, queue_settings, clock, "p2", "Bob")
    leave = LeaveQueueUseCase(queue_repo, queue_settings, clock=clock)

    result = await leave.execute(LeaveQueueRequest(clinic_id="C1", patient_id="p1"))

    assert result.status == "cancelled"
    stored = await queue_repo.find_by_clinic_and_date("C1", TODAY)
    bob = stored.entries[1]
    assert (bob.status.value, bob.position) == ("waiting", 1)

    with pytest.raises(NotInQueueError):
        await leave.execute(LeaveQueueRequest(clinic_id="C1", patient_id="p1"))


@pytest.mark.asyncio
async def test_leave_during_consultation_is_rejected(queue_repo, clinic_repo, queue_settings, clock):
    alice = await join(queue_repo, clinic_repo, queue_settings, clock, "p1", "Alice")
    await update(queue_repo, queue_settings, clock, alice.entry_id, "start-consultation")

    with pytest.raises(InvalidStateError):
        await LeaveQueueUseCase(queue_repo, queue_settings, clock=clock).execute(
            LeaveQueueRequest(clinic_id="C1", patient_id="p1")
        )


# ----------------------------------------------------------------------------
# concurrency
# ----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_conflicting_write_is_recomputed_from_fresh_state(queue_repo, clinic_repo, queue_settings, clock):
    await join(queue_repo, clinic_repo, queue_settings, clock, "p1", "Alice")

    async def concurrent_join():
        # Another request commits Bob while Carol's write is in flight
        await join(queue_repo, clinic_repo, queue_settings, clock, "p2", "Bob")

    racing_repo = ConflictingRepository(queue_repo, conflicts=1, on_conflict=concurrent_join)
    carol = await join(racing_repo, clinic_repo, queue_settings, clock, "p3", "Carol")

    assert racing_repo.save_calls == 2
    assert carol.position == 3
    stored = await queue_repo.find_by_clinic_and_date("C1", TODAY)
    assert [(e.patient_id, e.position) for e in stored.entries] == [("p1", 1), ("p2", 2), ("p3", 3)]


@pytest.mark.asyncio
async def test_gives_up_after_max_write_attempts(queue_repo, clinic_repo, queue_settings, clock):
    await join(queue_repo, clinic_repo, queue_settings, clock, "p1", "Alice")
    racing_repo = ConflictingRepository(queue_repo, conflicts=100)

    with pytest.raises(ConcurrentUpdateError):
        await join(racing_repo, clinic_repo, queue_settings, clock, "p2", "Bob")

    assert racing_repo.save_calls == queue_settings.max_write_attempts
    stored = await queue_repo.find_by_clinic_and_date("C1", TODAY)
    assert len(stored.entries) == 1


@pytest.mark.asyncio
async def test_create_returns_existing_day(queue_repo):
    first = await queue_repo.create(QueueDay(clinic_id="C1", doctor_id="D1", date=TODAY))
    await queue_repo.save_if_version(first, 0)

    second = await queue_repo.create(QueueDay(clinic_id="C1", doctor_id="D1", date=TODAY))

    assert second.version == 1


# ----------------------------------------------------------------------------
# views
# ----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_patient_view_without_clinic_uses_latest_active_queue(queue_repo, clinic_repo, queue_settings, clock):
    await join(queue_repo, clinic_repo, queue_settings, clock, "p1", "Alice")
    use_case = GetPatientQueueViewUseCase(queue_repo, clinic_repo, queue_settings, clock=clock)

    view = await use_case.execute("p1")

    assert view.clinic_id == "C1"
    assert view.clinic_name == "Sunrise Clinic"
    assert view.my_position == 1
    with pytest.raises(NotInQueueError):
        await use_case.execute("p9")


@pytest.mark.asyncio
async def test_doctor_view_returns_empty_unsaved_day(queue_repo, clinic_repo, queue_settings, clock):
    use_case = GetDoctorQueueViewUseCase(queue_repo, clinic_repo, queue_settings, clock=clock)

    queue_day = await use_case.execute("C1", doctor_id="D1")

    assert queue_day.entries == []
    assert queue_day.date == TODAY
    assert await queue_repo.find_by_clinic_and_date("C1", TODAY) is None

    with pytest.raises(NotQueueOwnerError):
        await use_case.execute("C1", doctor_id="D2")
    with pytest.raises(ClinicNotFoundError):
        await use_case.execute("nope")


@pytest.mark.asyncio
async def test_doctor_view_includes_closed_entries(queue_repo, clinic_repo, queue_settings, clock):
    alice = await join(queue_repo, clinic_repo, queue_settings, clock, "p1", "Alice")
    await update(queue_repo, queue_settings, clock, alice.entry_id, "finish")

    queue_day = await GetDoctorQueueViewUseCase(queue_repo, clinic_repo, queue_settings, clock=clock).execute("C1")

    assert [e.status.value for e in queue_day.entries] == ["finished"]


@pytest.mark.asyncio
async def test_get_clinic(clinic_repo):
    clinic = await GetClinicUseCase(clinic_repo).execute("C1")
    assert clinic.consultation_fee == 500.0

    with pytest.raises(ClinicNotFoundError):
        await GetClinicUseCase(clinic_repo).execute("nope")
