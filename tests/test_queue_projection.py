"""
Patient view projection tests.
"""

from datetime import datetime

import pytest

from careplus.application.utils.queue_projection import (
    NO_TOKEN,
    build_patient_view,
    count_people_ahead,
    current_serving_token,
    visible_rows,
)
from careplus.domain.entities.queue_day import QueueDay
from careplus.domain.errors import NotInQueueError

TODAY = datetime(2026, 10, 19)


@pytest.fixture
def day():
    return QueueDay(clinic_id="C1", doctor_id="D1", date=TODAY)


def test_scenario_second_patient_after_first_finishes(day):
    alice = day.admit("p1", "Alice")
    bob = day.admit("p2", "Bob")
    day.start_consultation(alice.entry_id)
    day.finish(alice.entry_id)

    view = build_patient_view(day, "p2", service_minutes=15)

    assert view.my_position == 1
    assert view.entry_id == bob.entry_id.value
    assert view.people_ahead == 0
    assert view.estimated_wait_minutes == 0
    assert view.current_serving_token == "1"


def test_people_ahead_counts_waiting_and_consulting(day):
    alice = day.admit("p1", "Alice")
    day.admit("p2", "Bob")
    carol = day.admit("p3", "Carol")
    day.start_consultation(alice.entry_id)

    assert count_people_ahead(day, carol) == 2
    view = build_patient_view(day, "p3", service_minutes=10)
    assert view.estimated_wait_minutes == 20
    assert view.current_serving_token == "1"


def test_patient_in_consultation_has_nobody_ahead(day):
    alice = day.admit("p1", "Alice")
    day.admit("p2", "Bob")
    day.start_consultation(alice.entry_id)

    assert count_people_ahead(day, alice) == 0


def test_serving_token_falls_back_to_lowest_waiting_then_dash(day):
    assert current_serving_token(day) == NO_TOKEN

    alice = day.admit("p1", "Alice")
    day.admit("p2", "Bob")
    assert current_serving_token(day) == "1"

    day.cancel(alice.entry_id)
    day.cancel(day.entries[1].entry_id)
    assert current_serving_token(day) == NO_TOKEN


def test_visible_rows_hide_closed_entries_and_mark_caller(day):
    alice = day.admit("p1", "Alice")
    day.admit("p2", "Bob")
    carol = day.admit("p3", "Carol")
    day.finish(alice.entry_id)
    day.start_consultation(carol.entry_id)

    rows = visible_rows(day, "p2")

    assert [(r.patient_name, r.status, r.is_me) for r in rows] == [
        ("Carol", "consulting", False),
        ("Bob", "waiting", True),
    ]


def test_patient_without_active_entry_is_not_in_queue(day):
    alice = day.admit("p1", "Alice")
    day.finish(alice.entry_id)

    with pytest.raises(NotInQueueError):
        build_patient_view(day, "p1", service_minutes=15)
    with pytest.raises(NotInQueueError):
        build_patient_view(day, "nobody", service_minutes=15)
