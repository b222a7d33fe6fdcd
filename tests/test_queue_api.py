"""
Queue HTTP surface tests (in-memory store).
"""

import pytest
from fastapi.testclient import TestClient

from careplus.api.deps import get_clinic_repository, get_queue_repository
from careplus.app import app
from careplus.domain.entities.clinic import Clinic
from careplus.domain.errors import StoreUnavailableError


def patient(user_id):
    return {"X-User-ID": user_id, "X-User-Role": "patient"}


def doctor(user_id="D1"):
    return {"X-User-ID": user_id, "X-User-Role": "doctor"}


@pytest.fixture
def client():
    """Create a test client with a fresh in-memory store and one clinic."""
    get_queue_repository.cache_clear()
    get_clinic_repository.cache_clear()
    get_clinic_repository().add(
        Clinic(clinic_id="C1", doctor_id="D1", clinic_name="Sunrise Clinic", consultation_fee=500.0)
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    get_queue_repository.cache_clear()
    get_clinic_repository.cache_clear()


def join(client, user_id, name, clinic_id="C1"):
    return client.post(
        "/queue/join",
        json={"clinic_id": clinic_id, "patient_name": name},
        headers=patient(user_id),
    )


def act(client, entry_id, action, user_id="D1"):
    return client.put(
        "/queue/update",
        json={"clinic_id": "C1", "entry_id": entry_id, "action": action},
        headers=doctor(user_id),
    )


def test_join_returns_position_and_envelope(client):
    response = join(client, "p1", "Alice")

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["position"] == 1
    assert len(body["data"]["entry_id"]) == 32
    assert body["request_id"] == response.headers["X-Request-ID"]
    assert "X-Process-Time" in response.headers


def test_join_errors(client):
    join(client, "p1", "Alice")

    duplicate = join(client, "p1", "Alice")
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "ALREADY_QUEUED"

    unknown = join(client, "p2", "Bob", clinic_id="C404")
    assert unknown.status_code == 404
    assert unknown.json()["error"] == "CLINIC_NOT_FOUND"

    blank = join(client, "p3", "   ")
    assert blank.status_code == 422
    assert blank.json()["error"] == "INVALID_INPUT"
    assert blank.json()["details"]["path"] == "/queue/join"


def test_identity_headers_are_required(client):
    missing = client.post("/queue/join", json={"clinic_id": "C1", "patient_name": "Alice"})
    assert missing.status_code == 401
    assert missing.json()["error"] == "MISSING_USER_ID"

    bad_role = client.post(
        "/queue/join",
        json={"clinic_id": "C1", "patient_name": "Alice"},
        headers={"X-User-ID": "p1", "X-User-Role": "admin"},
    )
    assert bad_role.status_code == 403
    assert bad_role.json()["error"] == "INVALID_ROLE"

    wrong_role = client.post(
        "/queue/join",
        json={"clinic_id": "C1", "patient_name": "Alice"},
        headers=doctor(),
    )
    assert wrong_role.status_code == 403
    assert wrong_role.json()["error"] == "FORBIDDEN"


def test_patient_cannot_use_doctor_endpoints(client):
    alice = join(client, "p1", "Alice").json()["data"]

    queue_view = client.get("/queue", params={"clinic_id": "C1"}, headers=patient("p1"))
    assert queue_view.status_code == 403
    assert queue_view.json()["error"] == "FORBIDDEN"
    assert queue_view.json()["request_id"] == queue_view.headers["X-Request-ID"]

    update = client.put(
        "/queue/update",
        json={"clinic_id": "C1", "entry_id": alice["entry_id"], "action": "finish"},
        headers=patient("p1"),
    )
    assert update.status_code == 403
    assert update.json()["error"] == "FORBIDDEN"


def test_consultation_flow_and_patient_view(client):
    alice = join(client, "p1", "Alice").json()["data"]
    join(client, "p2", "Bob")

    started = act(client, alice["entry_id"], "start-consultation")
    assert started.status_code == 200
    assert started.json()["data"] == {
        "entry_id": alice["entry_id"],
        "status": "in-consultation",
        "position": 1,
        "message": "Consultation started",
    }

    waiting_view = client.get("/patients/queue/active", params={"clinic_id": "C1"}, headers=patient("p2"))
    assert waiting_view.status_code == 200
    data = waiting_view.json()["data"]
    assert data["clinic_name"] == "Sunrise Clinic"
    assert (data["people_ahead"], data["estimated_wait_minutes"], data["estimated_time"]) == (1, 15, "15 mins")
    assert [(r["token"], r["name"], r["time"]) for r in data["queue_list"]] == [
        ("1", "Alice", "Now"),
        ("2", "You", "Wait..."),
    ]

    finished = act(client, alice["entry_id"], "finish")
    assert finished.json()["data"]["position"] == 0

    view = client.get("/patients/queue/active", params={"clinic_id": "C1"}, headers=patient("p2")).json()["data"]
    assert view["my_position"] == 1
    assert view["people_ahead"] == 0
    assert view["current_serving_token"] == "1"

    again = act(client, alice["entry_id"], "finish")
    assert again.status_code == 409
    assert again.json()["error"] == "INVALID_STATE"


def test_doctor_queue_view(client):
    alice = join(client, "p1", "Alice").json()["data"]
    act(client, alice["entry_id"], "cancel")

    response = client.get("/queue", params={"clinic_id": "C1"}, headers=doctor())
    assert response.status_code == 200
    entries = response.json()["data"]["entries"]
    assert [(e["patient_name"], e["status"]) for e in entries] == [("Alice", "cancelled")]

    not_owner = client.get("/queue", params={"clinic_id": "C1"}, headers=doctor("D2"))
    assert not_owner.status_code == 403
    assert not_owner.json()["error"] == "NOT_QUEUE_OWNER"


def test_update_errors(client):
    alice = join(client, "p1", "Alice").json()["data"]

    not_owner = act(client, alice["entry_id"], "finish", user_id="D2")
    assert not_owner.status_code == 403
    assert not_owner.json()["error"] == "NOT_QUEUE_OWNER"

    unknown = act(client, "f" * 32, "finish")
    assert unknown.status_code == 404
    assert unknown.json()["error"] == "ENTRY_NOT_FOUND"

    bad_action = act(client, alice["entry_id"], "teleport")
    assert bad_action.status_code == 422
    assert bad_action.json()["error"] == "INVALID_INPUT"


def test_leave_and_not_in_queue(client):
    join(client, "p1", "Alice")

    left = client.post("/queue/leave", json={"clinic_id": "C1"}, headers=patient("p1"))
    assert left.status_code == 200
    assert left.json()["data"]["status"] == "cancelled"

    again = client.post("/queue/leave", json={"clinic_id": "C1"}, headers=patient("p1"))
    assert again.status_code == 404
    assert again.json()["error"] == "NOT_IN_QUEUE"

    view = client.get("/patients/queue/active", headers=patient("p1"))
    assert view.status_code == 404
    assert view.json()["error"] == "NOT_IN_QUEUE"


def test_same_account_can_act_as_doctor_and_patient(client):
    own = join(client, "D1", "Dr. Self").json()["data"]

    response = act(client, own["entry_id"], "start-consultation", user_id="D1")

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "in-consultation"


def test_clinic_lookup_is_public(client):
    response = client.get("/clinics/C1")
    assert response.status_code == 200
    assert response.json()["data"]["consultation_fee"] == 500.0

    missing = client.get("/clinics/C404")
    assert missing.status_code == 404
    assert missing.json()["error"] == "CLINIC_NOT_FOUND"


class UnavailableQueueRepository:
    async def find_by_clinic_and_date(self, clinic_id, date):
        raise StoreUnavailableError("find_queue_day", "connection refused")

    async def find_latest_active_for_patient(self, patient_id):
        raise StoreUnavailableError("find_patient_queue_day", "connection refused")


def test_store_failure_maps_to_503(client):
    app.dependency_overrides[get_queue_repository] = UnavailableQueueRepository

    response = join(client, "p1", "Alice")

    assert response.status_code == 503
    assert response.json()["error"] == "STORE_UNAVAILABLE"
