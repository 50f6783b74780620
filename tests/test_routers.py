# /tests/test_routers.py

import pytest
from fastapi.testclient import TestClient

from course_tracker.db.database import get_db
from course_tracker.main import app
from course_tracker.services.notification_service import get_notification_trigger


@pytest.fixture
def client(session, trigger):
    """
    A TestClient bound to the per-test database. It is not used as a context
    manager, so the lifespan (logging setup, init_db on the real engine) does
    not run.
    """
    def _get_test_db():
        yield session

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_notification_trigger] = lambda: trigger
    yield TestClient(app)
    app.dependency_overrides.clear()


def _headers(identity):
    return {"X-User-Id": str(identity.caller.id), "X-User-Role": identity.caller.role.value}


COHORT = {"name": "DS2025", "start_date": "2025-01-10", "end_date": "2025-12-10", "max_students": 40}


def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["version"] == "1.0.0"


def test_requests_without_identity_are_denied(client):
    response = client.get("/api/cohorts")
    assert response.status_code == 403
    assert response.json() == {"detail": "Authentication required."}


def test_malformed_identity_is_denied(client):
    response = client.get("/api/cohorts", headers={"X-User-Id": "abc", "X-User-Role": "manager"})
    assert response.status_code == 403


def test_manager_creates_cohort_and_duplicate_conflicts(client, manager):
    created = client.post("/api/cohorts", json=COHORT, headers=_headers(manager))
    assert created.status_code == 201
    assert created.json()["name"] == "DS2025"

    duplicate = client.post("/api/cohorts", json=COHORT, headers=_headers(manager))
    assert duplicate.status_code == 409
    assert duplicate.json()["errors"][0]["field"] == "name"


def test_invalid_body_reports_fields(client, manager):
    response = client.post("/api/cohorts", json={**COHORT, "name": None, "max_students": 0}, headers=_headers(manager))
    assert response.status_code == 422
    assert {e["field"] for e in response.json()["errors"]} == {"name", "max_students"}


def test_date_order_is_a_validation_error(client, manager):
    response = client.post("/api/cohorts", json={**COHORT, "end_date": "2024-12-10"}, headers=_headers(manager))
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "end_date"


def test_offering_visibility(client, scenario, other_facilitator):
    url = f"/api/courses/offerings/{scenario.offering_id}"
    assert client.get(url, headers=_headers(scenario.facilitator)).status_code == 200
    assert client.get(url, headers=_headers(other_facilitator)).status_code == 403


def test_missing_offering_is_404(client, manager):
    assert client.get("/api/courses/offerings/999", headers=_headers(manager)).status_code == 404


def test_dangling_reference_is_400(client, manager, offering_payload):
    response = client.post("/api/courses/offerings", json=offering_payload(mode_id=999), headers=_headers(manager))
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "mode_id"


def test_activity_submit_creates_then_merges(client, scenario, queue):
    body = {"allocation_id": scenario.offering_id, "week_number": 2, "attendance": [True, False]}

    first = client.post("/api/activities", json=body, headers=_headers(scenario.facilitator))
    assert first.status_code == 201
    assert first.json()["created"] is True

    second = client.post("/api/activities", json={**body, "notes": "Lab ran late"}, headers=_headers(scenario.facilitator))
    assert second.status_code == 200
    assert second.json()["activity"]["id"] == first.json()["activity"]["id"]
    assert second.json()["activity"]["notes"] == "Lab ran late"
    assert queue.push.call_count == 2


def test_full_record_creation(client, manager, scenario):
    body = {
        "userData": {"email": "grad@example.com", "password": "secret123", "first_name": "Grad", "last_name": "Student", "role": "facilitator"},
        "roleData": {"employee_id": "EMP900"},
        "courseOfferingData": {
            "module_id": scenario.module_id, "class_id": scenario.class_id, "cohort_id": scenario.cohort_id,
            "mode_id": scenario.mode_id, "trimester": "3", "intake_period": "HT2",
            "start_date": "2024-09-01", "end_date": "2024-12-01",
        },
        "activityTrackerData": {"week_number": 1},
    }
    response = client.post("/api/full-creation/full-activity", json=body, headers=_headers(manager))

    assert response.status_code == 201
    record = response.json()
    assert record["offering"]["facilitator_id"] == record["profile"]["id"]
    assert "password" not in record["user"]


def test_csv_export_download(client, manager, scenario):
    response = client.get(f"/api/courses/offerings/{scenario.offering_id}/export", headers=_headers(manager))
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.text.startswith("Week,Attendance")


def test_notification_inbox(client, manager):
    response = client.get("/api/notifications", headers=_headers(manager))
    assert response.status_code == 200
    assert response.json()["total"] == 0
    assert client.put("/api/notifications/999/read", headers=_headers(manager)).status_code == 404
