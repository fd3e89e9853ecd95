import pytest
from mysql.connector.errors import DatabaseError

from src.homestay_staff.homestay_staff.main import create_app

SHIFT = {
    "staff_id": 2,
    "shift_date": "2025-03-10",
    "shift_type": "morning",
    "start_time": "08:00",
    "end_time": "12:00",
}


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, user_id, role):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


def test_anonymous_requests_are_rejected(client):
    resp = client.get("/api/staff/shifts/my-shifts")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_staff_cannot_create_shifts(client):
    login(client, 2, "staff")

    assert client.post("/api/staff/shifts", json=SHIFT).status_code == 403


def test_admin_creates_shift(client):
    login(client, 1, "admin")

    resp = client.post("/api/staff/shifts", json=SHIFT)

    body = resp.get_json()
    assert resp.status_code == 201
    assert body["success"] is True
    assert body["data"]["start_time"] == "08:00"
    assert body["data"]["status"] == "scheduled"


def test_conflicting_shift_returns_409_with_conflicts(client):
    login(client, 1, "manager")
    first = client.post("/api/staff/shifts", json=SHIFT).get_json()["data"]

    resp = client.post("/api/staff/shifts", json={**SHIFT, "start_time": "11:00", "end_time": "14:00"})

    body = resp.get_json()
    assert resp.status_code == 409
    assert body["code"] == "shift_conflict"
    assert [c["id"] for c in body["conflicts"]] == [first["id"]]


def test_validation_errors_are_listed(client):
    login(client, 1, "admin")

    resp = client.post("/api/staff/shifts", json={**SHIFT, "end_time": "07:00"})

    assert resp.status_code == 400
    assert resp.get_json()["errors"] == ["End time must be after start time"]


def test_staff_reads_only_own_shifts(client):
    login(client, 1, "admin")
    client.post("/api/staff/shifts", json=SHIFT)

    login(client, 3, "staff")
    assert client.get("/api/staff/shifts/staff/2").status_code == 403

    login(client, 2, "staff")
    resp = client.get("/api/staff/shifts/my-shifts")
    assert resp.status_code == 200
    assert len(resp.get_json()["data"]) == 1


def test_completing_twice_is_rejected(client):
    login(client, 1, "admin")
    shift_id = client.post("/api/staff/shifts", json=SHIFT).get_json()["data"]["id"]

    login(client, 3, "staff")
    assert client.patch(f"/api/staff/shifts/{shift_id}/complete").status_code == 403

    login(client, 2, "staff")
    assert client.patch(f"/api/staff/shifts/{shift_id}/complete").status_code == 200
    resp = client.patch(f"/api/staff/shifts/{shift_id}/complete")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Shift is already completed"


def test_deleting_completed_shift_is_rejected(client):
    login(client, 1, "admin")
    shift_id = client.post("/api/staff/shifts", json=SHIFT).get_json()["data"]["id"]
    client.patch(f"/api/staff/shifts/{shift_id}/complete")

    resp = client.delete(f"/api/staff/shifts/{shift_id}")

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Cannot delete completed shifts"


def test_unknown_shift_is_404(client):
    login(client, 1, "admin")

    assert client.get("/api/staff/shifts/999").status_code == 404


def test_check_in_then_duplicate(client):
    login(client, 2, "staff")

    first = client.post("/api/staff/attendance/check-in", json={})
    second = client.post("/api/staff/attendance/check-in", json={})

    assert first.status_code == 201
    assert first.get_json()["data"]["status"] == "on_time"
    assert second.status_code == 409
    assert second.get_json()["code"] == "already_checked_in"


def test_today_status_endpoint(client):
    login(client, 2, "staff")

    body = client.get("/api/staff/attendance/today").get_json()

    assert body["data"] == {
        "checked_in": False,
        "checked_out": False,
        "attendance_log": None,
        "message": "Not checked in yet today",
    }


def test_work_hours_endpoint_without_log(client):
    login(client, 2, "staff")

    data = client.get("/api/staff/attendance/work-hours/2/2025-03-10").get_json()["data"]

    assert data["work_hours"] == 0
    assert data["formatted"] == "0h 0m"


def test_report_requires_both_dates(client):
    login(client, 1, "admin")

    resp = client.get("/api/staff/attendance/report?date_from=2025-03-01")

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "date_from and date_to are required"


def test_report_endpoint(client):
    login(client, 2, "staff")
    client.post("/api/staff/attendance/check-in", json={})

    login(client, 1, "admin")
    resp = client.get("/api/staff/attendance/report?date_from=2025-03-01&date_to=2025-03-31")

    data = resp.get_json()["data"]
    assert resp.status_code == 200
    assert data["department"] == "all"
    assert data["summary"]["total_records"] == 1
    assert data["by_staff"][0]["staff_id"] == 2


def test_monthly_summary_rejects_bad_month(client):
    login(client, 2, "staff")

    resp = client.get("/api/staff/attendance/monthly/2?month=13&year=2025")

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid month. Must be between 1 and 12"


def test_storage_errors_become_500(client, attendance_repo, monkeypatch):
    def broken(**kwargs):
        raise DatabaseError("connection lost")

    monkeypatch.setattr(attendance_repo, "find_for_staff_and_date", broken)
    login(client, 2, "staff")

    resp = client.get("/api/staff/attendance/today")

    assert resp.status_code == 500
    assert resp.get_json()["message"] == "Internal server error"
