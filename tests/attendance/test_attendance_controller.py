from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace

import pytest
from flask import Flask

from src.office_attendance.office_attendance.attendance.controller import register
from src.office_attendance.office_attendance.attendance.service import AttendanceService
from src.office_attendance.office_attendance.reports.service import AttendanceReportService
from src.office_attendance.office_attendance.shifts.profiles import get_policy


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> Clock:
    return Clock(datetime(2024, 3, 11, 7, 3))


@pytest.fixture
def client(attendance_repo, employees_repo, clock):
    policy = get_policy("day")
    container = SimpleNamespace(
        default_policy=policy,
        attendance_service=AttendanceService(attendance_repo, employees_repo, default_policy=policy, clock=clock),
        report_service=AttendanceReportService(attendance_repo, employees_repo),
    )
    app = Flask(__name__)
    app.secret_key = "test-secret"
    register(app, container)
    return app.test_client()


def login(client, employee_id: int, role: str = "employee", user_id: int = 100):
    with client.session_transaction() as sess:
        sess["employee_id"] = employee_id
        sess["role"] = role
        sess["user_id"] = user_id


def test_requires_session(client):
    res = client.post("/api/attendance/check-in")

    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_check_in_and_duplicate(client):
    login(client, 1)

    first = client.post("/api/attendance/check-in", json={"location": {"latitude": 10.5, "longitude": 106.1}})
    second = client.post("/api/attendance/check-in")

    assert first.status_code == 200
    body = first.get_json()
    assert body["data"]["attendance"]["status"] == "present"
    assert body["data"]["attendance"]["check_in"]["location"] == {"latitude": 10.5, "longitude": 106.1}
    assert second.status_code == 400
    assert second.get_json()["code"] == "already_checked_in"


def test_check_in_outside_window(client, clock):
    login(client, 1)
    clock.now = datetime(2024, 3, 11, 16, 1)

    res = client.post("/api/attendance/check-in")

    assert res.status_code == 400
    assert res.get_json()["code"] == "outside_window"


def test_break_flow_and_today_view(client, clock):
    login(client, 1)
    client.post("/api/attendance/check-in")

    clock.now = datetime(2024, 3, 11, 10, 0)
    started = client.post("/api/attendance/break/start", json={"reason": "lunch"})
    assert started.get_json()["data"]["active_break"]["reason"] == "lunch"

    clock.now = datetime(2024, 3, 11, 10, 30)
    today = client.get("/api/attendance/today").get_json()["data"]
    assert today["is_on_break"] is True
    assert today["current_working_hours"] == pytest.approx(2.95)

    ended = client.post("/api/attendance/break/end")
    assert ended.get_json()["data"]["attendance"]["breaks"][0]["duration"] == 30


def test_invalid_break_reason_is_400(client):
    login(client, 1)
    client.post("/api/attendance/check-in")

    res = client.post("/api/attendance/break/start", json={"reason": "nap"})

    assert res.status_code == 400
    assert res.get_json()["code"] == "invalid_break_reason"


def test_check_out_without_check_in(client):
    login(client, 1)

    res = client.post("/api/attendance/check-out")

    assert res.get_json()["code"] == "not_checked_in"


def test_employee_list_is_scoped_to_self(client, clock):
    login(client, 1)
    client.post("/api/attendance/check-in")
    login(client, 2)
    clock.now = datetime(2024, 3, 11, 19, 0)
    client.post("/api/attendance/check-in")

    login(client, 1)
    data = client.get("/api/attendance?employee=2").get_json()["data"]

    assert [r["employee"] for r in data["attendance"]] == [1]
    assert data["pagination"]["total"] == 1


def test_stats_require_hr(client):
    login(client, 1)
    assert client.get("/api/attendance/stats").status_code == 403

    login(client, 9, role="hr")
    res = client.get("/api/attendance/stats")
    assert res.status_code == 200


def test_hr_update_record(client):
    login(client, 1)
    rec_id = client.post("/api/attendance/check-in").get_json()["data"]["attendance"]["id"]

    login(client, 9, role="hr", user_id=55)
    res = client.put(
        f"/api/attendance/{rec_id}",
        json={"check_out_time": "2024-03-11T16:00:00", "status": "clocked-out", "notes": "fixed"},
    )

    data = res.get_json()["data"]["attendance"]
    assert res.status_code == 200
    assert data["status"] == "clocked-out"
    assert data["approved_by"] == 55
    assert data["working_hours"] == pytest.approx(8 + 57 / 60)


def test_hr_update_unknown_record_is_404(client):
    login(client, 9, role="hr")

    assert client.put("/api/attendance/999", json={}).status_code == 404


def test_check_in_records_socket_address_not_forwarded_header(client):
    login(client, 1)

    res = client.post(
        "/api/attendance/check-in",
        headers={"X-Forwarded-For": "1.2.3.4"},
        environ_base={"REMOTE_ADDR": "10.9.9.9"},
    )

    assert res.get_json()["data"]["attendance"]["check_in"]["ip_address"] == "10.9.9.9"


def test_list_limit_is_capped(client):
    login(client, 9, role="hr")

    data = client.get("/api/attendance?limit=1000000").get_json()["data"]

    assert data["pagination"]["limit"] == 200


def test_today_presence_serializes_dates(client):
    login(client, 1)
    client.post("/api/attendance/check-in")

    login(client, 9, role="hr")
    res = client.get("/api/attendance/today-presence")

    assert res.status_code == 200
    assert "total_active" in res.get_json()["data"]
