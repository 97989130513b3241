import pytest

from conftest import ADMIN_ID, ALICE_ID, BOB_ID


def _login(client, user_id, role="employee"):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


@pytest.fixture
def employee_client(client):
    _login(client, ALICE_ID)
    return client


@pytest.fixture
def admin_client(client):
    _login(client, ADMIN_ID, role="admin")
    return client


def test_requires_login(client):
    resp = client.post("/api/attendance/punch-in")
    assert resp.status_code == 401
    assert resp.get_json() == {"message": "Authentication required"}


def test_punch_flow_over_http(employee_client, clock):
    resp = employee_client.post("/api/attendance/punch-in")
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["message"] == "Punched in successfully"
    assert body["attendance"]["punchIn"] == "2024-03-15T09:00:00.000"

    clock.set(2024, 3, 15, 12, 0)
    assert employee_client.post("/api/attendance/break-start").get_json()["attendance"]["isOnBreak"] is True
    clock.set(2024, 3, 15, 12, 30)
    assert employee_client.post("/api/attendance/break-end").status_code == 200
    clock.set(2024, 3, 15, 18, 0)
    body = employee_client.post("/api/attendance/punch-out").get_json()

    assert body["attendance"]["totalWorkMinutes"] == 510
    assert body["attendance"]["status"] == "present"


def test_guard_error_becomes_400(employee_client):
    employee_client.post("/api/attendance/punch-in")
    resp = employee_client.post("/api/attendance/punch-in")

    assert resp.status_code == 400
    assert resp.get_json() == {"message": "Already punched in today"}


def test_today_history_and_summary(employee_client):
    assert employee_client.get("/api/attendance/today").get_json() == {"attendance": None}
    employee_client.post("/api/attendance/punch-in")

    assert employee_client.get("/api/attendance/today").get_json()["attendance"]["date"] == "2024-03-15"
    records = employee_client.get("/api/attendance/history?year=2024&month=3").get_json()["records"]
    assert [r["date"] for r in records] == ["2024-03-15"]
    assert employee_client.get("/api/attendance/history?year=2024&month=2").get_json()["records"] == []

    summary = employee_client.get("/api/attendance/summary").get_json()["summary"]
    assert summary["presentDays"] == 1
    assert summary["totalDays"] == 1


def test_bad_month_is_400(employee_client):
    resp = employee_client.get("/api/attendance/history?year=2024&month=13")
    assert resp.status_code == 400


def test_unexpected_error_is_opaque(employee_client, container, monkeypatch):
    def boom(employee_id):
        raise RuntimeError("db down")

    monkeypatch.setattr(container.attendance_service, "punch_in", boom)
    resp = employee_client.post("/api/attendance/punch-in")

    assert resp.status_code == 500
    assert resp.get_json() == {"message": "Internal server error"}


def test_admin_routes_reject_employees(employee_client):
    resp = employee_client.get("/api/admin/dashboard")
    assert resp.status_code == 403


def test_dashboard_and_employees(admin_client):
    assert admin_client.get("/api/admin/dashboard").get_json()["totalEmployees"] == 2
    names = [e["name"] for e in admin_client.get("/api/admin/employees").get_json()["employees"]]
    assert names == ["Alice Nguyen", "Bob Tran"]
    status = admin_client.get("/api/admin/employees/status").get_json()["employees"]
    assert status[0]["todayAttendance"] is None


def test_deactivate_over_http(admin_client):
    assert admin_client.delete(f"/api/admin/employees/{BOB_ID}").status_code == 200
    assert admin_client.delete("/api/admin/employees/999").status_code == 404
    assert admin_client.delete(f"/api/admin/employees/{ADMIN_ID}").status_code == 400


def test_correct_attendance(admin_client, attendance_repo):
    resp = admin_client.post(
        "/api/admin/attendance/correct",
        json={"userId": ALICE_ID, "date": "2024-03-14", "status": "half-day", "totalWorkMinutes": 200, "ignored": 1},
    )

    assert resp.status_code == 200
    assert resp.get_json()["attendance"]["status"] == "half-day"
    assert attendance_repo.get_for_employee_and_date(ALICE_ID, "2024-03-14").total_work_minutes == 200


def test_correct_attendance_validation(admin_client):
    assert admin_client.post("/api/admin/attendance/correct", json={"date": "2024-03-14"}).status_code == 400
    resp = admin_client.post("/api/admin/attendance/correct", json={"userId": ALICE_ID, "date": "14-03-2024"})
    assert resp.status_code == 400
    assert resp.get_json() == {"message": "Date must be in YYYY-MM-DD format"}


def test_export_csv(admin_client, audit_repo):
    resp = admin_client.get(
        f"/api/admin/export/{ALICE_ID}?startDate=2024-03-11&endDate=2024-03-12",
        headers={"X-Forwarded-For": "203.0.113.9"},
    )

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert resp.headers["Content-Disposition"] == 'attachment; filename="Alice_Nguyen_20240311_to_20240312.csv"'
    assert resp.get_data(as_text=True).startswith("Date,Day,Punch In")
    assert audit_repo.entries[0].ip_address == "203.0.113.9"


def test_export_errors(admin_client):
    assert admin_client.get("/api/admin/export/999?startDate=2024-03-11&endDate=2024-03-12").status_code == 404
    assert admin_client.get(f"/api/admin/export/{ALICE_ID}?startDate=2024-03-11").status_code == 400
