from __future__ import annotations

import pytest

from tests.fakes import new_employee_payload

PASSWORD = "secret123"


def login(client, email, password=PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


@pytest.fixture
def as_admin(client, admin):
    assert login(client, "admin@example.com").status_code == 200
    return client


@pytest.fixture
def as_employee(client, employee):
    assert login(client, "an.nguyen@example.com").status_code == 200
    return client


def test_login_returns_principal(client, admin):
    resp = login(client, "ADMIN@example.com")

    assert resp.status_code == 200
    assert resp.get_json() == {"account_id": admin.account_id, "role": "admin", "employee_id": None}


def test_login_with_bad_password_uses_error_envelope(client, admin):
    resp = login(client, "admin@example.com", "wrong-password")

    assert resp.status_code == 401
    assert resp.get_json()["error"]["code"] == "authentication_failed"


def test_routes_require_login(client):
    resp = client.get("/api/employees")

    assert resp.status_code == 401
    assert set(resp.get_json()["error"]) == {"code", "message"}


def test_employee_cannot_use_admin_routes(as_employee):
    resp = as_employee.get("/api/employees")

    assert resp.status_code == 403
    assert resp.get_json()["error"]["code"] == "forbidden"


def test_admin_creates_and_lists_employees(as_admin, department):
    created = as_admin.post("/api/employees", json=new_employee_payload(department.dept_id))

    assert created.status_code == 201
    body = created.get_json()
    assert body["full_name"] == "Tran Thi Binh"
    assert body["base_salary"] == "13200000"

    listed = as_admin.get(f"/api/employees?dept_id={department.dept_id}").get_json()
    assert [e["employee_id"] for e in listed] == [body["employee_id"]]


def test_validation_error_status(as_admin, department):
    resp = as_admin.post("/api/employees", json=new_employee_payload(department.dept_id, email="nope"))

    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "validation_error"


def test_check_in_and_out(as_employee):
    checked_in = as_employee.post("/api/attendance/check-in")
    assert checked_in.status_code == 201
    assert checked_in.get_json()["late_minutes"] == 0

    again = as_employee.post("/api/attendance/check-in")
    assert again.status_code == 409
    assert again.get_json()["error"]["code"] == "already_checked_in"

    today = as_employee.get("/api/attendance/today").get_json()
    assert today["record"]["check_out_time"] is None


def test_check_out_without_check_in(as_employee):
    resp = as_employee.post("/api/attendance/check-out")

    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "no_check_in_found"


def test_overtime_request_for_past_date(as_employee):
    resp = as_employee.post("/api/overtime/requests", json={"work_date": "2026-03-01", "hours": 2})

    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "past_date_not_allowed"


def test_overtime_approval_flow(client, admin, employee):
    login(client, "an.nguyen@example.com")
    created = client.post("/api/overtime/requests", json={"work_date": "2026-03-12", "hours": "2", "reason": "go-live"})
    assert created.status_code == 201
    request_id = created.get_json()["request_id"]

    client.post("/api/auth/logout")
    login(client, "admin@example.com")
    assert [r["request_id"] for r in client.get("/api/overtime/requests/pending").get_json()] == [request_id]

    approved = client.put(f"/api/overtime/requests/{request_id}/approve")
    assert approved.get_json()["status"] == "approved"
    assert approved.get_json()["approver_id"] == admin.account_id

    again = client.put(f"/api/overtime/requests/{request_id}/approve")
    assert again.status_code == 409
    assert again.get_json()["error"]["code"] == "already_approved"


def test_payroll_month_report(as_admin, employee):
    resp = as_admin.get("/api/payroll?type=month&year=2026&month=3")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["period"] == {"start": "2026-03-01", "end": "2026-03-31"}
    assert body["summary"] == {"employee_count": 1, "total_pay": "0.00", "average_pay": "0.00"}


def test_payroll_rejects_reversed_period(as_admin):
    resp = as_admin.get("/api/payroll?type=period&start=2026-03-31&end=2026-03-01")

    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "invalid_period"


def test_payroll_csv_download(as_admin, employee):
    resp = as_admin.get("/api/payroll.csv?type=period&start=2026-03-01&end=2026-03-31")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "payroll_20260301_20260331.csv" in resp.headers["Content-Disposition"]
    assert resp.data.startswith(b"\xef\xbb\xbf")


def test_unknown_route_is_json(client):
    resp = client.get("/api/does-not-exist")

    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "not_found"


def test_leave_flow_and_leave_days(client, admin, employee):
    login(client, "an.nguyen@example.com")
    created = client.post(
        "/api/leaves",
        json={"start_date": "2026-03-16", "end_date": "2026-03-17", "leave_type": "sick", "reason": "flu"},
    )
    assert created.status_code == 201
    request_id = created.get_json()["request_id"]

    client.post("/api/auth/logout")
    login(client, "admin@example.com")
    assert client.put(f"/api/leaves/{request_id}/approve").get_json()["status"] == "approved"
    assert client.put(f"/api/leaves/{request_id}/reject").status_code == 409

    client.post("/api/auth/logout")
    login(client, "an.nguyen@example.com")
    days = client.get("/api/leaves/me/days?start=2026-03-01&end=2026-03-31").get_json()
    assert days == ["2026-03-16", "2026-03-17"]


def test_department_transfer_and_reconcile(as_admin, department, employee):
    sales = as_admin.post("/api/departments", json={"name": "Sales"})
    assert sales.status_code == 201
    sales_id = sales.get_json()["dept_id"]

    moved = as_admin.post(f"/api/departments/{sales_id}/transfer", json={"employee_ids": [employee.employee_id]})
    assert moved.get_json() == {"moved": 1}
    assert as_admin.get(f"/api/departments/{sales_id}").get_json()["employee_count"] == 1

    blocked = as_admin.delete(f"/api/departments/{sales_id}")
    assert blocked.status_code == 409
    assert blocked.get_json()["error"]["code"] == "referential_integrity_violation"

    assert as_admin.post("/api/departments/reconcile").get_json() == {"corrected": {}}


def test_activity_log_lists_admin_actions(as_admin, department):
    as_admin.post("/api/employees", json=new_employee_payload(department.dept_id))

    logs = as_admin.get("/api/activity-logs?entity_type=employee").get_json()

    assert [entry["action"] for entry in logs] == ["create"]
    assert logs[0]["details"]["email"] == "binh.tran@example.com"


def test_activity_summary_counts_admin_actions(as_admin, admin, department):
    as_admin.post("/api/employees", json=new_employee_payload(department.dept_id))
    as_admin.put(f"/api/departments/{department.dept_id}", json={"description": "Platform team"})

    body = as_admin.get("/api/activity-logs/summary").get_json()

    assert body["total_actors"] == 1
    assert body["total_actions"] == 2
    actor = body["actors"][0]
    assert actor["actor_id"] == admin.account_id
    assert actor["email"] == "admin@example.com"
    assert actor["actions"] == ["create", "update"]
    assert actor["entity_types"] == ["department", "employee"]


def test_activity_summary_rejects_bad_date(as_admin):
    resp = as_admin.get("/api/activity-logs/summary?start=2026-13-01")

    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "validation_error"


def test_attendance_range_defaults_to_current_month_of_clock(as_employee):
    as_employee.post("/api/attendance/check-in")

    records = as_employee.get("/api/attendance/range").get_json()

    assert [r["work_date"] for r in records] == ["2026-03-10"]
