from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace

import pytest
from werkzeug.security import generate_password_hash

from src.hr_system.hr_system.accounts.model import Principal
from src.hr_system.hr_system.container import wire
from src.hr_system.hr_system.core.enums import Role

from tests.fakes import (
    FakeTransactionManager,
    FixedClock,
    InMemoryAccounts,
    InMemoryActivity,
    InMemoryAttendance,
    InMemoryDepartments,
    InMemoryEmployees,
    InMemoryLeaves,
    InMemoryOvertime,
)

PASSWORD = "secret123"


@pytest.fixture
def fixed_now() -> datetime:
    # a Tuesday
    return datetime(2026, 3, 10, 8, 0, 0)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)


@pytest.fixture
def repos() -> SimpleNamespace:
    r = SimpleNamespace(
        accounts=InMemoryAccounts(),
        employees=InMemoryEmployees(),
        departments=InMemoryDepartments(),
        attendance=InMemoryAttendance(),
        overtime=InMemoryOvertime(),
        leaves=InMemoryLeaves(),
    )
    r.activity = InMemoryActivity(r.accounts)
    r.tx = FakeTransactionManager(r.accounts, r.employees, r.departments, r.activity)
    return r


@pytest.fixture
def container(repos, clock):
    return wire(
        tx=repos.tx,
        accounts_repo=repos.accounts,
        employees_repo=repos.employees,
        departments_repo=repos.departments,
        attendance_repo=repos.attendance,
        overtime_repo=repos.overtime,
        leaves_repo=repos.leaves,
        activity_repo=repos.activity,
        clock=clock,
    )


@pytest.fixture
def admin(repos) -> Principal:
    account_id = repos.accounts.create(
        email="admin@example.com",
        password_hash=generate_password_hash(PASSWORD),
        role=Role.ADMIN,
    )
    return Principal(account_id=account_id, role=Role.ADMIN)


@pytest.fixture
def department(repos):
    dept_id = repos.departments.create(name="Engineering", description=None, manager_id=None)
    return repos.departments.get_by_id(dept_id)


@pytest.fixture
def employee(container, admin, department):
    """An active employee created through the service, so counters and account exist."""
    return container.employee_service.create_employee(
        {
            "email": "an.nguyen@example.com",
            "password": PASSWORD,
            "full_name": "Nguyen Van An",
            "date_of_birth": "1995-04-02",
            "dept_id": department.dept_id,
            "position": "Developer",
            "base_salary": "17600000",
            "start_date": "2022-01-10",
        },
        current_role=Role.ADMIN,
        actor_id=admin.account_id,
    )


@pytest.fixture
def employee_principal(employee) -> Principal:
    return Principal(account_id=employee.account_id, role=Role.EMPLOYEE, employee_id=employee.employee_id)


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.hr_system.hr_system.main import create_app

    flask_app = create_app(container)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
