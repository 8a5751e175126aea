from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.hr_system.hr_system.accounts.model import Principal
from src.hr_system.hr_system.core.enums import ActivityAction, EntityType, Role
from src.hr_system.hr_system.core.exceptions import (
    AuthorizationError,
    ConflictError,
    EmployeeNotFound,
    ReferentialIntegrityViolation,
    ValidationError,
)

from tests.fakes import new_employee_payload

ADMIN = {"current_role": Role.ADMIN, "actor_id": 1}


def test_create_links_account_and_bumps_department(container, repos, department, employee):
    account = repos.accounts.get_by_id(employee.account_id)

    assert account.email == "an.nguyen@example.com"
    assert account.role == Role.EMPLOYEE
    assert account.password_hash != "secret123"
    assert repos.departments.get_by_id(department.dept_id).employee_count == 1
    assert repos.activity.rows[-1].action == ActivityAction.CREATE
    assert repos.activity.rows[-1].entity_type == EntityType.EMPLOYEE


def test_create_requires_admin(container, department):
    with pytest.raises(AuthorizationError):
        container.employee_service.create_employee(
            new_employee_payload(department.dept_id), current_role=Role.EMPLOYEE, actor_id=1
        )


@pytest.mark.parametrize(
    "override",
    [
        {"email": "not-an-email"},
        {"password": "123"},
        {"full_name": "  "},
        {"base_salary": "-1"},
        {"date_of_birth": "2021-05-03"},
        {"gender": "unknown"},
        {"role": "root"},
    ],
)
def test_create_validates_input(container, repos, department, override):
    with pytest.raises(ValidationError):
        container.employee_service.create_employee(new_employee_payload(department.dept_id, **override), **ADMIN)

    assert repos.employees.rows == {}
    assert repos.accounts.rows == {}


def test_create_with_unknown_department(container):
    with pytest.raises(ReferentialIntegrityViolation):
        container.employee_service.create_employee(new_employee_payload(999), **ADMIN)


def test_create_with_duplicate_email(container, department, employee):
    with pytest.raises(ValidationError):
        container.employee_service.create_employee(
            new_employee_payload(department.dept_id, email="An.Nguyen@example.com"), **ADMIN
        )


def test_create_rolls_back_when_a_step_fails(container, repos, department, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("department counter unavailable")

    monkeypatch.setattr(repos.departments, "adjust_employee_count", boom)

    with pytest.raises(RuntimeError):
        container.employee_service.create_employee(new_employee_payload(department.dept_id), **ADMIN)

    assert repos.accounts.rows == {}
    assert repos.employees.rows == {}
    assert repos.tx.rollbacks == 1


def test_update_moves_department_counters(container, repos, department, employee):
    other = repos.departments.create(name="Sales", description=None, manager_id=None)

    updated = container.employee_service.update_employee(
        employee.employee_id, {"dept_id": other, "base_salary": "20000000"}, **ADMIN
    )

    assert updated.dept_id == other
    assert updated.base_salary == Decimal("20000000")
    assert repos.departments.get_by_id(department.dept_id).employee_count == 0
    assert repos.departments.get_by_id(other).employee_count == 1


def test_update_rejects_unknown_field_and_bad_dates(container, employee):
    with pytest.raises(ValidationError):
        container.employee_service.update_employee(employee.employee_id, {"account_id": 5}, **ADMIN)
    with pytest.raises(ValidationError):
        container.employee_service.update_employee(employee.employee_id, {"start_date": "1990-01-01"}, **ADMIN)


def test_get_employee_owner_or_admin(container, employee, employee_principal):
    assert container.employee_service.get_employee(employee.employee_id, principal=employee_principal) == employee

    stranger = Principal(account_id=77, role=Role.EMPLOYEE, employee_id=employee.employee_id + 1)
    with pytest.raises(AuthorizationError):
        container.employee_service.get_employee(employee.employee_id, principal=stranger)


def test_list_employees_filters(container, repos, department, employee):
    container.employee_service.create_employee(new_employee_payload(department.dept_id), **ADMIN)

    found = container.employee_service.list_employees(current_role=Role.ADMIN, search="binh")

    assert [e.full_name for e in found] == ["Tran Thi Binh"]
    assert len(container.employee_service.list_employees(current_role=Role.ADMIN, dept_id=department.dept_id)) == 2


def test_deactivate_disables_login(container, repos, employee):
    emp = container.employee_service.deactivate_employee(employee.employee_id, **ADMIN)

    assert emp.is_active is False
    assert repos.accounts.get_by_id(employee.account_id).is_active is False


def test_delete_sole_member_resets_count_and_account(container, repos, department, employee):
    deleted = container.employee_service.delete_employee(employee.employee_id, **ADMIN)

    assert deleted.employee_id == employee.employee_id
    assert repos.employees.get_by_id(employee.employee_id) is None
    assert repos.accounts.get_by_id(employee.account_id) is None
    assert repos.departments.get_by_id(department.dept_id).employee_count == 0
    assert repos.activity.rows[-1].action == ActivityAction.DELETE


def test_delete_rolls_back_when_account_removal_fails(container, repos, department, employee):
    repos.accounts.fail_delete = True

    with pytest.raises(ConflictError):
        container.employee_service.delete_employee(employee.employee_id, **ADMIN)

    assert repos.employees.get_by_id(employee.employee_id) == employee
    assert repos.departments.get_by_id(department.dept_id).employee_count == 1
    assert repos.tx.rollbacks == 1


def test_delete_with_attendance_history_is_refused(container, repos, employee):
    repos.attendance.add(employee.employee_id, date(2026, 3, 2))

    with pytest.raises(ReferentialIntegrityViolation):
        container.employee_service.delete_employee(employee.employee_id, **ADMIN)
    assert repos.employees.get_by_id(employee.employee_id) is not None


def test_delete_unknown_employee(container):
    with pytest.raises(EmployeeNotFound):
        container.employee_service.delete_employee(404, **ADMIN)


def test_salary_statistics_by_department(container, department, employee):
    container.employee_service.create_employee(new_employee_payload(department.dept_id), **ADMIN)

    rows = container.employee_service.salary_statistics("department", current_role=Role.ADMIN)

    assert rows == [
        {
            "key": department.dept_id,
            "count": 2,
            "total_salary": "30800000.00",
            "average_salary": "15400000.00",
            "dept_name": "Engineering",
        }
    ]
    with pytest.raises(ValidationError):
        container.employee_service.salary_statistics("age", current_role=Role.ADMIN)
