from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from werkzeug.security import generate_password_hash

from ..accounts.model import Principal
from ..accounts.repository import AccountRepository
from ..activity.service import ActivityService
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import parse_iso_date
from ..common.rates import round_money, safe_average
from ..common.transaction import TransactionManager
from ..common.validators import (
    optional_text,
    require_enum,
    require_min_length,
    require_non_empty,
    require_non_negative_decimal,
)
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import ActivityAction, EntityType, Gender, Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    EmployeeNotFound,
    ReferentialIntegrityViolation,
    ValidationError,
)
from ..departments.repository import DepartmentRepository
from ..departments.service import move_between_departments
from .model import Employee, NewEmployee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

STAT_GROUPS = ("department", "position", "gender")


def _as_date(value, field_name: str) -> date:
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError(f"{field_name} không hợp lệ")
    return parse_iso_date(str(value))


def _require_admin(current_role: Role) -> None:
    if current_role != Role.ADMIN:
        raise AuthorizationError("Bạn không có quyền")


class EmployeeService:
    """Use case: manage the employee directory (admin).

    Every mutation touching more than one record (account, employee, department
    counter) runs inside one transaction.
    """

    def __init__(
        self,
        accounts: AccountRepository,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        attendance: AttendanceRepository,
        activity: ActivityService,
        tx: TransactionManager,
    ):
        self._accounts = accounts
        self._employees = employees
        self._departments = departments
        self._attendance = attendance
        self._activity = activity
        self._tx = tx

    def _get(self, employee_id: int) -> Employee:
        emp = self._employees.get_by_id(int(employee_id))
        if not emp:
            raise EmployeeNotFound("Không tìm thấy nhân viên")
        return emp

    def _require_department(self, dept_id) -> int:
        try:
            dept_id = int(dept_id)
        except (TypeError, ValueError):
            raise ValidationError("Phòng ban không hợp lệ")
        dept = self._departments.get_by_id(dept_id)
        if not dept or not dept.is_active:
            raise ReferentialIntegrityViolation("Phòng ban không tồn tại")
        return dept_id

    def _validate_new(self, data: Mapping[str, Any]) -> NewEmployee:
        date_of_birth = _as_date(data.get("date_of_birth"), "Ngày sinh")
        start_date = _as_date(data.get("start_date"), "Ngày vào làm")
        if date_of_birth >= start_date:
            raise ValidationError("Ngày sinh phải trước ngày vào làm")

        gender = data.get("gender")
        return NewEmployee(
            full_name=require_non_empty(data.get("full_name"), "Họ tên"),
            date_of_birth=date_of_birth,
            dept_id=self._require_department(data.get("dept_id")),
            position=require_non_empty(data.get("position"), "Chức vụ"),
            base_salary=require_non_negative_decimal(data.get("base_salary"), "Lương cơ bản"),
            start_date=start_date,
            gender=require_enum(Gender, gender, "Giới tính") if gender else None,
            phone_number=optional_text(data.get("phone_number")),
            address=optional_text(data.get("address")),
        )

    def create_employee(
        self,
        data: Mapping[str, Any],
        *,
        current_role: Role,
        actor_id: int,
    ) -> Employee:
        """Create the paired account and employee, and bump the department counter.

        `data` holds `email`, `password`, an optional `role` and the employee fields.
        """
        _require_admin(current_role)

        email = require_non_empty(data.get("email"), "Email").lower()
        if "@" not in email:
            raise ValidationError("Email không hợp lệ")
        password = require_min_length(data.get("password"), "Mật khẩu", MIN_PASSWORD_LENGTH)
        role = require_enum(Role, data.get("role") or Role.EMPLOYEE, "Vai trò")
        new = self._validate_new(data)

        if self._accounts.get_by_email(email):
            raise ValidationError("Email đã tồn tại")

        with self._tx.transaction():
            account_id = self._accounts.create(email=email, password_hash=generate_password_hash(password), role=role)
            employee_id = self._employees.create(account_id=account_id, data=new)
            self._departments.adjust_employee_count(new.dept_id, +1)
            self._activity.record(
                actor_id=actor_id,
                action=ActivityAction.CREATE,
                entity_type=EntityType.EMPLOYEE,
                entity_id=employee_id,
                details={"full_name": new.full_name, "email": email, "dept_id": new.dept_id},
            )

        logger.info("employee created", extra={"employee_id": employee_id, "account_id": account_id})
        return self._get(employee_id)

    def update_employee(
        self,
        employee_id: int,
        changes: Mapping[str, Any],
        *,
        current_role: Role,
        actor_id: int,
    ) -> Employee:
        _require_admin(current_role)
        current = self._get(employee_id)

        clean: dict[str, Any] = {}
        for field, value in changes.items():
            if field == "full_name":
                clean[field] = require_non_empty(value, "Họ tên")
            elif field == "position":
                clean[field] = require_non_empty(value, "Chức vụ")
            elif field == "base_salary":
                clean[field] = require_non_negative_decimal(value, "Lương cơ bản")
            elif field in {"date_of_birth", "start_date"}:
                clean[field] = _as_date(value, field)
            elif field == "gender":
                clean[field] = require_enum(Gender, value, "Giới tính") if value else None
            elif field in {"phone_number", "address"}:
                clean[field] = optional_text(value)
            elif field == "dept_id":
                clean[field] = self._require_department(value)
            else:
                raise ValidationError(f"Không thể cập nhật trường {field}")

        dob = clean.get("date_of_birth", current.date_of_birth)
        start = clean.get("start_date", current.start_date)
        if dob >= start:
            raise ValidationError("Ngày sinh phải trước ngày vào làm")

        new_dept = clean.get("dept_id", current.dept_id)
        with self._tx.transaction():
            self._employees.update(current.employee_id, clean)
            if new_dept != current.dept_id:
                move_between_departments(self._departments, current.dept_id, new_dept)
            self._activity.record(
                actor_id=actor_id,
                action=ActivityAction.UPDATE,
                entity_type=EntityType.EMPLOYEE,
                entity_id=current.employee_id,
                details={k: str(v.value if hasattr(v, "value") else v) for k, v in clean.items()},
            )
        return self._get(current.employee_id)

    def get_employee(self, employee_id: int, *, principal: Principal) -> Employee:
        if not principal.is_admin and principal.employee_id != int(employee_id):
            raise AuthorizationError("Bạn chỉ được xem hồ sơ của chính mình")
        return self._get(employee_id)

    def list_employees(
        self,
        *,
        current_role: Role,
        dept_id: Optional[int] = None,
        search: Optional[str] = None,
        active_only: bool = False,
    ) -> Sequence[Employee]:
        _require_admin(current_role)
        return self._employees.list(dept_id=dept_id, search=optional_text(search), active_only=active_only)

    def deactivate_employee(self, employee_id: int, *, current_role: Role, actor_id: int) -> Employee:
        _require_admin(current_role)
        emp = self._get(employee_id)
        with self._tx.transaction():
            self._employees.update(emp.employee_id, {"is_active": False})
            self._accounts.set_active(emp.account_id, is_active=False)
            self._activity.record(
                actor_id=actor_id,
                action=ActivityAction.UPDATE,
                entity_type=EntityType.EMPLOYEE,
                entity_id=emp.employee_id,
                details={"is_active": False},
            )
        return self._get(emp.employee_id)

    def delete_employee(self, employee_id: int, *, current_role: Role, actor_id: Optional[int] = None) -> Employee:
        """Delete the employee, its account and its department count as one unit.

        Employees with attendance history are kept; deactivate them instead.
        """
        _require_admin(current_role)
        emp = self._get(employee_id)

        if self._attendance.count_for_employee(emp.employee_id) > 0:
            raise ReferentialIntegrityViolation("Nhân viên đã có dữ liệu chấm công, hãy ngừng hoạt động thay vì xóa")

        with self._tx.transaction():
            if not self._employees.delete_by_id(emp.employee_id):
                raise EmployeeNotFound("Không tìm thấy nhân viên")
            self._departments.adjust_employee_count(emp.dept_id, -1)
            if not self._accounts.delete_by_id(emp.account_id):
                raise ConflictError("Xóa tài khoản thất bại")
            if actor_id is not None:
                self._activity.record(
                    actor_id=actor_id,
                    action=ActivityAction.DELETE,
                    entity_type=EntityType.EMPLOYEE,
                    entity_id=emp.employee_id,
                    details=_audit_snapshot(emp),
                )

        logger.info("employee deleted", extra={"employee_id": emp.employee_id, "account_id": emp.account_id})
        return emp

    def salary_statistics(self, group_by: str, *, current_role: Role) -> list[dict]:
        """Headcount and salary totals grouped by department, position or gender."""
        _require_admin(current_role)
        if group_by not in STAT_GROUPS:
            raise ValidationError(f"groupBy không hợp lệ (chấp nhận: {', '.join(STAT_GROUPS)})")

        names = {d.dept_id: d.name for d in self._departments.list_all()}
        groups: dict[Any, list[Employee]] = {}
        for emp in self._employees.list():
            if group_by == "department":
                key = emp.dept_id
            elif group_by == "position":
                key = emp.position
            else:
                key = emp.gender.value if emp.gender else None
            groups.setdefault(key, []).append(emp)

        out = []
        for key, members in groups.items():
            total = sum((m.base_salary for m in members), Decimal(0))
            row = {
                "key": key,
                "count": len(members),
                "total_salary": str(round_money(total)),
                "average_salary": str(round_money(safe_average(total, len(members)))),
            }
            if group_by == "department":
                row["dept_name"] = names.get(key, "-")
            out.append(row)
        out.sort(key=lambda r: r["count"], reverse=True)
        return out


def _audit_snapshot(emp: Employee) -> dict:
    return {k: str(v.value if hasattr(v, "value") else v) for k, v in asdict(emp).items() if v is not None}
