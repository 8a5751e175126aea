from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..activity.service import ActivityService
from ..common.transaction import TransactionManager
from ..common.validators import optional_text, require_non_empty
from ..core.enums import ActivityAction, EntityType, Role
from ..core.exceptions import (
    AuthorizationError,
    DepartmentNotFound,
    EmployeeNotFound,
    ReferentialIntegrityViolation,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from .model import Department
from .repository import DepartmentRepository

logger = logging.getLogger(__name__)


def move_between_departments(departments: DepartmentRepository, old_dept_id: int, new_dept_id: int) -> None:
    """Counter half of a transfer; the caller owns the transaction."""
    if int(old_dept_id) == int(new_dept_id):
        return
    departments.adjust_employee_count(int(old_dept_id), -1)
    departments.adjust_employee_count(int(new_dept_id), +1)


class DepartmentService:
    def __init__(
        self,
        departments: DepartmentRepository,
        employees: EmployeeRepository,
        activity: ActivityService,
        tx: TransactionManager,
    ):
        self._departments = departments
        self._employees = employees
        self._activity = activity
        self._tx = tx

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Bạn không có quyền")

    def _get(self, dept_id: int) -> Department:
        dept = self._departments.get_by_id(int(dept_id))
        if not dept:
            raise DepartmentNotFound("Không tìm thấy phòng ban")
        return dept

    def _check_manager(self, manager_id) -> Optional[int]:
        if manager_id in (None, ""):
            return None
        if not self._employees.get_by_id(int(manager_id)):
            raise ReferentialIntegrityViolation("Trưởng phòng không tồn tại")
        return int(manager_id)

    def get_department(self, dept_id: int) -> Department:
        return self._get(dept_id)

    def list_departments(self, *, active_only: bool = False) -> Sequence[Department]:
        return self._departments.list_all(active_only=active_only)

    def create_department(
        self,
        *,
        current_role: Role,
        actor_id: int,
        name: str,
        description: Optional[str] = None,
        manager_id: Optional[int] = None,
    ) -> Department:
        self._require_admin(current_role)
        name = require_non_empty(name, "Tên phòng ban")
        if self._departments.get_by_name(name):
            raise ValidationError("Tên phòng ban đã tồn tại")

        dept_id = self._departments.create(
            name=name,
            description=optional_text(description),
            manager_id=self._check_manager(manager_id),
        )
        self._activity.record(
            actor_id=actor_id,
            action=ActivityAction.CREATE,
            entity_type=EntityType.DEPARTMENT,
            entity_id=dept_id,
            details={"name": name},
        )
        return self._get(dept_id)

    def update_department(
        self,
        dept_id: int,
        changes: Mapping[str, Any],
        *,
        current_role: Role,
        actor_id: int,
    ) -> Department:
        self._require_admin(current_role)
        dept = self._get(dept_id)

        clean: dict[str, Any] = {}
        for field, value in changes.items():
            if field == "name":
                name = require_non_empty(value, "Tên phòng ban")
                other = self._departments.get_by_name(name)
                if other and other.dept_id != dept.dept_id:
                    raise ValidationError("Tên phòng ban đã tồn tại")
                clean[field] = name
            elif field == "description":
                clean[field] = optional_text(value)
            elif field == "manager_id":
                clean[field] = self._check_manager(value)
            elif field == "is_active":
                clean[field] = bool(value)
            else:
                raise ValidationError(f"Không thể cập nhật trường {field}")

        self._departments.update(dept.dept_id, clean)
        self._activity.record(
            actor_id=actor_id,
            action=ActivityAction.UPDATE,
            entity_type=EntityType.DEPARTMENT,
            entity_id=dept.dept_id,
            details={k: str(v) for k, v in clean.items()},
        )
        return self._get(dept.dept_id)

    def deactivate_department(self, dept_id: int, *, current_role: Role, actor_id: int) -> Department:
        return self.update_department(dept_id, {"is_active": False}, current_role=current_role, actor_id=actor_id)

    def delete_department(self, dept_id: int, *, current_role: Role, actor_id: int) -> None:
        self._require_admin(current_role)
        dept = self._get(dept_id)
        members = self._employees.list(dept_id=dept.dept_id)
        if members:
            raise ReferentialIntegrityViolation(f"Không thể xóa phòng ban còn {len(members)} nhân viên")

        if not self._departments.delete_by_id(dept.dept_id):
            raise DepartmentNotFound("Không tìm thấy phòng ban")
        self._activity.record(
            actor_id=actor_id,
            action=ActivityAction.DELETE,
            entity_type=EntityType.DEPARTMENT,
            entity_id=dept.dept_id,
            details={"name": dept.name},
        )

    def transfer_employees(
        self,
        employee_ids: Sequence[int],
        new_dept_id: int,
        *,
        current_role: Role,
        actor_id: int,
    ) -> int:
        """Move employees to `new_dept_id`; returns how many actually moved."""
        self._require_admin(current_role)
        target = self._get(new_dept_id)
        if not target.is_active:
            raise ValidationError("Phòng ban đích đã ngừng hoạt động")
        if not employee_ids:
            raise ValidationError("Danh sách nhân viên trống")

        moved = 0
        with self._tx.transaction():
            for employee_id in employee_ids:
                emp = self._employees.get_by_id(int(employee_id))
                if not emp:
                    raise EmployeeNotFound(f"Không tìm thấy nhân viên {employee_id}")
                if emp.dept_id == target.dept_id:
                    continue
                self._employees.update(emp.employee_id, {"dept_id": target.dept_id})
                move_between_departments(self._departments, emp.dept_id, target.dept_id)
                moved += 1
            self._activity.record(
                actor_id=actor_id,
                action=ActivityAction.UPDATE,
                entity_type=EntityType.DEPARTMENT,
                entity_id=target.dept_id,
                details={"transferred": [int(i) for i in employee_ids]},
            )

        logger.info("employees transferred", extra={"dept_id": target.dept_id, "moved": moved})
        return moved

    def transfer_employee(self, employee_id: int, new_dept_id: int, *, current_role: Role, actor_id: int) -> int:
        return self.transfer_employees([employee_id], new_dept_id, current_role=current_role, actor_id=actor_id)

    def reconcile_employee_counts(self, *, current_role: Role) -> dict[int, tuple[int, int]]:
        """Reset every cached counter to the live count; returns {dept_id: (cached, live)} for drifted ones."""
        self._require_admin(current_role)
        drifted: dict[int, tuple[int, int]] = {}
        with self._tx.transaction():
            live = self._employees.count_by_department()
            for dept in self._departments.list_all():
                actual = live.get(dept.dept_id, 0)
                if dept.employee_count != actual:
                    self._departments.set_employee_count(dept.dept_id, actual)
                    drifted[dept.dept_id] = (dept.employee_count, actual)

        if drifted:
            logger.warning("department counters corrected", extra={"drifted": drifted})
        return drifted
