from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import Gender
from ..core.exceptions import ReferentialIntegrityViolation, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone, is_duplicate_key, is_foreign_key_violation
from .model import Employee, NewEmployee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, account_id, full_name, date_of_birth, gender, phone_number, address,
    dept_id, position, base_salary, start_date, is_active
"""

_UPDATABLE = {
    "full_name",
    "date_of_birth",
    "gender",
    "phone_number",
    "address",
    "dept_id",
    "position",
    "base_salary",
    "start_date",
    "is_active",
}


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        account_id=int(r["account_id"]),
        full_name=r["full_name"],
        date_of_birth=r["date_of_birth"],
        dept_id=int(r["dept_id"]),
        position=r["position"],
        base_salary=as_decimal(r["base_salary"]),
        start_date=r["start_date"],
        is_active=bool(r.get("is_active", True)),
        gender=Gender(r["gender"]) if r.get("gender") else None,
        phone_number=r.get("phone_number"),
        address=r.get("address"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_account_id(self, account_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE account_id=%s", (int(account_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list(
        self,
        *,
        dept_id: Optional[int] = None,
        search: Optional[str] = None,
        active_only: bool = False,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[Employee]:
        clauses: list[str] = []
        params: list[object] = []

        if dept_id is not None:
            clauses.append("dept_id=%s")
            params.append(int(dept_id))
        if search:
            clauses.append("full_name LIKE %s")
            params.append(f"%{search.strip()}%")
        if active_only:
            clauses.append("is_active=1")
        if employee_ids is not None:
            if not employee_ids:
                return []
            clauses.append(f"employee_id IN ({', '.join(['%s'] * len(employee_ids))})")
            params.extend(int(i) for i in employee_ids)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees {where} ORDER BY employee_id ASC", tuple(params))
            return [_to_employee(r) for r in fetchall(cur)]

    def create(self, *, account_id: int, data: NewEmployee) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO employees(
                        account_id, full_name, date_of_birth, gender, phone_number, address,
                        dept_id, position, base_salary, start_date, is_active
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,1)
                    """,
                    (
                        int(account_id),
                        data.full_name,
                        data.date_of_birth,
                        data.gender.value if data.gender else None,
                        data.phone_number,
                        data.address,
                        int(data.dept_id),
                        data.position,
                        data.base_salary,
                        data.start_date,
                    ),
                )
                return int(cur.lastrowid)
        except Exception as exc:
            if is_duplicate_key(exc):
                raise ValidationError("Tài khoản đã được gắn với nhân viên khác") from exc
            if is_foreign_key_violation(exc):
                raise ReferentialIntegrityViolation("Phòng ban hoặc tài khoản không tồn tại") from exc
            raise

    def update(self, employee_id: int, changes: Mapping[str, Any]) -> bool:
        unknown = set(changes) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unsupported employee fields: {sorted(unknown)}")
        if not changes:
            return True

        assignments = ", ".join(f"{field}=%s" for field in changes)
        values = [v.value if isinstance(v, Enum) else v for v in changes.values()]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE employees SET {assignments} WHERE employee_id=%s",
                (*values, int(employee_id)),
            )
            # rowcount is 0 when values are unchanged; existence is checked by the caller
            return cur.rowcount >= 0

    def delete_by_id(self, employee_id: int) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
                return cur.rowcount > 0
        except Exception as exc:
            if is_foreign_key_violation(exc):
                raise ReferentialIntegrityViolation("Nhân viên còn dữ liệu liên quan, không thể xóa") from exc
            raise

    def count_by_department(self) -> dict[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT dept_id, COUNT(*) AS n FROM employees GROUP BY dept_id")
            return {int(r["dept_id"]): int(r["n"]) for r in fetchall(cur)}
