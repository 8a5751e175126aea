from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.exceptions import ReferentialIntegrityViolation, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, is_foreign_key_violation
from .model import Department
from .repository import DepartmentRepository

_COLUMNS = "dept_id, name, description, manager_id, is_active, employee_count"
_UPDATABLE = {"name", "description", "manager_id", "is_active"}


def _to_department(r: dict) -> Department:
    return Department(
        dept_id=int(r["dept_id"]),
        name=r["name"],
        description=r.get("description"),
        manager_id=r.get("manager_id"),
        is_active=bool(r.get("is_active", True)),
        employee_count=int(r.get("employee_count") or 0),
    )


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, dept_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM departments WHERE dept_id=%s", (int(dept_id),))
            r = fetchone(cur)
            return _to_department(r) if r else None

    def get_by_name(self, name: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM departments WHERE name=%s", (name,))
            r = fetchone(cur)
            return _to_department(r) if r else None

    def list_all(self, *, active_only: bool = False) -> Sequence[Department]:
        where = "WHERE is_active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM departments {where} ORDER BY name")
            return [_to_department(r) for r in fetchall(cur)]

    def create(self, *, name: str, description: Optional[str], manager_id: Optional[int]) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO departments(name, description, manager_id, is_active, employee_count) VALUES(%s,%s,%s,1,0)",
                    (name, description, manager_id),
                )
                return int(cur.lastrowid)
        except Exception as exc:
            if is_duplicate_key(exc):
                raise ValidationError("Tên phòng ban đã tồn tại") from exc
            raise

    def update(self, dept_id: int, changes: Mapping[str, Any]) -> bool:
        unknown = set(changes) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unsupported department fields: {sorted(unknown)}")
        if not changes:
            return True
        assignments = ", ".join(f"{field}=%s" for field in changes)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"UPDATE departments SET {assignments} WHERE dept_id=%s",
                    (*changes.values(), int(dept_id)),
                )
                return cur.rowcount >= 0
        except Exception as exc:
            if is_duplicate_key(exc):
                raise ValidationError("Tên phòng ban đã tồn tại") from exc
            raise

    def delete_by_id(self, dept_id: int) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM departments WHERE dept_id=%s", (int(dept_id),))
                return cur.rowcount > 0
        except Exception as exc:
            if is_foreign_key_violation(exc):
                raise ReferentialIntegrityViolation("Phòng ban vẫn còn nhân viên") from exc
            raise

    def adjust_employee_count(self, dept_id: int, delta: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE departments SET employee_count = GREATEST(employee_count + %s, 0) WHERE dept_id=%s",
                (int(delta), int(dept_id)),
            )
            return cur.rowcount > 0

    def set_employee_count(self, dept_id: int, count: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE departments SET employee_count=%s WHERE dept_id=%s", (int(count), int(dept_id)))
            return cur.rowcount >= 0
