from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Account:
    """Domain entity: login identity, paired 1:1 with an employee.

    Plain data object (no DB access code).
    """

    account_id: int
    email: str
    password_hash: str
    role: Role
    is_active: bool = True


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, as stored in the session after login."""

    account_id: int
    role: Role
    employee_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_session(self) -> dict:
        return {"account_id": self.account_id, "role": self.role.value, "employee_id": self.employee_id}

    @classmethod
    def from_session(cls, data: dict) -> "Principal":
        employee_id = data.get("employee_id")
        return cls(
            account_id=int(data["account_id"]),
            role=Role(data["role"]),
            employee_id=int(employee_id) if employee_id is not None else None,
        )
