from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import Gender


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee record.

    `account_id` links the 1:1 login identity.
    """

    employee_id: int
    account_id: int
    full_name: str
    date_of_birth: date
    dept_id: int
    position: str
    base_salary: Decimal
    start_date: date
    is_active: bool = True
    gender: Optional[Gender] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None

    def age_on(self, day: date) -> int:
        years = day.year - self.date_of_birth.year
        if (day.month, day.day) < (self.date_of_birth.month, self.date_of_birth.day):
            years -= 1
        return years


@dataclass(frozen=True)
class NewEmployee:
    """Validated input for creating an employee (account fields excluded)."""

    full_name: str
    date_of_birth: date
    dept_id: int
    position: str
    base_salary: Decimal
    start_date: date
    gender: Optional[Gender] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
