from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.rates import round_hours, round_money


@dataclass(frozen=True)
class EmployeePay:
    """Per-employee payroll line. Amounts are unrounded; see `to_dict`."""

    employee_id: int
    full_name: str
    dept_id: int
    base_salary: Decimal
    hourly_rate: Decimal
    working_hours: Decimal
    overtime_hours: Decimal
    days_worked: int
    regular_pay: Decimal
    overtime_pay: Decimal

    @property
    def total_pay(self) -> Decimal:
        return self.regular_pay + self.overtime_pay

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "full_name": self.full_name,
            "dept_id": self.dept_id,
            "base_salary": str(round_money(self.base_salary)),
            "hourly_rate": str(round_money(self.hourly_rate)),
            "working_hours": str(round_hours(self.working_hours)),
            "overtime_hours": str(round_hours(self.overtime_hours)),
            "days_worked": self.days_worked,
            "regular_pay": str(round_money(self.regular_pay)),
            "overtime_pay": str(round_money(self.overtime_pay)),
            "total_pay": str(round_money(self.total_pay)),
        }


@dataclass(frozen=True)
class DepartmentPay:
    dept_id: int
    dept_name: str
    employees: tuple[EmployeePay, ...]
    total_base_salary: Decimal
    total_regular_pay: Decimal
    total_overtime_pay: Decimal
    average_pay: Decimal

    @property
    def employee_count(self) -> int:
        return len(self.employees)

    @property
    def total_pay(self) -> Decimal:
        return self.total_regular_pay + self.total_overtime_pay

    def to_dict(self) -> dict:
        return {
            "dept_id": self.dept_id,
            "dept_name": self.dept_name,
            "employee_count": self.employee_count,
            "total_base_salary": str(round_money(self.total_base_salary)),
            "total_regular_pay": str(round_money(self.total_regular_pay)),
            "total_overtime_pay": str(round_money(self.total_overtime_pay)),
            "total_pay": str(round_money(self.total_pay)),
            "average_pay": str(round_money(self.average_pay)),
            "employees": [e.to_dict() for e in self.employees],
        }


@dataclass(frozen=True)
class PayrollSummary:
    employee_count: int
    total_pay: Decimal
    average_pay: Decimal

    def to_dict(self) -> dict:
        return {
            "employee_count": self.employee_count,
            "total_pay": str(round_money(self.total_pay)),
            "average_pay": str(round_money(self.average_pay)),
        }


@dataclass(frozen=True)
class PayrollReport:
    start_date: date
    end_date: date
    departments: tuple[DepartmentPay, ...]
    summary: PayrollSummary
    dept_id: Optional[int] = None

    @property
    def employees(self) -> list[EmployeePay]:
        return [e for d in self.departments for e in d.employees]

    def for_employee(self, employee_id: int) -> Optional[EmployeePay]:
        return next((e for e in self.employees if e.employee_id == int(employee_id)), None)

    def to_dict(self) -> dict:
        return {
            "period": {"start": self.start_date.isoformat(), "end": self.end_date.isoformat()},
            "dept_id": self.dept_id,
            "departments": [d.to_dict() for d in self.departments],
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True)
class EmployeeAttendanceSummary:
    employee_id: int
    full_name: str
    dept_id: int
    days_recorded: int
    present_days: int
    absent_days: int
    leave_days: int
    late_days: int
    late_minutes: int
    working_hours: Decimal
    overtime_hours: Decimal

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "full_name": self.full_name,
            "dept_id": self.dept_id,
            "days_recorded": self.days_recorded,
            "present_days": self.present_days,
            "absent_days": self.absent_days,
            "leave_days": self.leave_days,
            "late_days": self.late_days,
            "late_minutes": self.late_minutes,
            "working_hours": str(round_hours(self.working_hours)),
            "overtime_hours": str(round_hours(self.overtime_hours)),
        }


@dataclass(frozen=True)
class AttendanceSummaryReport:
    start_date: date
    end_date: date
    employees: tuple[EmployeeAttendanceSummary, ...] = field(default_factory=tuple)
    average_working_hours: Decimal = Decimal(0)
    average_overtime_hours: Decimal = Decimal(0)
    late_count: int = 0

    @property
    def employee_count(self) -> int:
        return len(self.employees)

    def to_dict(self) -> dict:
        return {
            "period": {"start": self.start_date.isoformat(), "end": self.end_date.isoformat()},
            "employees": [e.to_dict() for e in self.employees],
            "summary": {
                "employee_count": self.employee_count,
                "average_working_hours": str(round_hours(self.average_working_hours)),
                "average_overtime_hours": str(round_hours(self.average_overtime_hours)),
                "late_count": self.late_count,
            },
        }
