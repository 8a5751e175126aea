"""Payroll aggregation as an ordered list of named steps.

filter -> join -> derive -> group. Each step takes the shared context and fills
in the next field; steps can be run and asserted on one at a time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Callable, Mapping, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..common.rates import safe_average
from ..core.enums import AttendanceStatus
from ..departments.model import Department
from ..employees.model import Employee
from .calculator.base import PayrollCalculator
from .model import DepartmentPay, EmployeePay, PayrollReport, PayrollSummary


@dataclass
class EmployeeBucket:
    employee: Employee
    dept_name: str
    records: list[AttendanceRecord] = field(default_factory=list)


@dataclass
class PayrollContext:
    start_date: date
    end_date: date
    employees: Sequence[Employee]
    departments: Mapping[int, Department]
    records: Sequence[AttendanceRecord]
    dept_id: Optional[int] = None

    present: list[AttendanceRecord] = field(default_factory=list)
    buckets: dict[int, EmployeeBucket] = field(default_factory=dict)
    lines: list[EmployeePay] = field(default_factory=list)
    report: Optional[PayrollReport] = None


Step = Callable[[PayrollContext, PayrollCalculator], None]


def filter_records(ctx: PayrollContext, calculator: PayrollCalculator) -> None:
    """Keep present-day records inside the inclusive period."""
    ctx.present = [
        r
        for r in ctx.records
        if r.status == AttendanceStatus.PRESENT and ctx.start_date <= r.work_date <= ctx.end_date
    ]


def join_directory(ctx: PayrollContext, calculator: PayrollCalculator) -> None:
    """Attach each record to its employee; employees without records keep an empty bucket."""
    buckets: dict[int, EmployeeBucket] = {}
    for emp in ctx.employees:
        if ctx.dept_id is not None and emp.dept_id != ctx.dept_id:
            continue
        dept = ctx.departments.get(emp.dept_id)
        buckets[emp.employee_id] = EmployeeBucket(employee=emp, dept_name=dept.name if dept else "-")

    for r in ctx.present:
        bucket = buckets.get(r.employee_id)
        if bucket is not None:
            bucket.records.append(r)
    ctx.buckets = buckets


def derive_pay(ctx: PayrollContext, calculator: PayrollCalculator) -> None:
    lines: list[EmployeePay] = []
    for bucket in ctx.buckets.values():
        emp = bucket.employee
        working_hours = sum((r.working_hours for r in bucket.records), Decimal(0))
        overtime_hours = sum((r.overtime_hours for r in bucket.records), Decimal(0))
        rate = calculator.hourly_rate(emp.base_salary)
        lines.append(
            EmployeePay(
                employee_id=emp.employee_id,
                full_name=emp.full_name,
                dept_id=emp.dept_id,
                base_salary=emp.base_salary,
                hourly_rate=rate,
                working_hours=working_hours,
                overtime_hours=overtime_hours,
                days_worked=len(bucket.records),
                regular_pay=calculator.regular_pay(working_hours, rate),
                overtime_pay=calculator.overtime_pay(overtime_hours, rate),
            )
        )
    ctx.lines = lines


def group_by_department(ctx: PayrollContext, calculator: PayrollCalculator) -> None:
    grouped: dict[int, list[EmployeePay]] = {}
    for line in ctx.lines:
        grouped.setdefault(line.dept_id, []).append(line)

    # an explicitly requested department is reported even when empty
    if ctx.dept_id is not None:
        grouped.setdefault(ctx.dept_id, [])

    departments: list[DepartmentPay] = []
    for dept_id, lines in grouped.items():
        dept = ctx.departments.get(dept_id)
        total_regular = sum((e.regular_pay for e in lines), Decimal(0))
        total_overtime = sum((e.overtime_pay for e in lines), Decimal(0))
        departments.append(
            DepartmentPay(
                dept_id=dept_id,
                dept_name=dept.name if dept else "-",
                employees=tuple(sorted(lines, key=lambda e: e.employee_id)),
                total_base_salary=sum((e.base_salary for e in lines), Decimal(0)),
                total_regular_pay=total_regular,
                total_overtime_pay=total_overtime,
                average_pay=safe_average(total_regular + total_overtime, len(lines)),
            )
        )
    departments.sort(key=lambda d: d.dept_name)

    employee_count = sum(d.employee_count for d in departments)
    total_pay = sum((d.total_pay for d in departments), Decimal(0))
    ctx.report = PayrollReport(
        start_date=ctx.start_date,
        end_date=ctx.end_date,
        departments=tuple(departments),
        summary=PayrollSummary(
            employee_count=employee_count,
            total_pay=total_pay,
            average_pay=safe_average(total_pay, employee_count),
        ),
        dept_id=ctx.dept_id,
    )


DEFAULT_STEPS: tuple[tuple[str, Step], ...] = (
    ("filter", filter_records),
    ("join", join_directory),
    ("derive", derive_pay),
    ("group", group_by_department),
)


class PayrollPipeline:
    def __init__(self, calculator: PayrollCalculator, steps: Sequence[tuple[str, Step]] = DEFAULT_STEPS):
        self._calculator = calculator
        self._steps = tuple(steps)

    @property
    def step_names(self) -> list[str]:
        return [name for name, _ in self._steps]

    def run(self, ctx: PayrollContext) -> PayrollReport:
        for _, step in self._steps:
            step(ctx, self._calculator)
        if ctx.report is None:
            raise RuntimeError("payroll pipeline finished without a report")
        return ctx.report
