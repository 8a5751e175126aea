from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import require_period
from ..common.rates import safe_average
from ..core.enums import AttendanceStatus
from ..employees.repository import EmployeeRepository
from .model import AttendanceSummaryReport, EmployeeAttendanceSummary


class LeaveDaysLookup(Protocol):
    def approved_leave_days_by_employee(
        self,
        employee_ids: Optional[Sequence[int]],
        start: date,
        end: date,
    ) -> dict[int, set[date]]:
        raise NotImplementedError


class AttendanceReportService:
    """Per-employee attendance totals for a period.

    Leave days come from approved leave requests at read time; a day with its
    own attendance record is counted by that record's status instead.
    """

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository, leaves: LeaveDaysLookup):
        self._attendance = attendance
        self._employees = employees
        self._leaves = leaves

    def summary_for_period(
        self,
        start_date: date,
        end_date: date,
        *,
        employee_ids: Optional[Sequence[int]] = None,
        dept_id: Optional[int] = None,
    ) -> AttendanceSummaryReport:
        require_period(start_date, end_date)

        population = self._employees.list(
            dept_id=dept_id,
            employee_ids=[int(i) for i in employee_ids] if employee_ids is not None else None,
        )
        ids = [e.employee_id for e in population]
        records = self._attendance.list_in_range(start_date=start_date, end_date=end_date, employee_ids=ids)
        leave_days = self._leaves.approved_leave_days_by_employee(ids, start_date, end_date)

        by_employee: dict[int, list] = {i: [] for i in ids}
        for r in records:
            if r.employee_id in by_employee:
                by_employee[r.employee_id].append(r)

        rows: list[EmployeeAttendanceSummary] = []
        for emp in population:
            recs = by_employee.get(emp.employee_id, [])
            recorded_days = {r.work_date for r in recs}
            present = [r for r in recs if r.status == AttendanceStatus.PRESENT]
            extra_leave = leave_days.get(emp.employee_id, set()) - recorded_days
            rows.append(
                EmployeeAttendanceSummary(
                    employee_id=emp.employee_id,
                    full_name=emp.full_name,
                    dept_id=emp.dept_id,
                    days_recorded=len(recs),
                    present_days=len(present),
                    absent_days=sum(1 for r in recs if r.status == AttendanceStatus.ABSENT),
                    leave_days=sum(1 for r in recs if r.status == AttendanceStatus.LEAVE) + len(extra_leave),
                    late_days=sum(1 for r in present if r.late_minutes > 0),
                    late_minutes=sum(r.late_minutes for r in present),
                    working_hours=sum((r.working_hours for r in present), Decimal(0)),
                    overtime_hours=sum((r.overtime_hours for r in present), Decimal(0)),
                )
            )

        return AttendanceSummaryReport(
            start_date=start_date,
            end_date=end_date,
            employees=tuple(rows),
            average_working_hours=safe_average(sum((r.working_hours for r in rows), Decimal(0)), len(rows)),
            average_overtime_hours=safe_average(sum((r.overtime_hours for r in rows), Decimal(0)), len(rows)),
            late_count=sum(r.late_days for r in rows),
        )
