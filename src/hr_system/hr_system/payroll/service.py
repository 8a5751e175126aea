from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_range, quarter_range, require_period
from ..core.enums import AttendanceStatus
from ..core.policy import PayrollPolicy
from ..departments.repository import DepartmentRepository
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollReport
from .pipeline import PayrollContext, PayrollPipeline

logger = logging.getLogger(__name__)


class PayrollService:
    """Read-only aggregation of attendance into pay per employee, department and period."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        *,
        policy: Optional[PayrollPolicy] = None,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._departments = departments
        self._calculator = calculator or StandardPayrollCalculator(policy or PayrollPolicy())
        self._pipeline = PayrollPipeline(self._calculator)

    def compute_for_period(
        self,
        employee_ids: Optional[Sequence[int]],
        start_date: date,
        end_date: date,
        *,
        dept_id: Optional[int] = None,
    ) -> PayrollReport:
        """`employee_ids=None` means every employee (optionally within `dept_id`)."""
        require_period(start_date, end_date)

        population = self._employees.list(
            dept_id=dept_id,
            employee_ids=[int(i) for i in employee_ids] if employee_ids is not None else None,
        )
        ids = [e.employee_id for e in population]
        records = self._attendance.list_in_range(
            start_date=start_date,
            end_date=end_date,
            employee_ids=ids,
            status=AttendanceStatus.PRESENT,
        )
        departments = {d.dept_id: d for d in self._departments.list_all()}

        ctx = PayrollContext(
            start_date=start_date,
            end_date=end_date,
            employees=population,
            departments=departments,
            records=records,
            dept_id=dept_id,
        )
        report = self._pipeline.run(ctx)
        logger.info(
            "payroll computed",
            extra={
                "start": start_date,
                "end": end_date,
                "dept_id": dept_id,
                "employees": report.summary.employee_count,
                "records": len(ctx.present),
            },
        )
        return report

    def compute_for_month(self, year: int, month: int, *, dept_id: Optional[int] = None) -> PayrollReport:
        start, end = month_range(year, month)
        return self.compute_for_period(None, start, end, dept_id=dept_id)

    def compute_for_quarter(self, year: int, quarter: int, *, dept_id: Optional[int] = None) -> PayrollReport:
        start, end = quarter_range(year, quarter)
        return self.compute_for_period(None, start, end, dept_id=dept_id)
