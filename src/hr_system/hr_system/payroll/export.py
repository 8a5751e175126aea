from __future__ import annotations

import csv
import io
from typing import Protocol

from .model import AttendanceSummaryReport, PayrollReport

PAYROLL_FIELDS = [
    "dept_id",
    "dept_name",
    "employee_id",
    "full_name",
    "base_salary",
    "hourly_rate",
    "working_hours",
    "overtime_hours",
    "days_worked",
    "regular_pay",
    "overtime_pay",
    "total_pay",
]

ATTENDANCE_FIELDS = [
    "employee_id",
    "full_name",
    "dept_id",
    "days_recorded",
    "present_days",
    "absent_days",
    "leave_days",
    "late_days",
    "late_minutes",
    "working_hours",
    "overtime_hours",
]


class ReportSink(Protocol):
    """Renders a fully computed report into a downloadable artifact."""

    content_type: str
    extension: str

    def render_payroll(self, report: PayrollReport) -> bytes:
        raise NotImplementedError

    def render_attendance(self, report: AttendanceSummaryReport) -> bytes:
        raise NotImplementedError


class CsvReportSink:
    """CSV with a UTF-8 BOM so spreadsheet tools detect the encoding."""

    content_type = "text/csv"
    extension = "csv"

    def render_payroll(self, report: PayrollReport) -> bytes:
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=PAYROLL_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for dept in report.departments:
            for emp in dept.employees:
                writer.writerow({**emp.to_dict(), "dept_name": dept.dept_name})

        summary = report.summary.to_dict()
        writer.writerow(
            {
                "dept_name": "TOTAL",
                "full_name": f"employees={summary['employee_count']} average_pay={summary['average_pay']}",
                "total_pay": summary["total_pay"],
            }
        )
        return out.getvalue().encode("utf-8-sig")

    def render_attendance(self, report: AttendanceSummaryReport) -> bytes:
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=ATTENDANCE_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for row in report.employees:
            writer.writerow(row.to_dict())
        return out.getvalue().encode("utf-8-sig")

    @staticmethod
    def filename(prefix: str, report) -> str:
        return f"{prefix}_{report.start_date.strftime('%Y%m%d')}_{report.end_date.strftime('%Y%m%d')}.csv"
