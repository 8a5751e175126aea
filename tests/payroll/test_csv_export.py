from __future__ import annotations

import csv
import io
from datetime import date
from decimal import Decimal

from src.hr_system.hr_system.payroll.export import ATTENDANCE_FIELDS, PAYROLL_FIELDS, CsvReportSink
from src.hr_system.hr_system.payroll.model import (
    AttendanceSummaryReport,
    DepartmentPay,
    EmployeePay,
    PayrollReport,
    PayrollSummary,
)


def _report() -> PayrollReport:
    line = EmployeePay(
        employee_id=1,
        full_name="Nguyễn Văn An",
        dept_id=3,
        base_salary=Decimal("17600000"),
        hourly_rate=Decimal("100000"),
        working_hours=Decimal("8"),
        overtime_hours=Decimal("0.333"),
        days_worked=1,
        regular_pay=Decimal("800000"),
        overtime_pay=Decimal("49950"),
    )
    dept = DepartmentPay(
        dept_id=3,
        dept_name="Kỹ thuật",
        employees=(line,),
        total_base_salary=line.base_salary,
        total_regular_pay=line.regular_pay,
        total_overtime_pay=line.overtime_pay,
        average_pay=line.total_pay,
    )
    return PayrollReport(
        start_date=date(2026, 3, 1),
        end_date=date(2026, 3, 31),
        departments=(dept,),
        summary=PayrollSummary(employee_count=1, total_pay=line.total_pay, average_pay=line.total_pay),
    )


def _rows(payload: bytes) -> list[dict]:
    assert payload.startswith(b"\xef\xbb\xbf")
    return list(csv.DictReader(io.StringIO(payload.decode("utf-8-sig"))))


def test_payroll_csv_has_header_rows_and_total():
    rows = _rows(CsvReportSink().render_payroll(_report()))

    assert list(rows[0].keys()) == PAYROLL_FIELDS
    assert rows[0]["dept_name"] == "Kỹ thuật"
    assert rows[0]["full_name"] == "Nguyễn Văn An"
    assert rows[0]["overtime_hours"] == "0.33"
    assert rows[0]["total_pay"] == "849950.00"
    assert rows[-1]["dept_name"] == "TOTAL"
    assert rows[-1]["total_pay"] == "849950.00"


def test_attendance_csv_of_empty_report_is_header_only():
    payload = CsvReportSink().render_attendance(AttendanceSummaryReport(start_date=date(2026, 3, 1), end_date=date(2026, 3, 7)))

    assert _rows(payload) == []
    assert payload.decode("utf-8-sig").splitlines()[0] == ",".join(ATTENDANCE_FIELDS)


def test_filename_contains_period():
    assert CsvReportSink.filename("payroll", _report()) == "payroll_20260301_20260331.csv"
