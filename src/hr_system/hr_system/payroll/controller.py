from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, date_arg, employee_required, int_arg, ok, require_principal
from ..core.exceptions import ValidationError
from ..container import Container
from .model import PayrollReport


def register(app: Flask, container: Container) -> None:
    def _report_from_args() -> PayrollReport:
        kind = request.args.get("type", "period")
        dept_id = int_arg("dept_id")
        if kind == "month":
            year, month = int_arg("year"), int_arg("month")
            if year is None or month is None:
                raise ValidationError("Thiếu thông tin năm hoặc tháng")
            return container.payroll_service.compute_for_month(year, month, dept_id=dept_id)
        if kind == "quarter":
            year, quarter = int_arg("year"), int_arg("quarter")
            if year is None or quarter is None:
                raise ValidationError("Thiếu thông tin năm hoặc quý")
            return container.payroll_service.compute_for_quarter(year, quarter, dept_id=dept_id)
        if kind == "period":
            return container.payroll_service.compute_for_period(None, date_arg("start"), date_arg("end"), dept_id=dept_id)
        raise ValidationError("type không hợp lệ (chấp nhận: month, quarter, period)")

    @app.route("/api/payroll", methods=["GET"], endpoint="payroll_report")
    @admin_required
    def payroll_report():
        return ok(_report_from_args())

    @app.route("/api/payroll.csv", methods=["GET"], endpoint="payroll_report_csv")
    @admin_required
    def payroll_report_csv():
        report = _report_from_args()
        sink = container.report_sink
        return app.response_class(
            sink.render_payroll(report),
            mimetype=sink.content_type,
            headers={"Content-Disposition": f"attachment; filename={sink.filename('payroll', report)}"},
        )

    @app.route("/api/payroll/me", methods=["GET"], endpoint="my_payroll")
    @employee_required
    def my_payroll():
        employee_id = require_principal().employee_id
        report = container.payroll_service.compute_for_period([employee_id], date_arg("start"), date_arg("end"))
        return ok({"period": {"start": report.start_date, "end": report.end_date}, "pay": report.for_employee(employee_id)})
