from __future__ import annotations

from datetime import timedelta

from flask import Flask

from ..common.web import admin_required, date_arg, employee_required, int_arg, login_required, ok, require_principal
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="checkin")
    @employee_required
    def checkin():
        principal = require_principal()
        record = container.attendance_service.check_in(principal.employee_id, principal=principal)
        return ok(record, 201)

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="checkout")
    @employee_required
    def checkout():
        principal = require_principal()
        return ok(container.attendance_service.check_out(principal.employee_id, principal=principal))

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @employee_required
    def attendance_today():
        principal = require_principal()
        record = container.attendance_service.get_today_record(principal.employee_id)
        return ok({"record": record})

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @employee_required
    def attendance_history():
        principal = require_principal()
        limit = int_arg("limit", 30)
        return ok(container.attendance_service.history(principal.employee_id, limit=limit))

    @app.route("/api/attendance/range", methods=["GET"], endpoint="attendance_range")
    @login_required
    def attendance_range():
        principal = require_principal()
        employee_id = int_arg("employee_id", principal.employee_id)
        if employee_id is None:
            raise ValidationError("Thiếu employee_id")
        if not principal.is_admin and employee_id != principal.employee_id:
            raise AuthorizationError("Bạn chỉ được xem chấm công của chính mình")

        today = container.clock().date()
        records = container.attendance_service.find_in_range(
            employee_id,
            date_arg("from", today.replace(day=1)),
            date_arg("to", today),
        )
        return ok(records)

    @app.route("/api/attendance/report", methods=["GET"], endpoint="attendance_report")
    @admin_required
    def attendance_report():
        today = container.clock().date()
        report = container.attendance_report_service.summary_for_period(
            date_arg("start", today - timedelta(days=7)),
            date_arg("end", today),
            dept_id=int_arg("dept_id"),
        )
        return ok(report)

    @app.route("/api/attendance/report.csv", methods=["GET"], endpoint="attendance_report_csv")
    @admin_required
    def attendance_report_csv():
        report = container.attendance_report_service.summary_for_period(
            date_arg("start"),
            date_arg("end"),
            dept_id=int_arg("dept_id"),
        )
        sink = container.report_sink
        return app.response_class(
            sink.render_attendance(report),
            mimetype=sink.content_type,
            headers={"Content-Disposition": f"attachment; filename={sink.filename('attendance_report', report)}"},
        )
