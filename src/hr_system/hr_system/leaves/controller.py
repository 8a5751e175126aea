from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, date_arg, employee_required, json_body, ok, require_principal
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leaves", methods=["POST"], endpoint="new_leave")
    @employee_required
    def new_leave():
        principal = require_principal()
        body = json_body()
        req = container.leave_service.create(
            principal.employee_id,
            parse_iso_date(body.get("start_date") or ""),
            parse_iso_date(body.get("end_date") or ""),
            body.get("leave_type") or "annual",
            body.get("reason", ""),
            principal=principal,
        )
        return ok(req, 201)

    @app.route("/api/leaves/me", methods=["GET"], endpoint="my_leaves")
    @employee_required
    def my_leaves():
        return ok(container.leave_service.list_for_employee(require_principal().employee_id))

    @app.route("/api/leaves/me/days", methods=["GET"], endpoint="my_leave_days")
    @employee_required
    def my_leave_days():
        today = container.clock().date()
        days = container.leave_service.approved_leave_days(
            require_principal().employee_id,
            date_arg("start", today.replace(month=1, day=1)),
            date_arg("end", today.replace(month=12, day=31)),
        )
        return ok(sorted(days))

    @app.route("/api/leaves/pending", methods=["GET"], endpoint="pending_leaves")
    @admin_required
    def pending_leaves():
        return ok(container.leave_service.list_pending(current_role=require_principal().role))

    @app.route("/api/leaves/<int:request_id>/approve", methods=["PUT"], endpoint="approve_leave")
    @admin_required
    def approve_leave(request_id: int):
        principal = require_principal()
        return ok(container.leave_service.approve(request_id, principal.account_id, current_role=principal.role))

    @app.route("/api/leaves/<int:request_id>/reject", methods=["PUT"], endpoint="reject_leave")
    @admin_required
    def reject_leave(request_id: int):
        principal = require_principal()
        return ok(container.leave_service.reject(request_id, principal.account_id, current_role=principal.role))
