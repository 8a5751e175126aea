from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, employee_required, json_body, ok, require_principal
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/overtime/requests", methods=["POST"], endpoint="request_overtime")
    @employee_required
    def request_overtime():
        principal = require_principal()
        body = json_body()
        req = container.overtime_service.request(
            principal.employee_id,
            parse_iso_date(body.get("work_date") or ""),
            body.get("hours"),
            body.get("reason"),
            principal=principal,
        )
        return ok(req, 201)

    @app.route("/api/overtime/requests/me", methods=["GET"], endpoint="my_overtime")
    @employee_required
    def my_overtime():
        return ok(container.overtime_service.list_for_employee(require_principal().employee_id))

    @app.route("/api/overtime/requests/pending", methods=["GET"], endpoint="pending_overtime")
    @admin_required
    def pending_overtime():
        return ok(container.overtime_service.list_pending(current_role=require_principal().role))

    @app.route("/api/overtime/requests/<int:request_id>/approve", methods=["PUT"], endpoint="approve_overtime")
    @admin_required
    def approve_overtime(request_id: int):
        principal = require_principal()
        req = container.overtime_service.approve(request_id, principal.account_id, current_role=principal.role)
        return ok(req)

    @app.route("/api/overtime/requests/<int:request_id>/reject", methods=["PUT"], endpoint="reject_overtime")
    @admin_required
    def reject_overtime(request_id: int):
        principal = require_principal()
        req = container.overtime_service.reject(request_id, principal.account_id, current_role=principal.role)
        return ok(req)
