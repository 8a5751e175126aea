from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, int_arg, json_body, login_required, ok, require_principal
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _admin():
        p = require_principal()
        return {"current_role": p.role, "actor_id": p.account_id}

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @admin_required
    def list_employees():
        employees = container.employee_service.list_employees(
            current_role=require_principal().role,
            dept_id=int_arg("dept_id"),
            search=request.args.get("search"),
            active_only=request.args.get("active_only") in {"1", "true"},
        )
        return ok(employees)

    @app.route("/api/employees/stats", methods=["GET"], endpoint="employee_stats")
    @admin_required
    def employee_stats():
        rows = container.employee_service.salary_statistics(
            request.args.get("group_by", "department"),
            current_role=require_principal().role,
        )
        return ok(rows)

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="get_employee")
    @login_required
    def get_employee(employee_id: int):
        return ok(container.employee_service.get_employee(employee_id, principal=require_principal()))

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    @admin_required
    def create_employee():
        return ok(container.employee_service.create_employee(json_body(), **_admin()), 201)

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="update_employee")
    @admin_required
    def update_employee(employee_id: int):
        return ok(container.employee_service.update_employee(employee_id, json_body(), **_admin()))

    @app.route("/api/employees/<int:employee_id>/deactivate", methods=["POST"], endpoint="deactivate_employee")
    @admin_required
    def deactivate_employee(employee_id: int):
        return ok(container.employee_service.deactivate_employee(employee_id, **_admin()))

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="delete_employee")
    @admin_required
    def delete_employee(employee_id: int):
        deleted = container.employee_service.delete_employee(employee_id, **_admin())
        return ok({"deleted": deleted})
