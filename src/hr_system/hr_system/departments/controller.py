from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, json_body, login_required, ok, require_principal
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _admin():
        p = require_principal()
        return {"current_role": p.role, "actor_id": p.account_id}

    @app.route("/api/departments", methods=["GET"], endpoint="list_departments")
    @login_required
    def list_departments():
        active_only = request.args.get("active_only") in {"1", "true"}
        return ok(container.department_service.list_departments(active_only=active_only))

    @app.route("/api/departments/<int:dept_id>", methods=["GET"], endpoint="get_department")
    @login_required
    def get_department(dept_id: int):
        return ok(container.department_service.get_department(dept_id))

    @app.route("/api/departments", methods=["POST"], endpoint="create_department")
    @admin_required
    def create_department():
        body = json_body()
        dept = container.department_service.create_department(
            name=body.get("name", ""),
            description=body.get("description"),
            manager_id=body.get("manager_id"),
            **_admin(),
        )
        return ok(dept, 201)

    @app.route("/api/departments/<int:dept_id>", methods=["PUT"], endpoint="update_department")
    @admin_required
    def update_department(dept_id: int):
        return ok(container.department_service.update_department(dept_id, json_body(), **_admin()))

    @app.route("/api/departments/<int:dept_id>/deactivate", methods=["POST"], endpoint="deactivate_department")
    @admin_required
    def deactivate_department(dept_id: int):
        return ok(container.department_service.deactivate_department(dept_id, **_admin()))

    @app.route("/api/departments/<int:dept_id>", methods=["DELETE"], endpoint="delete_department")
    @admin_required
    def delete_department(dept_id: int):
        container.department_service.delete_department(dept_id, **_admin())
        return ok()

    @app.route("/api/departments/<int:dept_id>/transfer", methods=["POST"], endpoint="transfer_employees")
    @admin_required
    def transfer_employees(dept_id: int):
        employee_ids = json_body().get("employee_ids")
        if not isinstance(employee_ids, list):
            raise ValidationError("employee_ids phải là danh sách")
        moved = container.department_service.transfer_employees(employee_ids, dept_id, **_admin())
        return ok({"moved": moved})

    @app.route("/api/departments/reconcile", methods=["POST"], endpoint="reconcile_departments")
    @admin_required
    def reconcile_departments():
        drifted = container.department_service.reconcile_employee_counts(current_role=require_principal().role)
        return ok({"corrected": {str(k): {"cached": v[0], "live": v[1]} for k, v in drifted.items()}})
