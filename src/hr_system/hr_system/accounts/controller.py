from __future__ import annotations

from flask import Flask, session

from ..common.web import SESSION_KEY, json_body, login_required, ok, require_principal
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        principal = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))
        session.clear()
        session.permanent = bool(body.get("remember_me"))
        session[SESSION_KEY] = principal.to_session()
        return ok(principal)

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok()

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        principal = require_principal()
        employee = None
        if principal.employee_id is not None:
            employee = container.employee_service.get_employee(principal.employee_id, principal=principal)
        return ok({"principal": principal, "employee": employee})

    @app.route("/api/auth/change-password", methods=["POST"], endpoint="change_password")
    @login_required
    def change_password():
        body = json_body()
        container.auth_service.change_password(
            require_principal().account_id,
            body.get("current_password", ""),
            body.get("new_password", ""),
        )
        return ok()
