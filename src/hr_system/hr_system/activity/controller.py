from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_enum
from ..common.web import admin_required, int_arg, ok, require_principal
from ..core.enums import EntityType
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/activity-logs", methods=["GET"], endpoint="activity_logs")
    @admin_required
    def activity_logs():
        entity_type = request.args.get("entity_type")
        logs = container.activity_service.list_recent(
            current_role=require_principal().role,
            actor_id=int_arg("actor_id"),
            entity_type=require_enum(EntityType, entity_type, "entity_type") if entity_type else None,
            entity_id=int_arg("entity_id"),
            limit=int_arg("limit", 200),
        )
        return ok(logs)

    @app.route("/api/activity-logs/summary", methods=["GET"], endpoint="activity_summary")
    @admin_required
    def activity_summary():
        start = request.args.get("start")
        end = request.args.get("end")
        summary = container.activity_service.summary(
            parse_iso_date(start) if start else None,
            parse_iso_date(end) if end else None,
            current_role=require_principal().role,
        )
        return ok(summary)
