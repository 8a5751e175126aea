from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional, Sequence

from ..core.enums import ActivityAction, EntityType, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import ActivityLog, ActorActivity
from .repository import ActivityLogRepository


def _load_details(value) -> dict[str, Any]:
    if not value:
        return {}
    if isinstance(value, dict):
        return value
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    return json.loads(value)


class MySQLActivityLogRepository(ActivityLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(
        self,
        *,
        actor_id: int,
        action: ActivityAction,
        entity_type: EntityType,
        entity_id: Optional[int],
        details: dict[str, Any],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO activity_logs(actor_id, action, entity_type, entity_id, details)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(actor_id), action.value, entity_type.value, entity_id, json.dumps(details, default=str)),
            )
            return int(cur.lastrowid)

    def list_recent(
        self,
        *,
        actor_id: Optional[int] = None,
        entity_type: Optional[EntityType] = None,
        entity_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[ActivityLog]:
        clauses: list[str] = []
        params: list[object] = []
        if actor_id is not None:
            clauses.append("actor_id=%s")
            params.append(int(actor_id))
        if entity_type is not None:
            clauses.append("entity_type=%s")
            params.append(entity_type.value)
        if entity_id is not None:
            clauses.append("entity_id=%s")
            params.append(int(entity_id))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT log_id, actor_id, action, entity_type, entity_id, details, created_at
                FROM activity_logs
                {where}
                ORDER BY created_at DESC, log_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [
                ActivityLog(
                    log_id=int(r["log_id"]),
                    actor_id=int(r["actor_id"]),
                    action=ActivityAction(r["action"]),
                    entity_type=EntityType(r["entity_type"]),
                    entity_id=r.get("entity_id"),
                    created_at=r["created_at"],
                    details=_load_details(r.get("details")),
                )
                for r in fetchall(cur)
            ]

    def summarize_by_actor(
        self,
        *,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> Sequence[ActorActivity]:
        clauses: list[str] = []
        params: list[object] = []
        if since is not None:
            clauses.append("l.created_at >= %s")
            params.append(since)
        if until is not None:
            clauses.append("l.created_at < %s")
            params.append(until)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT l.actor_id, a.email, a.role,
                       COUNT(*) AS total_actions,
                       MAX(l.created_at) AS last_active,
                       GROUP_CONCAT(DISTINCT l.action ORDER BY l.action) AS actions,
                       GROUP_CONCAT(DISTINCT l.entity_type ORDER BY l.entity_type) AS entity_types
                FROM activity_logs l
                JOIN accounts a ON a.account_id = l.actor_id
                {where}
                GROUP BY l.actor_id, a.email, a.role
                ORDER BY total_actions DESC, l.actor_id
                """,
                tuple(params),
            )
            return [
                ActorActivity(
                    actor_id=int(r["actor_id"]),
                    email=r["email"],
                    role=Role(r["role"]),
                    total_actions=int(r["total_actions"]),
                    last_active=r["last_active"],
                    actions=tuple(ActivityAction(x) for x in (r.get("actions") or "").split(",") if x),
                    entity_types=tuple(EntityType(x) for x in (r.get("entity_types") or "").split(",") if x),
                )
                for r in fetchall(cur)
            ]
