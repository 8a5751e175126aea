from __future__ import annotations

import logging
from datetime import date, time, timedelta
from typing import Any, Optional, Sequence

from ..common.datetime_utils import at_time, require_period
from ..core.enums import ActivityAction, EntityType, Role
from ..core.exceptions import AuthorizationError
from .model import ActivityLog, ActivitySummary
from .repository import ActivityLogRepository

logger = logging.getLogger(__name__)


class ActivityService:
    """Audit trail for administrative create/update/delete actions."""

    def __init__(self, logs: ActivityLogRepository):
        self._logs = logs

    def record(
        self,
        *,
        actor_id: int,
        action: ActivityAction,
        entity_type: EntityType,
        entity_id: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> int:
        log_id = self._logs.add(
            actor_id=int(actor_id),
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=dict(details or {}),
        )
        logger.info(
            "activity recorded",
            extra={"actor_id": actor_id, "action": action.value, "entity_type": entity_type.value, "entity_id": entity_id},
        )
        return log_id

    def list_recent(
        self,
        *,
        current_role: Role,
        actor_id: Optional[int] = None,
        entity_type: Optional[EntityType] = None,
        entity_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[ActivityLog]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Bạn không có quyền")
        return self._logs.list_recent(actor_id=actor_id, entity_type=entity_type, entity_id=entity_id, limit=limit)

    def summary(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
        *,
        current_role: Role,
    ) -> ActivitySummary:
        """Who did how much between `start` and `end` (both inclusive, either open)."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Bạn không có quyền")
        if start is not None and end is not None:
            require_period(start, end)

        since = at_time(start, time.min) if start is not None else None
        until = at_time(end + timedelta(days=1), time.min) if end is not None else None
        actors = self._logs.summarize_by_actor(since=since, until=until)
        return ActivitySummary(start=start, end=end, actors=tuple(actors))
