from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import ActivityAction, EntityType
from .model import ActivityLog, ActorActivity


class ActivityLogRepository(Protocol):
    def add(
        self,
        *,
        actor_id: int,
        action: ActivityAction,
        entity_type: EntityType,
        entity_id: Optional[int],
        details: dict[str, Any],
    ) -> int:
        raise NotImplementedError

    def list_recent(
        self,
        *,
        actor_id: Optional[int] = None,
        entity_type: Optional[EntityType] = None,
        entity_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[ActivityLog]:
        raise NotImplementedError

    def summarize_by_actor(
        self,
        *,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> Sequence[ActorActivity]:
        """Per-actor totals for logs with `since <= created_at < until`, busiest first."""
        raise NotImplementedError
