from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import ActivityAction, EntityType, Role


@dataclass(frozen=True)
class ActivityLog:
    """Audit entry for an administrative mutation."""

    log_id: int
    actor_id: int
    action: ActivityAction
    entity_type: EntityType
    entity_id: Optional[int]
    created_at: datetime
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ActorActivity:
    """Aggregated activity of one account over a period."""

    actor_id: int
    email: str
    role: Role
    total_actions: int
    last_active: datetime
    actions: tuple[ActivityAction, ...] = ()
    entity_types: tuple[EntityType, ...] = ()


@dataclass(frozen=True)
class ActivitySummary:
    start: Optional[date]
    end: Optional[date]
    actors: tuple[ActorActivity, ...]

    @property
    def total_actors(self) -> int:
        return len(self.actors)

    @property
    def total_actions(self) -> int:
        return sum(a.total_actions for a in self.actors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": {
                "start": self.start.isoformat() if self.start else None,
                "end": self.end.isoformat() if self.end else None,
            },
            "total_actors": self.total_actors,
            "total_actions": self.total_actions,
            "actors": [
                {
                    "actor_id": a.actor_id,
                    "email": a.email,
                    "role": a.role.value,
                    "total_actions": a.total_actions,
                    "last_active": a.last_active.isoformat(),
                    "actions": [x.value for x in a.actions],
                    "entity_types": [x.value for x in a.entity_types],
                }
                for a in self.actors
            ],
        }
