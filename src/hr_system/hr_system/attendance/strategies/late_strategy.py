from __future__ import annotations

from datetime import datetime

from ...common.rates import elapsed_minutes
from .base import CheckInDecision
from .normal_strategy import NormalStrategy


class LateStrategy(NormalStrategy):
    """Check-in after the standard start: whole minutes late, floored."""

    def decide_checkin(self, *, now: datetime, standard_check_in: datetime) -> CheckInDecision:
        return CheckInDecision(late_minutes=max(0, elapsed_minutes(standard_check_in, now)))
