from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..overtime.model import OvertimeRequest
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy
from .strategies.overtime_strategy import ApprovedOvertimeStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the appropriate strategy based on rules."""

    def for_checkin(self, *, now: datetime, standard_check_in: datetime) -> AttendanceStrategy:
        if now > standard_check_in:
            return LateStrategy()
        return NormalStrategy()

    def for_checkout(self, *, approved_overtime: Optional[OvertimeRequest]) -> AttendanceStrategy:
        if approved_overtime is not None:
            return ApprovedOvertimeStrategy(approved_overtime.requested_hours)
        return NormalStrategy()
