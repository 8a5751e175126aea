from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class CheckInDecision:
    late_minutes: int
    status: AttendanceStatus = AttendanceStatus.PRESENT
    note: Optional[str] = None


@dataclass(frozen=True)
class CheckOutDecision:
    working_hours: Decimal
    overtime_hours: Decimal
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how check-in/check-out figures are derived."""

    @abstractmethod
    def decide_checkin(self, *, now: datetime, standard_check_in: datetime) -> CheckInDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_checkout(self, *, check_in: datetime, now: datetime, standard_daily_hours: Decimal) -> CheckOutDecision:
        raise NotImplementedError
