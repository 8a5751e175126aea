from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from ...common.rates import elapsed_hours, round_hours
from .base import AttendanceStrategy, CheckInDecision, CheckOutDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in; check-out without approved overtime.

    Hours beyond the standard day are recorded in working_hours but never
    become payable overtime.
    """

    def decide_checkin(self, *, now: datetime, standard_check_in: datetime) -> CheckInDecision:
        return CheckInDecision(late_minutes=0)

    def decide_checkout(self, *, check_in: datetime, now: datetime, standard_daily_hours: Decimal) -> CheckOutDecision:
        return CheckOutDecision(working_hours=round_hours(elapsed_hours(check_in, now)), overtime_hours=Decimal(0))
