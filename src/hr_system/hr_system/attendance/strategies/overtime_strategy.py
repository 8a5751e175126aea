from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from ...common.rates import elapsed_hours, round_hours, to_decimal
from .base import CheckOutDecision
from .normal_strategy import NormalStrategy


class ApprovedOvertimeStrategy(NormalStrategy):
    """Check-out with an approved overtime request.

    Payable overtime is the excess over the standard day, capped by the
    approved hours regardless of how long the employee actually stayed.
    """

    def __init__(self, approved_hours):
        self.approved_hours = to_decimal(approved_hours)

    def decide_checkout(self, *, check_in: datetime, now: datetime, standard_daily_hours: Decimal) -> CheckOutDecision:
        worked = elapsed_hours(check_in, now)
        overtime = Decimal(0)
        if worked > standard_daily_hours:
            overtime = min(worked - standard_daily_hours, self.approved_hours)
        return CheckOutDecision(working_hours=round_hours(worked), overtime_hours=round_hours(overtime))
