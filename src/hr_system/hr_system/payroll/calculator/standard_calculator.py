from __future__ import annotations

from decimal import Decimal

from .base import PayrollCalculator
from ...common.rates import hourly_rate
from ...core.policy import PayrollPolicy


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: salary spread over the policy month; overtime at the policy multiplier."""

    def __init__(self, policy: PayrollPolicy | None = None):
        self._policy = policy or PayrollPolicy()

    @property
    def policy(self) -> PayrollPolicy:
        return self._policy

    def hourly_rate(self, base_salary: Decimal) -> Decimal:
        return hourly_rate(
            base_salary,
            hours_per_day=self._policy.hours_per_day,
            days_per_month=self._policy.days_per_month,
        )

    def regular_pay(self, working_hours: Decimal, rate: Decimal) -> Decimal:
        return max(working_hours, Decimal(0)) * rate

    def overtime_pay(self, overtime_hours: Decimal, rate: Decimal) -> Decimal:
        return max(overtime_hours, Decimal(0)) * rate * self._policy.overtime_multiplier
