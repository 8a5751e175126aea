from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from decimal import Decimal

from .constants import (
    DEFAULT_OVERTIME_MULTIPLIER,
    DEFAULT_STANDARD_CHECK_IN,
    DEFAULT_STANDARD_DAILY_HOURS,
    DEFAULT_WORKING_DAYS_PER_MONTH,
)


@dataclass(frozen=True)
class AttendancePolicy:
    """Organization rules applied by the attendance ledger."""

    standard_check_in: time = time(8, 0)
    standard_daily_hours: Decimal = Decimal(DEFAULT_STANDARD_DAILY_HOURS)


@dataclass(frozen=True)
class PayrollPolicy:
    """Rate derivation constants used by the payroll aggregator."""

    hours_per_day: Decimal = Decimal(DEFAULT_STANDARD_DAILY_HOURS)
    days_per_month: Decimal = Decimal(DEFAULT_WORKING_DAYS_PER_MONTH)
    overtime_multiplier: Decimal = Decimal(DEFAULT_OVERTIME_MULTIPLIER)

    @property
    def monthly_hours(self) -> Decimal:
        return self.hours_per_day * self.days_per_month


def _parse_hhmm(value: str) -> time:
    return datetime.strptime(value.strip(), "%H:%M").time()


def policies_from_settings(settings) -> tuple[AttendancePolicy, PayrollPolicy]:
    """Build both policies from a settings module (missing values use defaults)."""

    daily_hours = Decimal(str(getattr(settings, "STANDARD_DAILY_HOURS", DEFAULT_STANDARD_DAILY_HOURS)))
    attendance = AttendancePolicy(
        standard_check_in=_parse_hhmm(str(getattr(settings, "STANDARD_CHECK_IN", DEFAULT_STANDARD_CHECK_IN))),
        standard_daily_hours=daily_hours,
    )
    payroll = PayrollPolicy(
        hours_per_day=daily_hours,
        days_per_month=Decimal(str(getattr(settings, "WORKING_DAYS_PER_MONTH", DEFAULT_WORKING_DAYS_PER_MONTH))),
        overtime_multiplier=Decimal(str(getattr(settings, "OVERTIME_MULTIPLIER", DEFAULT_OVERTIME_MULTIPLIER))),
    )
    return attendance, payroll
