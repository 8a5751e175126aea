"""Time and rate arithmetic shared by the ledger and the payroll aggregator.

All values are `Decimal`. Rounding happens only through `round_money` /
`round_hours`, at the point a figure is stored or presented.
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from ..core.constants import DEFAULT_STANDARD_DAILY_HOURS, DEFAULT_WORKING_DAYS_PER_MONTH
from ..core.exceptions import InvalidInterval

Number = Union[Decimal, int, float, str]

TWO_PLACES = Decimal("0.01")
SECONDS_PER_HOUR = Decimal(3600)


def to_decimal(value: Number | None) -> Decimal:
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    # str() first so floats keep their shortest repr instead of binary noise
    return Decimal(str(value))


def hourly_rate(
    base_salary: Number,
    *,
    hours_per_day: Number = DEFAULT_STANDARD_DAILY_HOURS,
    days_per_month: Number = DEFAULT_WORKING_DAYS_PER_MONTH,
) -> Decimal:
    """Monthly salary spread over a fixed 8h x 22 day month (176 hours).

    The divisor is a convention, not derived from the calendar.
    """
    return to_decimal(base_salary) / (to_decimal(hours_per_day) * to_decimal(days_per_month))


def elapsed_hours(start: datetime, end: datetime) -> Decimal:
    if end < start:
        raise InvalidInterval(f"Khoảng thời gian không hợp lệ: {end.isoformat()} < {start.isoformat()}")
    seconds = (end - start).total_seconds()
    return to_decimal(seconds) / SECONDS_PER_HOUR


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, floored; negative when end is earlier."""
    return int((end - start).total_seconds() // 60)


def round_money(value: Number) -> Decimal:
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


round_hours = round_money


def safe_average(total: Number, count: int) -> Decimal:
    """total / count, or 0 for an empty population."""
    if not count:
        return Decimal(0)
    return to_decimal(total) / Decimal(count)
