from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, time, timedelta
from typing import Iterator

from ..core.exceptions import InvalidPeriod, ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Ngày không hợp lệ (YYYY-MM-DD): {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now()


def at_time(day: date, t: time) -> datetime:
    return datetime.combine(day, t)


def require_period(start: date, end: date) -> None:
    if start > end:
        raise InvalidPeriod(f"Kỳ không hợp lệ: {start.isoformat()} > {end.isoformat()}")


def iter_days(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def month_range(year: int, month: int) -> tuple[date, date]:
    if not 1 <= int(month) <= 12:
        raise ValidationError("Tháng không hợp lệ")
    last = monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last)


def quarter_range(year: int, quarter: int) -> tuple[date, date]:
    if not 1 <= int(quarter) <= 4:
        raise ValidationError("Quý không hợp lệ")
    first_month = (int(quarter) - 1) * 3 + 1
    start, _ = month_range(year, first_month)
    _, end = month_range(year, first_month + 2)
    return start, end
