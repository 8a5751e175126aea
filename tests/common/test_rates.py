from datetime import date, datetime
from decimal import Decimal

import pytest

from src.hr_system.hr_system.common.datetime_utils import month_range, parse_iso_date, quarter_range
from src.hr_system.hr_system.common.rates import elapsed_hours, hourly_rate, round_money, safe_average
from src.hr_system.hr_system.core.exceptions import InvalidInterval, ValidationError


def test_hourly_rate_uses_176_hour_month():
    assert hourly_rate(Decimal("17600000")) == Decimal("100000")
    assert hourly_rate(Decimal("17600000"), hours_per_day=8, days_per_month=20) == Decimal("110000")


def test_elapsed_hours_partial():
    assert elapsed_hours(datetime(2026, 1, 1, 8, 0), datetime(2026, 1, 1, 9, 45)) == Decimal("1.75")


def test_elapsed_hours_rejects_reversed_interval():
    with pytest.raises(InvalidInterval):
        elapsed_hours(datetime(2026, 1, 1, 9, 0), datetime(2026, 1, 1, 8, 0))


def test_round_money_half_up():
    assert round_money(Decimal("0.005")) == Decimal("0.01")
    assert round_money(Decimal("2.675")) == Decimal("2.68")
    assert str(round_money(10)) == "10.00"


def test_safe_average_of_empty_population_is_zero():
    assert safe_average(Decimal("100"), 0) == Decimal(0)
    assert safe_average(Decimal("100"), 4) == Decimal(25)


def test_month_and_quarter_ranges():
    assert month_range(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert quarter_range(2026, 4) == (date(2026, 10, 1), date(2026, 12, 31))

    with pytest.raises(ValidationError):
        month_range(2026, 13)
    with pytest.raises(ValidationError):
        quarter_range(2026, 0)


def test_parse_iso_date_rejects_garbage():
    assert parse_iso_date(" 2026-03-10 ") == date(2026, 3, 10)
    with pytest.raises(ValidationError):
        parse_iso_date("10/03/2026")
