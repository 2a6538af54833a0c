"""Unit tests for date utilities"""

from datetime import date, datetime, timedelta, timezone
from fintrack_gateway.utils.date_utils import (
    end_of_month,
    month_key,
    months_between,
    to_datetime,
    year_fraction,
)


def test_to_datetime_promotes_dates():
    assert to_datetime(date(2025, 3, 9)) == datetime(2025, 3, 9)


def test_to_datetime_normalizes_aware_to_utc():
    aware = datetime(2025, 3, 9, 5, 30, tzinfo=timezone(timedelta(hours=5, minutes=30)))

    assert to_datetime(aware) == datetime(2025, 3, 9, 0, 0)


def test_year_fraction():
    start = datetime(2024, 1, 1)

    assert year_fraction(start, start + timedelta(days=365.25)) == 1.0
    assert year_fraction(start, start) == 0
    assert year_fraction(start + timedelta(days=730.5), start) == -2.0


def test_month_key_is_zero_padded():
    assert month_key(date(2025, 3, 31)) == "2025-03"
    assert month_key(datetime(999, 11, 1)) == "0999-11"


def test_end_of_month():
    assert end_of_month("2024-02") == datetime(2024, 2, 29, 23, 59, 59)
    assert end_of_month("2025-12") == datetime(2025, 12, 31, 23, 59, 59)


def test_months_between_ignores_day():
    assert months_between(date(2025, 1, 31), date(2025, 2, 1)) == 1
    assert months_between(date(2025, 3, 15), date(2024, 12, 15)) == -3
