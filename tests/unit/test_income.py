"""Unit tests for income detection"""

import pytest
from datetime import date
from fintrack_gateway.domain.income import detect_income
from fintrack_gateway.domain.models import Transaction, TransactionType


def _income(day: date, amount: float, status="completed", txn_type=TransactionType.INCOME) -> Transaction:
    return Transaction(
        transaction_id=f"inc_{day.isoformat()}",
        date=day,
        amount=amount,
        type=txn_type,
        category="salary",
        status=status,
    )


def test_detect_income_empty():
    profile = detect_income([])

    assert profile.avg_monthly_income == 0
    assert profile.income_stability == 0
    assert profile.is_variable is True
    assert profile.last_income_date is None


def test_detect_income_steady_salary():
    profile = detect_income([
        _income(date(2025, 1, 1), 2000),
        _income(date(2025, 2, 1), 2000),
        _income(date(2025, 3, 1), 2000),
    ])

    assert profile.avg_monthly_income == 2000
    assert profile.income_stability == 1
    assert profile.is_variable is False
    assert profile.last_income_date == "2025-03-01"


def test_detect_income_variable():
    """1000 and 3000 have mean 2000 and stddev 1000, so stability 0.5"""
    profile = detect_income([
        _income(date(2025, 1, 10), 1000),
        _income(date(2025, 2, 10), 3000),
    ])

    assert profile.avg_monthly_income == 2000
    assert profile.income_stability == pytest.approx(0.5)
    assert profile.is_variable is True


def test_detect_income_sums_within_month():
    profile = detect_income([
        _income(date(2025, 1, 1), 1500),
        _income(date(2025, 1, 15), 500),
        _income(date(2025, 2, 1), 2000),
    ])

    assert profile.avg_monthly_income == 2000
    assert profile.income_stability == 1


def test_detect_income_single_month_is_stable():
    profile = detect_income([_income(date(2025, 4, 30), 750)])

    assert profile.income_stability == 1
    assert profile.is_variable is False


def test_detect_income_ignores_pending_and_non_income():
    profile = detect_income([
        _income(date(2025, 1, 1), 2000),
        _income(date(2025, 2, 1), 9000, status="pending"),
        _income(date(2025, 3, 1), 9000, txn_type=TransactionType.EXPENSE),
    ])

    assert profile.avg_monthly_income == 2000
    assert profile.last_income_date == "2025-01-01"


def test_detect_income_missing_status_counts_as_completed():
    profile = detect_income([_income(date(2025, 1, 1), 1200, status=None)])

    assert profile.avg_monthly_income == 1200


def test_detect_income_stability_floored_at_zero():
    profile = detect_income([
        _income(date(2025, 1, 1), 100),
        _income(date(2025, 2, 1), 100),
        _income(date(2025, 3, 1), 100),
        _income(date(2025, 4, 1), 10_000),
    ])

    assert 0 <= profile.income_stability < 0.7
    assert profile.is_variable is True
