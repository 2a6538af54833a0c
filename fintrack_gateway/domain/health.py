"""Financial health scoring - emergency fund, expense velocity, freedom score, net worth timeline"""

from typing import Dict, List, Sequence, Tuple

from fintrack_gateway.domain.models import (
    ExpenseVelocity,
    FinancialFreedomScore,
    HealthScoreBreakdown,
    MonthlyTrend,
    NetWorthPoint,
    TrendDirection,
)

VELOCITY_WINDOW_MONTHS = 6
TREND_THRESHOLD_PERCENT = 5
MAX_BUCKET_SCORE = 25

# (exclusive lower bound, points), checked top-down
SAVINGS_RATE_STEPS: Tuple[Tuple[float, int], ...] = ((30, 25), (20, 20), (10, 15), (0, 10))
EMERGENCY_FUND_STEPS: Tuple[Tuple[float, int], ...] = ((6, 25), (3, 20), (1, 10))
INVESTMENT_RATE_STEPS: Tuple[Tuple[float, int], ...] = ((20, 25), (15, 20), (10, 15), (5, 10), (0, 5))


def _step_score(value: float, steps: Sequence[Tuple[float, int]]) -> int:
    for threshold, points in steps:
        if value > threshold:
            return points
    return 0


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def calculate_emergency_fund_ratio(balance: float, avg_monthly_expense: float) -> float:
    """Months of expenses the balance covers (0 when there are no expenses)"""
    if avg_monthly_expense <= 0:
        return 0.0
    return balance / avg_monthly_expense


def calculate_expense_velocity(monthly_trends: Sequence[MonthlyTrend]) -> ExpenseVelocity:
    """
    Compare the newer half of the last six months of expenses against the older half.

    Trends must already be in chronological order. With an odd count the
    newer half gets the extra month. A change beyond +/-5% is a trend.
    """
    recent = list(monthly_trends)[-VELOCITY_WINDOW_MONTHS:]

    if len(recent) < 2:
        return ExpenseVelocity(
            current_monthly_avg=recent[0].expenses if recent else 0.0,
            previous_monthly_avg=0.0,
            change_percent=0.0,
            trend=TrendDirection.STABLE,
        )

    midpoint = len(recent) // 2
    previous_avg = _mean([m.expenses for m in recent[:midpoint]])
    current_avg = _mean([m.expenses for m in recent[midpoint:]])

    change_percent = (current_avg - previous_avg) / previous_avg * 100 if previous_avg > 0 else 0.0

    if change_percent > TREND_THRESHOLD_PERCENT:
        trend = TrendDirection.INCREASING
    elif change_percent < -TREND_THRESHOLD_PERCENT:
        trend = TrendDirection.DECREASING
    else:
        trend = TrendDirection.STABLE

    return ExpenseVelocity(
        current_monthly_avg=current_avg,
        previous_monthly_avg=previous_avg,
        change_percent=change_percent,
        trend=trend,
    )


def calculate_financial_freedom_score(
    savings_rate: float,
    emergency_fund_months: float,
    nwi_adherence: float,
    investment_rate: float,
) -> FinancialFreedomScore:
    """
    Composite 0-100 score from four buckets worth up to 25 points each.

    - savings_rate (%):        >30: 25, >20: 20, >10: 15, >0: 10
    - emergency_fund_months:   >6: 25,  >3: 20,  >1: 10
    - nwi_adherence (0-100):   linear, adherence / 4
    - investment_rate (%):     >20: 25, >15: 20, >10: 15, >5: 10, >0: 5

    Breakpoints are exclusive; anything at or below the last one scores 0.
    """
    breakdown = HealthScoreBreakdown(
        savings_rate=_step_score(savings_rate, SAVINGS_RATE_STEPS),
        emergency_fund=_step_score(emergency_fund_months, EMERGENCY_FUND_STEPS),
        nwi_adherence=min(MAX_BUCKET_SCORE, max(0, nwi_adherence / 4)),
        investment_rate=_step_score(investment_rate, INVESTMENT_RATE_STEPS),
    )

    score = (
        breakdown.savings_rate
        + breakdown.emergency_fund
        + breakdown.nwi_adherence
        + breakdown.investment_rate
    )

    return FinancialFreedomScore(score=score, breakdown=breakdown)


def calculate_net_worth_timeline(
    monthly_balances: Sequence[Tuple[str, float]],
    investment_values: Sequence[Tuple[str, float]],
) -> List[NetWorthPoint]:
    """
    Merge per-month bank balances and investment values into one timeline.

    Inputs are (YYYY-MM, value) pairs. Every month present in either input
    appears once; a month missing from one side counts as 0 there (no
    interpolation or carry-forward). Later duplicates of a month win.
    """
    balance_by_month: Dict[str, float] = dict(monthly_balances)
    investment_by_month: Dict[str, float] = dict(investment_values)

    timeline = []
    for month in sorted(balance_by_month.keys() | investment_by_month.keys()):
        bank_balance = balance_by_month.get(month, 0)
        investment_value = investment_by_month.get(month, 0)
        timeline.append(
            NetWorthPoint(
                month=month,
                bank_balance=bank_balance,
                investment_value=investment_value,
                total_net_worth=bank_balance + investment_value,
            )
        )

    return timeline
