"""Income detection and stability profiling"""

import math
from collections import defaultdict
from typing import Dict, Sequence

from fintrack_gateway.domain.analytics import is_completed
from fintrack_gateway.domain.models import IncomeProfile, Transaction, TransactionType
from fintrack_gateway.utils.date_utils import month_key, to_datetime

VARIABLE_INCOME_THRESHOLD = 0.7


def detect_income(transactions: Sequence[Transaction]) -> IncomeProfile:
    """
    Profile monthly income from completed income transactions.

    Stability is 1 - coefficient of variation (population stddev / mean) of
    monthly totals, floored at 0. A single month of data cannot show
    variability and is treated as fully stable. Income is variable when
    stability is below 0.7.
    """
    income_txns = [
        t for t in transactions
        if t.type == TransactionType.INCOME and is_completed(t)
    ]

    if not income_txns:
        return IncomeProfile(
            avg_monthly_income=0.0,
            income_stability=0.0,
            is_variable=True,
            last_income_date=None,
        )

    monthly_totals: Dict[str, float] = defaultdict(float)
    for txn in income_txns:
        monthly_totals[month_key(txn.date)] += txn.amount

    totals = list(monthly_totals.values())
    avg_monthly_income = sum(totals) / len(totals)

    if len(totals) == 1:
        income_stability = 1.0
    elif avg_monthly_income > 0:
        variance = sum((v - avg_monthly_income) ** 2 for v in totals) / len(totals)
        cv = math.sqrt(variance) / avg_monthly_income
        income_stability = max(0.0, 1 - cv)
    else:
        income_stability = 0.0

    latest = max(income_txns, key=lambda t: to_datetime(t.date))

    return IncomeProfile(
        avg_monthly_income=avg_monthly_income,
        income_stability=income_stability,
        is_variable=income_stability < VARIABLE_INCOME_THRESHOLD,
        last_income_date=latest.date.isoformat(),
    )
