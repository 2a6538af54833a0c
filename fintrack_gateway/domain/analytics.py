"""Transaction aggregation feeding the analytics engine - totals, monthly trends, balances, NWI adherence"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from fintrack_gateway.domain.models import (
    AccountSummary,
    MonthlyTrend,
    NWITarget,
    Transaction,
    TransactionType,
)
from fintrack_gateway.utils.date_utils import DateLike, end_of_month, month_key, to_datetime

COMPLETED_STATUS = "completed"
DEFAULT_NWI_ADHERENCE = 50.0
# Average deviation of 33.3 points from target scores 0
NWI_DEVIATION_PENALTY = 3


def is_completed(txn: Transaction) -> bool:
    """Transactions with no status are treated as completed"""
    return not txn.status or txn.status == COMPLETED_STATUS


def completed_transactions(transactions: Sequence[Transaction]) -> List[Transaction]:
    return [t for t in transactions if is_completed(t)]


def calculate_total_by_type(transactions: Sequence[Transaction], txn_type: TransactionType) -> float:
    return sum(t.amount for t in transactions if t.type == txn_type)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def calculate_savings_rate(total_income: float, total_expenses: float) -> float:
    """Share of income not spent, in percent (0 without income)"""
    if total_income <= 0:
        return 0.0
    return (total_income - total_expenses) / total_income * 100


def calculate_investment_rate(total_income: float, total_investments: float) -> float:
    if total_income <= 0:
        return 0.0
    return total_investments / total_income * 100


def calculate_monthly_trends(transactions: Sequence[Transaction]) -> List[MonthlyTrend]:
    """Income and expense totals per month over completed transactions, oldest first"""
    by_month: Dict[str, List[Transaction]] = defaultdict(list)
    for txn in completed_transactions(transactions):
        by_month[month_key(txn.date)].append(txn)

    trends = []
    for month in sorted(by_month):
        txns = by_month[month]
        income = calculate_total_by_type(txns, TransactionType.INCOME)
        expenses = calculate_total_by_type(txns, TransactionType.EXPENSE)
        savings = income - expenses
        trends.append(
            MonthlyTrend(
                month=month,
                income=income,
                expenses=expenses,
                savings=savings,
                savings_rate=_clamp(calculate_savings_rate(income, expenses), -100, 100),
                transaction_count=len(txns),
            )
        )

    return trends


def calculate_account_summary(transactions: Sequence[Transaction]) -> AccountSummary:
    """
    Balances reported on the first and last completed transactions.

    The opening balance reverses the first transaction: income and refunds
    raised the balance, expenses and investments lowered it. Transfers are
    ambiguous and left as-is.
    """
    completed = sorted(completed_transactions(transactions), key=lambda t: to_datetime(t.date))
    if not completed:
        return AccountSummary(current_balance=0.0, starting_balance=0.0, opening_balance=0.0, net_change=0.0)

    first, last = completed[0], completed[-1]
    starting_balance = first.balance or 0.0
    current_balance = last.balance or 0.0

    opening_balance = starting_balance
    if first.type in (TransactionType.INCOME, TransactionType.REFUND):
        opening_balance = starting_balance - first.amount
    elif first.type in (TransactionType.EXPENSE, TransactionType.INVESTMENT):
        opening_balance = starting_balance + first.amount

    return AccountSummary(
        current_balance=current_balance,
        starting_balance=starting_balance,
        opening_balance=opening_balance,
        net_change=current_balance - opening_balance,
    )


def get_balance_at_date(transactions: Sequence[Transaction], at: DateLike) -> float:
    """Balance on the latest completed transaction at or before `at` that reports one"""
    cutoff = to_datetime(at)
    candidates = [
        t for t in completed_transactions(transactions)
        if t.balance is not None and to_datetime(t.date) <= cutoff
    ]
    if not candidates:
        return 0.0
    return max(candidates, key=lambda t: to_datetime(t.date)).balance


def calculate_nwi_adherence(
    transactions: Sequence[Transaction],
    target: Optional[NWITarget],
) -> float:
    """
    How closely actual spending follows the Needs/Wants/Investments target, 0-100.

    Completed expense and investment amounts are bucketed by category;
    categories in no bucket count as wants. Adherence is
    100 - 3 x (mean absolute deviation of actual vs target percentages),
    clamped to 0-100. Returns the neutral default of 50 when there is no
    target, or when the completed transactions hold no income or no spending.
    """
    if target is None:
        return DEFAULT_NWI_ADHERENCE

    completed = completed_transactions(transactions)
    if calculate_total_by_type(completed, TransactionType.INCOME) <= 0:
        return DEFAULT_NWI_ADHERENCE

    needs = wants = investments = 0.0
    for txn in completed:
        if txn.type not in (TransactionType.EXPENSE, TransactionType.INVESTMENT):
            continue
        if txn.category in target.needs.categories:
            needs += txn.amount
        elif txn.category in target.wants.categories:
            wants += txn.amount
        elif txn.category in target.investments.categories:
            investments += txn.amount
        else:
            wants += txn.amount

    total = needs + wants + investments
    if total <= 0:
        return DEFAULT_NWI_ADHERENCE

    deviation = (
        abs(target.needs.percentage - needs / total * 100)
        + abs(target.wants.percentage - wants / total * 100)
        + abs(target.investments.percentage - investments / total * 100)
    ) / 3

    return _clamp(100 - deviation * NWI_DEVIATION_PENALTY, 0, 100)


def month_end_balances(transactions: Sequence[Transaction], months: Sequence[str]) -> List[tuple[str, float]]:
    """(month, closing balance) for each YYYY-MM key"""
    return [(month, get_balance_at_date(transactions, end_of_month(month))) for month in months]
