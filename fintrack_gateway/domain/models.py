"""Domain models - pure Python dataclasses representing financial records and derived metrics"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Union


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"
    INVESTMENT = "investment"
    REFUND = "refund"


class TrendDirection(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


@dataclass
class CashFlow:
    """Dated amount: negative = money invested, positive = money returned or current value"""

    date: Union[date, datetime]
    amount: float


@dataclass
class Transaction:
    """Bank or ledger transaction supplied by the caller"""

    transaction_id: str
    date: Union[date, datetime]
    amount: float
    type: TransactionType
    category: str = "other"
    status: Optional[str] = "completed"
    balance: Optional[float] = None  # running account balance after this transaction
    description: str = ""
    merchant: str = ""


@dataclass
class MonthlyTrend:
    """Income and expense totals for one YYYY-MM month"""

    month: str
    income: float
    expenses: float
    savings: float = 0.0
    savings_rate: float = 0.0
    transaction_count: int = 0


@dataclass
class AccountSummary:
    current_balance: float
    starting_balance: float
    opening_balance: float
    net_change: float


@dataclass
class InvestmentPosition:
    """Snapshot of a holding used for forward projection"""

    name: str
    current_value: float
    monthly_contribution: float = 0.0
    expected_annual_return_percent: float = 12.0


@dataclass
class InvestmentProjection:
    name: str
    current: float
    projected_3y: float
    projected_5y: float
    projected_10y: float


@dataclass
class NetWorthGrowthPoint:
    year: int
    invested: float
    projected: float


@dataclass
class PortfolioProjectionPoint:
    year: int
    stocks: float
    mutual_funds: float
    sips: float
    total: float


@dataclass
class EmergencyFundProgress:
    """Coverage today and months of saving needed to reach the target (-1 = unreachable)"""

    current_months: float
    target_months: float
    months_to_target: int


@dataclass
class FIREProjectionPoint:
    year: int
    net_worth: float
    fire_target: float


@dataclass
class FIREResult:
    """Financial independence feasibility for a savings profile"""

    fire_number: float
    annual_expenses: float
    current_net_worth: float
    progress_percent: float
    years_to_fire: int  # 0 if already met, 100 if not reachable
    monthly_required: float
    projection_series: List[FIREProjectionPoint] = field(default_factory=list)


@dataclass
class NetWorthPoint:
    month: str
    bank_balance: float
    investment_value: float
    total_net_worth: float


@dataclass
class IncomeProfile:
    avg_monthly_income: float
    income_stability: float  # 1 - coefficient of variation, floored at 0
    is_variable: bool
    last_income_date: Optional[str]


@dataclass
class ExpenseVelocity:
    current_monthly_avg: float
    previous_monthly_avg: float
    change_percent: float
    trend: TrendDirection


@dataclass
class HealthScoreBreakdown:
    """Four sub-scores, each capped at 25"""

    savings_rate: float
    emergency_fund: float
    nwi_adherence: float
    investment_rate: float


@dataclass
class FinancialFreedomScore:
    score: float
    breakdown: HealthScoreBreakdown


@dataclass
class NWIBucket:
    percentage: float
    categories: List[str] = field(default_factory=list)


@dataclass
class NWITarget:
    """User-defined Needs/Wants/Investments allocation"""

    needs: NWIBucket
    wants: NWIBucket
    investments: NWIBucket


@dataclass
class SavingsGoal:
    name: str
    target_amount: float
    current_amount: float
    target_date: date
    monthly_contribution: float = 0.0


@dataclass
class SavingsGoalProgress:
    goal: SavingsGoal
    percentage_complete: float
    on_track: bool
    required_monthly: float
    projected_completion_date: Optional[str]
    months_remaining: int
