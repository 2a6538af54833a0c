"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date
from typing import List, Optional

from fintrack_gateway.domain.models import (
    CashFlow,
    NWIBucket,
    NWITarget,
    SavingsGoal,
    Transaction,
    TransactionType,
    TrendDirection,
)


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class CashFlowSchema(BaseModel):
    """Dated amount: negative for money invested, positive for money returned"""

    date: date
    amount: float

    def to_domain(self) -> CashFlow:
        return CashFlow(date=self.date, amount=self.amount)


class TransactionSchema(BaseModel):
    """Transaction as supplied by the persistence layer"""

    transaction_id: str = ""
    date: date
    amount: float = Field(..., ge=0, description="Absolute amount; direction comes from type")
    type: TransactionType = TransactionType.EXPENSE
    category: str = "other"
    status: Optional[str] = "completed"
    balance: Optional[float] = Field(None, description="Account balance after this transaction")
    description: str = ""
    merchant: str = ""

    def to_domain(self) -> Transaction:
        return Transaction(
            transaction_id=self.transaction_id,
            date=self.date,
            amount=self.amount,
            type=self.type,
            category=self.category,
            status=self.status,
            balance=self.balance,
            description=self.description,
            merchant=self.merchant,
        )


class SIPSchema(BaseModel):
    name: str = "Unnamed SIP"
    monthly_amount: float = Field(0.0, ge=0)
    current_value: float = Field(0.0, ge=0)
    expected_annual_return: Optional[float] = Field(None, ge=-100, description="Percent; service default when omitted")


class StockSchema(BaseModel):
    symbol: str = ""
    current_value: float = Field(0.0, ge=0)


class MutualFundSchema(BaseModel):
    fund_name: str = "Unknown Fund"
    current_value: float = Field(0.0, ge=0)


class NWIBucketSchema(BaseModel):
    percentage: float = Field(..., ge=0, le=100)
    categories: List[str] = Field(default_factory=list)


class NWITargetSchema(BaseModel):
    """Needs/Wants/Investments allocation target"""

    needs: NWIBucketSchema
    wants: NWIBucketSchema
    investments: NWIBucketSchema

    def to_domain(self) -> NWITarget:
        return NWITarget(
            needs=NWIBucket(self.needs.percentage, list(self.needs.categories)),
            wants=NWIBucket(self.wants.percentage, list(self.wants.categories)),
            investments=NWIBucket(self.investments.percentage, list(self.investments.categories)),
        )


class SavingsGoalSchema(BaseModel):
    name: str = Field(..., min_length=1)
    target_amount: float = Field(..., gt=0)
    current_amount: float = Field(0.0, ge=0)
    target_date: date
    monthly_contribution: float = Field(0.0, ge=0)

    def to_domain(self) -> SavingsGoal:
        return SavingsGoal(
            name=self.name,
            target_amount=self.target_amount,
            current_amount=self.current_amount,
            target_date=self.target_date,
            monthly_contribution=self.monthly_contribution,
        )


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class XIRRRequest(BaseModel):
    """Request body for POST /v1/returns/xirr"""

    cash_flows: List[CashFlowSchema]
    guess: float = Field(0.10, gt=-0.99, le=100)
    tolerance: float = Field(1e-7, gt=0)
    max_iterations: int = Field(100, ge=1, le=10_000)


class InvestmentReturnsRequest(BaseModel):
    """Request body for POST /v1/returns/investment"""

    investments: List[CashFlowSchema] = Field(..., description="Purchases; amounts are treated as outflows")
    current_value: float
    current_date: Optional[date] = None


class ProjectionsRequest(BaseModel):
    """Request body for POST /v1/projections"""

    transactions: List[TransactionSchema] = Field(default_factory=list)
    sips: List[SIPSchema] = Field(default_factory=list)
    stocks: List[StockSchema] = Field(default_factory=list)
    mutual_funds: List[MutualFundSchema] = Field(default_factory=list)


class FIRERequest(BaseModel):
    """Request body for POST /v1/projections/fire"""

    annual_expenses: float = Field(..., ge=0)
    current_net_worth: float
    monthly_savings: float = Field(0.0, ge=0)
    expected_return_percent: Optional[float] = Field(None, ge=-100)


class FinancialHealthRequest(BaseModel):
    """Request body for POST /v1/financial-health"""

    transactions: List[TransactionSchema] = Field(default_factory=list)
    investment_value: float = Field(0.0, ge=0, description="Current total value of all holdings")
    nwi_target: Optional[NWITargetSchema] = None


class SavingsGoalsRequest(BaseModel):
    """Request body for POST /v1/savings-goals/progress"""

    goals: List[SavingsGoalSchema]
    monthly_savings: Optional[float] = None
    today: Optional[date] = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class XIRRResponse(BaseModel):
    """Response for POST /v1/returns/xirr (null rates when unsolvable)"""

    xirr: Optional[float]
    xirr_percent: Optional[float]
    method: str


class InvestmentReturnsResponse(BaseModel):
    xirr_percent: Optional[float]
    cagr_percent: float
    total_invested: float
    absolute_return: float


class InvestmentProjectionSchema(BaseModel):
    name: str
    current: float
    projected_3y: float
    projected_5y: float
    projected_10y: float


class EmergencyFundProgressSchema(BaseModel):
    current_months: float
    target_months: float
    months_to_target: int


class NetWorthGrowthPointSchema(BaseModel):
    year: int
    invested: float
    projected: float


class FIREProjectionPointSchema(BaseModel):
    year: int
    net_worth: float
    fire_target: float


class FIREResponse(BaseModel):
    fire_number: float
    annual_expenses: float
    current_net_worth: float
    progress_percent: float
    years_to_fire: int
    monthly_required: float
    projection_series: List[FIREProjectionPointSchema]


class PortfolioProjectionPointSchema(BaseModel):
    year: int
    stocks: float
    mutual_funds: float
    sips: float
    total: float


class ProjectionsResponse(BaseModel):
    sip_projections: List[InvestmentProjectionSchema]
    emergency_fund_progress: EmergencyFundProgressSchema
    net_worth_projection: List[NetWorthGrowthPointSchema]
    fire: FIREResponse
    portfolio_projection: List[PortfolioProjectionPointSchema]


class ExpenseVelocitySchema(BaseModel):
    current_monthly_avg: float
    previous_monthly_avg: float
    change_percent: float
    trend: TrendDirection


class HealthScoreBreakdownSchema(BaseModel):
    savings_rate: float
    emergency_fund: float
    nwi_adherence: float
    investment_rate: float


class NetWorthPointSchema(BaseModel):
    month: str
    bank_balance: float
    investment_value: float
    total_net_worth: float


class IncomeProfileSchema(BaseModel):
    avg_monthly_income: float
    income_stability: float
    is_variable: bool
    last_income_date: Optional[str]


class FinancialHealthResponse(BaseModel):
    emergency_fund_months: float
    emergency_fund_target: int
    expense_velocity: ExpenseVelocitySchema
    financial_freedom_score: float
    score_breakdown: HealthScoreBreakdownSchema
    net_worth_timeline: List[NetWorthPointSchema]
    income_profile: IncomeProfileSchema


class SavingsGoalProgressSchema(BaseModel):
    name: str
    target_amount: float
    current_amount: float
    target_date: date
    monthly_contribution: float
    percentage_complete: float
    on_track: bool
    required_monthly: float
    projected_completion_date: Optional[str]
    months_remaining: int


class SavingsGoalsResponse(BaseModel):
    goals: List[SavingsGoalProgressSchema]
