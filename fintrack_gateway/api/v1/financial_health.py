"""POST /v1/financial-health - composite financial health metrics"""

import time
import logging
from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException, Request

from fintrack_gateway.api.v1.schemas import FinancialHealthRequest, FinancialHealthResponse
from fintrack_gateway.api.dependencies import get_request_id, get_settings
from fintrack_gateway.config import Settings
from fintrack_gateway.domain.analytics import (
    calculate_account_summary,
    calculate_investment_rate,
    calculate_monthly_trends,
    calculate_nwi_adherence,
    calculate_savings_rate,
    calculate_total_by_type,
    completed_transactions,
    month_end_balances,
)
from fintrack_gateway.domain.health import (
    calculate_emergency_fund_ratio,
    calculate_expense_velocity,
    calculate_financial_freedom_score,
    calculate_net_worth_timeline,
)
from fintrack_gateway.domain.income import detect_income
from fintrack_gateway.domain.models import TransactionType
from fintrack_gateway.infrastructure.observability.logging import log_calculation
from fintrack_gateway.infrastructure.observability.metrics import record_financial_health

router = APIRouter()


@router.post("/financial-health", response_model=FinancialHealthResponse)
def get_financial_health(
    request_body: FinancialHealthRequest,
    request: Request,
    settings: Settings = Depends(get_settings),
):
    """
    Emergency fund coverage, expense velocity, income stability, the
    0-100 financial freedom score and a monthly net worth timeline.

    Historical holding values are not tracked, so every month of the
    timeline carries the current investment value.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        transactions = [t.to_domain() for t in request_body.transactions]
        completed = completed_transactions(transactions)

        account_summary = calculate_account_summary(transactions)
        monthly_trends = calculate_monthly_trends(transactions)
        avg_monthly_expense = (
            sum(m.expenses for m in monthly_trends) / len(monthly_trends) if monthly_trends else 0.0
        )

        emergency_fund_months = calculate_emergency_fund_ratio(
            account_summary.current_balance, avg_monthly_expense
        )
        expense_velocity = calculate_expense_velocity(monthly_trends)
        income_profile = detect_income(transactions)

        total_income = calculate_total_by_type(completed, TransactionType.INCOME)
        total_expenses = calculate_total_by_type(completed, TransactionType.EXPENSE)
        total_investments = calculate_total_by_type(completed, TransactionType.INVESTMENT)

        nwi_target = request_body.nwi_target.to_domain() if request_body.nwi_target else None

        freedom_score = calculate_financial_freedom_score(
            savings_rate=calculate_savings_rate(total_income, total_expenses),
            emergency_fund_months=emergency_fund_months,
            nwi_adherence=calculate_nwi_adherence(transactions, nwi_target),
            investment_rate=calculate_investment_rate(total_income, total_investments),
        )

        months = [m.month for m in monthly_trends]
        net_worth_timeline = calculate_net_worth_timeline(
            month_end_balances(transactions, months),
            [(month, request_body.investment_value) for month in months],
        )

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_financial_health(freedom_score.score)
    log_calculation(
        request_id,
        "financial_health",
        (time.time() - start_time) * 1000,
        score=freedom_score.score,
        transaction_count=len(transactions),
    )

    return FinancialHealthResponse(
        emergency_fund_months=emergency_fund_months,
        emergency_fund_target=settings.emergency_fund_target_months,
        expense_velocity=asdict(expense_velocity),
        financial_freedom_score=freedom_score.score,
        score_breakdown=asdict(freedom_score.breakdown),
        net_worth_timeline=[asdict(p) for p in net_worth_timeline],
        income_profile=asdict(income_profile),
    )
