"""POST /v1/projections - growth projections and FIRE calculator"""

import time
import logging
from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException, Request

from fintrack_gateway.api.v1.schemas import (
    FIRERequest,
    FIREResponse,
    ProjectionsRequest,
    ProjectionsResponse,
)
from fintrack_gateway.api.dependencies import get_request_id, get_settings
from fintrack_gateway.config import Settings
from fintrack_gateway.domain.analytics import (
    calculate_account_summary,
    calculate_monthly_trends,
    calculate_total_by_type,
    completed_transactions,
)
from fintrack_gateway.domain.exceptions import DomainException
from fintrack_gateway.domain.models import InvestmentPosition, TransactionType
from fintrack_gateway.domain.projections import (
    project_emergency_fund_progress,
    project_investment_growth,
    project_net_worth_growth,
    project_portfolio_growth,
)
from fintrack_gateway.domain.retirement import calculate_fire
from fintrack_gateway.infrastructure.observability.logging import log_calculation
from fintrack_gateway.infrastructure.observability.metrics import calculation_counter, record_fire

router = APIRouter()


@router.post("/projections", response_model=ProjectionsResponse)
def create_projections(
    request_body: ProjectionsRequest,
    request: Request,
    settings: Settings = Depends(get_settings),
):
    """
    Growth projections from transaction history and current holdings.

    Flow:
    1. Derive monthly savings and average monthly expense from completed transactions
    2. Net worth = latest reported bank balance + value of all holdings
    3. Project SIPs, emergency fund, net worth, FIRE and the portfolio by asset class

    Negative monthly savings are treated as zero for every projection.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        transactions = [t.to_domain() for t in request_body.transactions]
        completed = completed_transactions(transactions)

        # 1. Savings profile
        total_income = calculate_total_by_type(completed, TransactionType.INCOME)
        total_expenses = calculate_total_by_type(completed, TransactionType.EXPENSE)
        monthly_trends = calculate_monthly_trends(completed)
        num_months = max(len(monthly_trends), 1)

        monthly_savings = max((total_income - total_expenses) / num_months, 0.0)
        avg_monthly_expense = (
            sum(m.expenses for m in monthly_trends) / len(monthly_trends) if monthly_trends else 0.0
        )

        # 2. Current net worth
        bank_balance = calculate_account_summary(transactions).current_balance
        stock_value = sum(s.current_value for s in request_body.stocks)
        mutual_fund_value = sum(mf.current_value for mf in request_body.mutual_funds)
        sip_value = sum(s.current_value for s in request_body.sips)
        current_net_worth = bank_balance + stock_value + mutual_fund_value + sip_value

        # 3. Projections
        sip_positions = [
            InvestmentPosition(
                name=sip.name,
                current_value=sip.current_value,
                monthly_contribution=sip.monthly_amount,
                expected_annual_return_percent=(
                    sip.expected_annual_return
                    if sip.expected_annual_return is not None
                    else settings.default_sip_return
                ),
            )
            for sip in request_body.sips
        ]
        sip_projections = project_investment_growth(sip_positions)

        emergency_fund_progress = project_emergency_fund_progress(
            bank_balance,
            monthly_savings,
            settings.emergency_fund_target_months,
            avg_monthly_expense,
        )

        net_worth_projection = project_net_worth_growth(
            current_net_worth,
            monthly_savings,
            settings.default_portfolio_return,
            settings.net_worth_projection_years,
        )

        fire = calculate_fire(
            avg_monthly_expense * 12,
            current_net_worth,
            monthly_savings,
            settings.default_portfolio_return,
        )

        portfolio_projection = project_portfolio_growth(
            stock_value,
            mutual_fund_value,
            sip_value,
            sum(s.monthly_amount for s in request_body.sips),
            years=settings.portfolio_projection_years,
            stock_return=settings.default_stock_return,
            mutual_fund_return=settings.default_mutual_fund_return,
            sip_return=settings.default_sip_return,
        )

    except DomainException as e:
        logging.warning(f"Invalid projection input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    calculation_counter.labels(calculation="projections").inc()
    record_fire(fire.years_to_fire)
    log_calculation(
        request_id,
        "projections",
        (time.time() - start_time) * 1000,
        years_to_fire=fire.years_to_fire,
    )

    return ProjectionsResponse(
        sip_projections=[asdict(p) for p in sip_projections],
        emergency_fund_progress=asdict(emergency_fund_progress),
        net_worth_projection=[asdict(p) for p in net_worth_projection],
        fire=asdict(fire),
        portfolio_projection=[asdict(p) for p in portfolio_projection],
    )


@router.post("/projections/fire", response_model=FIREResponse)
def create_fire_projection(
    request_body: FIRERequest,
    request: Request,
    settings: Settings = Depends(get_settings),
):
    """
    Standalone FIRE calculation for what-if planning.

    Uses the service's default portfolio return when none is given.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    expected_return = request_body.expected_return_percent
    if expected_return is None:
        expected_return = settings.default_portfolio_return

    try:
        fire = calculate_fire(
            request_body.annual_expenses,
            request_body.current_net_worth,
            request_body.monthly_savings,
            expected_return,
        )
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_fire(fire.years_to_fire)
    log_calculation(
        request_id,
        "fire",
        (time.time() - start_time) * 1000,
        years_to_fire=fire.years_to_fire,
    )

    return FIREResponse(**asdict(fire))
