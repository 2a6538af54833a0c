"""POST /v1/returns/* - annualized return endpoints (XIRR, CAGR)"""

import time
import logging
from datetime import date
from fastapi import APIRouter, HTTPException, Request

from fintrack_gateway.api.v1.schemas import (
    InvestmentReturnsRequest,
    InvestmentReturnsResponse,
    XIRRRequest,
    XIRRResponse,
)
from fintrack_gateway.api.dependencies import get_request_id
from fintrack_gateway.domain.cashflow import (
    calculate_investment_xirr,
    calculate_cagr,
    solve_xirr,
)
from fintrack_gateway.infrastructure.observability.logging import log_calculation
from fintrack_gateway.infrastructure.observability.metrics import calculation_counter, record_xirr_solve

router = APIRouter()


@router.post("/returns/xirr", response_model=XIRRResponse)
def compute_xirr(request_body: XIRRRequest, request: Request):
    """
    Annualized return of arbitrary dated cash flows.

    Unsolvable inputs (fewer than two flows, no sign change, no root)
    return null rates with method "unsolved" rather than an error.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        solution = solve_xirr(
            [cf.to_domain() for cf in request_body.cash_flows],
            guess=request_body.guess,
            tolerance=request_body.tolerance,
            max_iterations=request_body.max_iterations,
        )
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_xirr_solve(solution.method)
    log_calculation(
        request_id,
        "xirr",
        (time.time() - start_time) * 1000,
        method=solution.method,
        iterations=solution.iterations,
    )

    return XIRRResponse(
        xirr=solution.rate,
        xirr_percent=round(solution.rate * 100, 2) if solution.rate is not None else None,
        method=solution.method,
    )


@router.post("/returns/investment", response_model=InvestmentReturnsResponse)
def compute_investment_returns(request_body: InvestmentReturnsRequest, request: Request):
    """
    XIRR and CAGR of a purchase history valued today.

    CAGR runs from the earliest purchase on the total amount invested; it is
    the fallback figure when XIRR is null.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        investments = [inv.to_domain() for inv in request_body.investments]
        current_date = request_body.current_date or date.today()
        total_invested = sum(abs(inv.amount) for inv in investments)

        xirr_percent = calculate_investment_xirr(investments, request_body.current_value, current_date)

        cagr_percent = 0.0
        if investments:
            start_date = min(inv.date for inv in investments)
            cagr_percent = calculate_cagr(total_invested, request_body.current_value, start_date, current_date)

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    calculation_counter.labels(calculation="investment_returns").inc()
    log_calculation(request_id, "investment_returns", (time.time() - start_time) * 1000)

    return InvestmentReturnsResponse(
        xirr_percent=xirr_percent,
        cagr_percent=cagr_percent,
        total_invested=round(total_invested, 2),
        absolute_return=round(request_body.current_value - total_invested, 2),
    )
