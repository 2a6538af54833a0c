"""POST /v1/savings-goals/progress - savings goal tracking"""

import time
import logging
from datetime import date
from fastapi import APIRouter, HTTPException, Request

from fintrack_gateway.api.v1.schemas import (
    SavingsGoalProgressSchema,
    SavingsGoalsRequest,
    SavingsGoalsResponse,
)
from fintrack_gateway.api.dependencies import get_request_id
from fintrack_gateway.domain.savings_goals import calculate_goal_progress
from fintrack_gateway.infrastructure.observability.logging import log_calculation
from fintrack_gateway.infrastructure.observability.metrics import calculation_counter

router = APIRouter()


@router.post("/savings-goals/progress", response_model=SavingsGoalsResponse)
def get_savings_goals_progress(request_body: SavingsGoalsRequest, request: Request):
    """
    Progress, required monthly contribution and on-track status per goal.

    monthly_savings, when given, is the saving rate observed from
    transactions and must also cover each goal's required amount.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    today = request_body.today or date.today()

    try:
        progress = [
            calculate_goal_progress(goal.to_domain(), request_body.monthly_savings, today)
            for goal in request_body.goals
        ]
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    calculation_counter.labels(calculation="savings_goals").inc()
    log_calculation(request_id, "savings_goals", (time.time() - start_time) * 1000, goal_count=len(progress))

    return SavingsGoalsResponse(
        goals=[
            SavingsGoalProgressSchema(
                name=p.goal.name,
                target_amount=p.goal.target_amount,
                current_amount=p.goal.current_amount,
                target_date=p.goal.target_date,
                monthly_contribution=p.goal.monthly_contribution,
                percentage_complete=round(p.percentage_complete, 2),
                on_track=p.on_track,
                required_monthly=round(p.required_monthly, 2),
                projected_completion_date=p.projected_completion_date,
                months_remaining=p.months_remaining,
            )
            for p in progress
        ]
    )
