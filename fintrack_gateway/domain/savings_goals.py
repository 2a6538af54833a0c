"""Savings goal progress: required contributions, projected completion, on-track status"""

import math
from datetime import date
from typing import Optional

from fintrack_gateway.domain.models import SavingsGoal, SavingsGoalProgress
from fintrack_gateway.utils.date_utils import add_months, months_between


def months_until(target_date: date, today: date) -> int:
    """Whole calendar months left until the target date (0 if it has passed)"""
    return max(0, months_between(today, target_date))


def calculate_required_monthly(goal: SavingsGoal, today: date) -> float:
    """
    Monthly contribution needed to hit the target by its date.

    When the target month has arrived or passed, the full remaining amount is due.
    """
    remaining = goal.target_amount - goal.current_amount
    if remaining <= 0:
        return 0.0

    months = months_until(goal.target_date, today)
    if months <= 0:
        return remaining

    return remaining / months


def project_goal_completion(goal: SavingsGoal, monthly_savings: float, today: date) -> Optional[str]:
    """ISO date the goal completes at this saving rate; None if already met or never reached"""
    if goal.current_amount >= goal.target_amount:
        return None
    if monthly_savings <= 0:
        return None

    months_needed = math.ceil((goal.target_amount - goal.current_amount) / monthly_savings)
    return add_months(today, months_needed).isoformat()


def calculate_goal_progress(
    goal: SavingsGoal,
    monthly_savings: Optional[float] = None,
    today: Optional[date] = None,
) -> SavingsGoalProgress:
    """
    Full progress snapshot for one goal.

    A goal is on track when its own planned contribution covers the required
    monthly amount; an externally observed savings figure, when supplied,
    must cover it too. Completed goals are always on track and require
    nothing further.
    """
    if today is None:
        today = date.today()

    if goal.target_amount > 0:
        percentage_complete = min(100.0, goal.current_amount / goal.target_amount * 100)
    else:
        percentage_complete = 100.0

    months_remaining = months_until(goal.target_date, today)
    required_monthly = calculate_required_monthly(goal, today)

    if goal.current_amount >= goal.target_amount:
        on_track = True
    elif goal.monthly_contribution > 0:
        on_track = goal.monthly_contribution >= required_monthly
        if monthly_savings is not None:
            on_track = on_track and monthly_savings >= required_monthly
    elif monthly_savings is not None:
        on_track = monthly_savings >= required_monthly
    else:
        on_track = False

    projected_completion_date = None
    if goal.monthly_contribution > 0:
        projected_completion_date = project_goal_completion(goal, goal.monthly_contribution, today)

    return SavingsGoalProgress(
        goal=goal,
        percentage_complete=percentage_complete,
        on_track=on_track,
        required_monthly=required_monthly,
        projected_completion_date=projected_completion_date,
        months_remaining=months_remaining,
    )
