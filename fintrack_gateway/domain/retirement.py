"""Financial independence (FIRE) feasibility"""

from typing import List

from fintrack_gateway.domain.models import FIREProjectionPoint, FIREResult
from fintrack_gateway.domain.projections import calculate_required_monthly_savings, clamp_finite

# 4% withdrawal rule
FIRE_MULTIPLIER = 25
MAX_YEARS_TO_FIRE = 100
REQUIRED_SAVINGS_HORIZON_YEARS = 30
MAX_PROJECTION_YEARS = 50
PROJECTION_BUFFER_YEARS = 5


def _years_to_fire(
    fire_number: float,
    current_net_worth: float,
    annual_savings: float,
    annual_return: float,
) -> int:
    if current_net_worth >= fire_number:
        return 0

    net_worth = current_net_worth
    for year in range(1, MAX_YEARS_TO_FIRE + 1):
        net_worth = clamp_finite(net_worth * (1 + annual_return) + annual_savings)
        if net_worth >= fire_number:
            return year

    return MAX_YEARS_TO_FIRE


def _projection_series(
    fire_number: float,
    current_net_worth: float,
    annual_savings: float,
    annual_return: float,
    last_year: int,
) -> List[FIREProjectionPoint]:
    net_worth = current_net_worth
    series = [FIREProjectionPoint(year=0, net_worth=round(net_worth, 2), fire_target=fire_number)]
    for year in range(1, last_year + 1):
        net_worth = clamp_finite(net_worth * (1 + annual_return) + annual_savings)
        series.append(FIREProjectionPoint(year=year, net_worth=round(net_worth, 2), fire_target=fire_number))
    return series


def calculate_fire(
    annual_expenses: float,
    current_net_worth: float,
    monthly_savings: float,
    expected_return_percent: float,
) -> FIREResult:
    """
    Target net worth, progress and timeline to financial independence.

    - fire_number = 25 x annual expenses
    - years_to_fire: year-by-year simulation (grow, then add a year of
      savings); 0 when already there, 100 when not reached within 100 years
    - monthly_required: contribution to hit fire_number in a fixed 30 years,
      independent of years_to_fire
    - projection_series: years 0..min(years_to_fire + 5, 50)
    """
    fire_number = clamp_finite(FIRE_MULTIPLIER * annual_expenses)
    progress_percent = round(current_net_worth / fire_number * 100, 2) if fire_number > 0 else 0.0

    annual_return = expected_return_percent / 100
    annual_savings = monthly_savings * 12

    years_to_fire = _years_to_fire(fire_number, current_net_worth, annual_savings, annual_return)

    monthly_required = calculate_required_monthly_savings(
        fire_number,
        current_net_worth,
        expected_return_percent,
        REQUIRED_SAVINGS_HORIZON_YEARS,
    )

    projection_end = min(years_to_fire + PROJECTION_BUFFER_YEARS, MAX_PROJECTION_YEARS)

    return FIREResult(
        fire_number=round(fire_number, 2),
        annual_expenses=annual_expenses,
        current_net_worth=current_net_worth,
        progress_percent=progress_percent,
        years_to_fire=years_to_fire,
        monthly_required=round(monthly_required, 2),
        projection_series=_projection_series(
            fire_number, current_net_worth, annual_savings, annual_return, projection_end
        ),
    )
