"""Annualized return calculations on irregular cash flows (XIRR with CAGR fallback)

Rates are solved with Newton-Raphson on the NPV function. When the derivative
goes flat or the iteration budget runs out, the solver switches to bisection
over a fixed bracket instead of trusting an extrapolated Newton value.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from fintrack_gateway.domain.models import CashFlow
from fintrack_gateway.utils.date_utils import DateLike, to_datetime, year_fraction

logger = logging.getLogger(__name__)

MIN_RATE = -0.99
MAX_RATE = 100.0
BISECTION_UPPER = 10.0
FLAT_DERIVATIVE = 1e-12
MIN_CAGR_YEARS = 0.01

# exp() overflows a float just above 709
_MAX_EXPONENT = 700.0


@dataclass
class XIRRSolution:
    """Outcome of the two-stage solver; rate is None when no root was found"""

    rate: Optional[float]
    method: str  # "newton" | "bisection" | "unsolved"
    iterations: int


def _growth_exponent(rate: float, years: float) -> float:
    return min(-years * math.log1p(rate), _MAX_EXPONENT)


def _npv(flows: Sequence[Tuple[float, float]], rate: float) -> float:
    return sum(amount * math.exp(_growth_exponent(rate, years)) for years, amount in flows)


def _npv_derivative(flows: Sequence[Tuple[float, float]], rate: float) -> float:
    total = 0.0
    for years, amount in flows:
        if years == 0:
            continue
        total -= years * amount * math.exp(_growth_exponent(rate, years + 1))
    return total


def _newton_raphson(
    flows: Sequence[Tuple[float, float]],
    guess: float,
    tolerance: float,
    max_iterations: int,
) -> Tuple[Optional[float], str, int]:
    """
    Primary stage. Never raises; the guess is clamped into [-0.99, 100].

    Returns (rate, reason, iterations) where reason is "converged",
    "flat_derivative" or "exhausted"; rate is only set when converged.
    """
    rate = max(MIN_RATE, min(guess, MAX_RATE))
    for iteration in range(1, max_iterations + 1):
        value = _npv(flows, rate)
        slope = _npv_derivative(flows, rate)

        if abs(slope) < FLAT_DERIVATIVE:
            return None, "flat_derivative", iteration

        new_rate = rate - value / slope
        if abs(new_rate - rate) < tolerance:
            return new_rate, "converged", iteration

        rate = max(MIN_RATE, min(new_rate, MAX_RATE))

    return None, "exhausted", max_iterations


def _bisection(
    flows: Sequence[Tuple[float, float]],
    tolerance: float,
    max_iterations: int,
) -> Tuple[Optional[float], int]:
    """Fallback stage on [-0.99, 10], widened to [-0.99, 100] when the root is not bracketed"""
    low, high = MIN_RATE, BISECTION_UPPER
    f_low = _npv(flows, low)
    f_high = _npv(flows, high)

    if f_low * f_high > 0:
        high = MAX_RATE
        f_high = _npv(flows, high)
        if f_low * f_high > 0:
            return None, 0

    for iteration in range(1, max_iterations + 1):
        mid = (low + high) / 2
        f_mid = _npv(flows, mid)

        if abs(f_mid) < tolerance or (high - low) / 2 < tolerance:
            return mid, iteration

        if f_mid * f_low < 0:
            high, f_high = mid, f_mid
        else:
            low, f_low = mid, f_mid

    return None, max_iterations


def _has_sign_mixed_pair(cash_flows: Iterable[CashFlow]) -> bool:
    has_negative = has_positive = False
    for cf in cash_flows:
        has_negative = has_negative or cf.amount < 0
        has_positive = has_positive or cf.amount > 0
    return has_negative and has_positive


def solve_xirr(
    cash_flows: Sequence[CashFlow],
    guess: float = 0.10,
    tolerance: float = 1e-7,
    max_iterations: int = 100,
) -> XIRRSolution:
    """
    Solve for the annualized rate that zeroes NPV, reporting which stage found it.

    Flows are sorted by date and converted to actual/365.25 year fractions
    from the earliest date. Newton-Raphson runs first; a flat derivative
    hands over to bisection with the same iteration budget, an exhausted
    Newton run hands over with twice the budget.
    """
    if len(cash_flows) < 2 or not _has_sign_mixed_pair(cash_flows):
        return XIRRSolution(rate=None, method="unsolved", iterations=0)

    ordered = sorted(cash_flows, key=lambda cf: to_datetime(cf.date))
    base_date = ordered[0].date
    flows = [(year_fraction(base_date, cf.date), cf.amount) for cf in ordered]

    rate, reason, newton_iterations = _newton_raphson(flows, guess, tolerance, max_iterations)
    if reason == "converged":
        return XIRRSolution(rate=round(rate, 4), method="newton", iterations=newton_iterations)

    budget = max_iterations if reason == "flat_derivative" else max_iterations * 2
    logger.debug(
        "Newton-Raphson stopped (%s) after %s iterations; falling back to bisection",
        reason,
        newton_iterations,
    )
    rate, bisection_iterations = _bisection(flows, tolerance, budget)
    if rate is None:
        return XIRRSolution(rate=None, method="unsolved", iterations=newton_iterations + bisection_iterations)

    return XIRRSolution(
        rate=round(rate, 4),
        method="bisection",
        iterations=newton_iterations + bisection_iterations,
    )


def calculate_xirr(
    cash_flows: Sequence[CashFlow],
    guess: float = 0.10,
    tolerance: float = 1e-7,
    max_iterations: int = 100,
) -> Optional[float]:
    """
    Annualized return of irregular cash flows as a fraction (0.125 = 12.5%).

    Returns None when the flows cannot produce a rate: fewer than two flows,
    no mix of outflows and inflows, or no root found by either stage.
    """
    return solve_xirr(cash_flows, guess, tolerance, max_iterations).rate


def build_investment_cash_flows(
    investments: Iterable[CashFlow],
    current_value: float,
    current_date: DateLike,
) -> List[CashFlow]:
    """Investments become outflows, the current value one final inflow"""
    flows = [CashFlow(date=inv.date, amount=-abs(inv.amount)) for inv in investments]
    flows.append(CashFlow(date=current_date, amount=current_value))
    return flows


def calculate_investment_xirr(
    investments: Sequence[CashFlow],
    current_value: float,
    current_date: DateLike | None = None,
) -> Optional[float]:
    """
    XIRR of a series of purchases valued today, as a percentage (12.5 = 12.5%).

    Purchase amounts are treated as outflows regardless of their sign.
    Returns None if there are no purchases or the current value is not positive.
    """
    if not investments or current_value <= 0:
        return None

    if current_date is None:
        current_date = date.today()

    rate = calculate_xirr(build_investment_cash_flows(investments, current_value, current_date))
    if rate is None:
        return None

    return round(rate * 100, 2)


def calculate_cagr(
    invested: float,
    current_value: float,
    start_date: DateLike,
    end_date: DateLike | None = None,
) -> float:
    """
    Compound annual growth rate between two point-in-time values, as a percentage.

    Returns 0 for non-positive amounts or spans shorter than 0.01 years.
    """
    if invested <= 0 or current_value <= 0:
        return 0.0

    if end_date is None:
        end_date = date.today()

    years = year_fraction(start_date, end_date)
    if years < MIN_CAGR_YEARS:
        return 0.0

    growth = math.exp(min(math.log(current_value / invested) / years, _MAX_EXPONENT))
    cagr = (growth - 1) * 100
    return round(cagr, 2)
