"""Compound growth projections: SIP future value, net worth, holdings and emergency fund"""

import math
import sys
from typing import List, Sequence

from fintrack_gateway.domain.exceptions import InvalidProjectionInputError
from fintrack_gateway.domain.models import (
    EmergencyFundProgress,
    InvestmentPosition,
    InvestmentProjection,
    NetWorthGrowthPoint,
    PortfolioProjectionPoint,
)

PROJECTION_MARKS = (3, 5, 10)

# exp() overflows a float just above 709
_MAX_EXPONENT = 700.0
_MAX_VALUE = sys.float_info.max


def compound_factor(rate: float, periods: float) -> float:
    """(1 + rate) ** periods, saturating near e**700 instead of raising OverflowError"""
    if periods == 0:
        return 1.0
    if rate <= -1:
        return 0.0
    return math.exp(min(periods * math.log1p(rate), _MAX_EXPONENT))


def clamp_finite(value: float) -> float:
    """Keep a projected amount within the finite float range"""
    return max(-_MAX_VALUE, min(value, _MAX_VALUE))


def project_sip_future_value(monthly_amount: float, annual_return_percent: float, years: float) -> float:
    """
    Future value of a monthly contribution paid at the start of each month.

    FV = P * [((1+r)^n - 1) / r] * (1+r), r = monthly rate, n = months.
    A zero rate degenerates to plain accumulation P * n.
    """
    n = years * 12
    r = annual_return_percent / 100 / 12

    if r == 0:
        return monthly_amount * n

    fv = monthly_amount * ((compound_factor(r, n) - 1) / r) * (1 + r)
    return round(clamp_finite(fv), 2)


def project_net_worth_growth(
    current_net_worth: float,
    monthly_savings: float,
    return_percent: float,
    years: int,
) -> List[NetWorthGrowthPoint]:
    """
    Year-by-year net worth, rows for years 1..N.

    invested: linear baseline with no returns.
    projected: this year's savings added, then the whole pot compounded.
    """
    annual_return = return_percent / 100
    annual_savings = monthly_savings * 12

    results = []
    compounded = current_net_worth
    for year in range(1, years + 1):
        invested = clamp_finite(current_net_worth + annual_savings * year)
        compounded = clamp_finite((compounded + annual_savings) * (1 + annual_return))
        results.append(
            NetWorthGrowthPoint(
                year=year,
                invested=round(invested, 2),
                projected=round(compounded, 2),
            )
        )

    return results


def project_value(
    current_value: float,
    monthly_amount: float,
    annual_return_percent: float,
    years: float,
) -> float:
    """Lump sum compounded annually plus the SIP value of any monthly contribution"""
    if annual_return_percent < -100:
        raise InvalidProjectionInputError(
            f"Expected annual return {annual_return_percent}% is below -100%"
        )

    lump_sum_fv = current_value * compound_factor(annual_return_percent / 100, years)
    sip_fv = 0.0
    if monthly_amount > 0:
        sip_fv = project_sip_future_value(monthly_amount, annual_return_percent, years)

    return clamp_finite(lump_sum_fv + sip_fv)


def project_investment_growth(
    investments: Sequence[InvestmentPosition],
    years: int = 10,
) -> List[InvestmentProjection]:
    """
    Project each holding independently at the 3, 5 and 10 year marks.

    `years` is the caller's horizon of interest; the marks themselves are fixed.
    """
    projections = []
    for inv in investments:
        marks = [
            round(
                project_value(
                    inv.current_value,
                    inv.monthly_contribution,
                    inv.expected_annual_return_percent,
                    mark,
                ),
                2,
            )
            for mark in PROJECTION_MARKS
        ]
        projections.append(
            InvestmentProjection(
                name=inv.name,
                current=inv.current_value,
                projected_3y=marks[0],
                projected_5y=marks[1],
                projected_10y=marks[2],
            )
        )

    return projections


def project_emergency_fund_progress(
    current_balance: float,
    monthly_savings: float,
    target_months: float,
    monthly_expense: float,
) -> EmergencyFundProgress:
    """
    Months of expenses covered today and months of saving to reach the target.

    months_to_target is 0 when the target is already met and -1 when it
    cannot be reached because nothing is being saved.
    """
    current_months = round(current_balance / monthly_expense, 2) if monthly_expense > 0 else 0.0

    gap = target_months * monthly_expense - current_balance
    if gap <= 0:
        months_to_target = 0
    elif monthly_savings <= 0:
        months_to_target = -1
    else:
        months_to_target = math.ceil(gap / monthly_savings)

    return EmergencyFundProgress(
        current_months=current_months,
        target_months=target_months,
        months_to_target=months_to_target,
    )


def project_portfolio_growth(
    stock_value: float,
    mutual_fund_value: float,
    sip_value: float,
    monthly_sip_contribution: float,
    years: int = 10,
    stock_return: float = 15.0,
    mutual_fund_return: float = 12.0,
    sip_return: float = 12.0,
) -> List[PortfolioProjectionPoint]:
    """Yearly portfolio value by asset class; only SIPs receive new contributions"""
    results = []
    for year in range(1, years + 1):
        stocks = clamp_finite(stock_value * compound_factor(stock_return / 100, year))
        mutual_funds = clamp_finite(mutual_fund_value * compound_factor(mutual_fund_return / 100, year))
        sips = clamp_finite(sip_value * compound_factor(sip_return / 100, year))
        if monthly_sip_contribution > 0:
            sips = clamp_finite(sips + project_sip_future_value(monthly_sip_contribution, sip_return, year))

        results.append(
            PortfolioProjectionPoint(
                year=year,
                stocks=round(stocks, 2),
                mutual_funds=round(mutual_funds, 2),
                sips=round(sips, 2),
                total=round(clamp_finite(stocks + mutual_funds + sips), 2),
            )
        )

    return results


def calculate_required_monthly_savings(
    target_amount: float,
    current_amount: float,
    annual_return_percent: float,
    years: int,
) -> float:
    """
    Monthly contribution that grows current_amount into target_amount within `years`.

    Solves FV = PV * (1+r)^n + PMT * [((1+r)^n - 1) / r] for PMT.
    Never negative: when the lump sum alone reaches the target, no
    contribution is needed.
    """
    r = annual_return_percent / 100 / 12
    n = years * 12

    if r == 0:
        return max(0.0, (target_amount - current_amount) / n) if n > 0 else 0.0

    growth = compound_factor(r, n)
    gap = target_amount - current_amount * growth
    if gap <= 0:
        return 0.0

    return clamp_finite(gap * r / (growth - 1))
