"""Prometheus metrics for monitoring calculation volume, solver behaviour and health scores"""

from typing import Optional
from prometheus_client import Counter, Histogram

# Calculation metrics
calculation_counter = Counter(
    "fintrack_calculation_total",
    "Analytics calculations served",
    ["calculation"],  # xirr | investment_returns | projections | fire | financial_health | savings_goals
)

xirr_solver_counter = Counter(
    "fintrack_xirr_solver_total",
    "XIRR solves by the stage that produced the result",
    ["method"],  # newton | bisection | unsolved
)

financial_freedom_score_histogram = Histogram(
    "fintrack_financial_freedom_score",
    "Distribution of composite financial freedom scores",
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
)

years_to_fire_histogram = Histogram(
    "fintrack_years_to_fire",
    "Projected years until financial independence",
    buckets=[0, 5, 10, 15, 20, 30, 40, 50, 100],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_xirr_solve(method: str) -> None:
    calculation_counter.labels(calculation="xirr").inc()
    xirr_solver_counter.labels(method=method).inc()


def record_fire(years_to_fire: Optional[int]) -> None:
    """Record FIRE calculation volume and the projected timeline distribution"""
    calculation_counter.labels(calculation="fire").inc()
    if years_to_fire is not None:
        years_to_fire_histogram.observe(years_to_fire)


def record_financial_health(score: float) -> None:
    calculation_counter.labels(calculation="financial_health").inc()
    financial_freedom_score_histogram.observe(score)
