"""Integration tests for API endpoints"""

import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient
from fintrack_gateway.api.dependencies import get_settings
from fintrack_gateway.api.main import create_app
from fintrack_gateway.config import Settings


@pytest.fixture
def xirr_payload() -> dict:
    return {
        "cash_flows": [
            {"date": "2024-01-01", "amount": -1000},
            {"date": "2025-01-01", "amount": 1120},
        ]
    }


@pytest.fixture
def nwi_target_payload() -> dict:
    return {
        "needs": {"percentage": 50, "categories": ["rent"]},
        "wants": {"percentage": 30, "categories": ["dining"]},
        "investments": {"percentage": 20, "categories": ["investment"]},
    }


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["service"] == "fintrack-gateway"


def test_metrics_endpoint(client: TestClient, xirr_payload: dict):
    """Solver metrics are exported after a solve"""
    client.post("/v1/returns/xirr", json=xirr_payload)

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "fintrack_xirr_solver_total" in response.text
    assert "fintrack_calculation_total" in response.text


def test_request_id_propagated(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_request_id_generated(client: TestClient):
    response = client.get("/health")
    assert response.headers["X-Request-ID"]


def test_xirr_endpoint(client: TestClient, xirr_payload: dict):
    """12% over 366 days annualizes to just under 12%"""
    response = client.post("/v1/returns/xirr", json=xirr_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["xirr"] == pytest.approx(0.1197, abs=1e-4)
    assert data["xirr_percent"] == pytest.approx(11.97, abs=0.01)
    assert data["method"] == "newton"


def test_xirr_endpoint_unsolvable(client: TestClient):
    response = client.post(
        "/v1/returns/xirr",
        json={"cash_flows": [{"date": "2024-01-01", "amount": -1000}]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["xirr"] is None
    assert data["xirr_percent"] is None
    assert data["method"] == "unsolved"


def test_xirr_endpoint_validation(client: TestClient):
    response = client.post("/v1/returns/xirr", json={"cash_flows": [{"date": "not-a-date", "amount": 1}]})
    assert response.status_code == 422


@patch("fintrack_gateway.api.v1.returns.solve_xirr", side_effect=RuntimeError("boom"))
def test_xirr_endpoint_unexpected_error(mock_solve, client: TestClient, xirr_payload: dict):
    response = client.post("/v1/returns/xirr", json=xirr_payload)

    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"
    mock_solve.assert_called_once()


def test_investment_returns_endpoint(client: TestClient):
    response = client.post(
        "/v1/returns/investment",
        json={
            "investments": [{"date": "2024-01-01", "amount": 1000}],
            "current_value": 1120,
            "current_date": "2025-01-01",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["xirr_percent"] == pytest.approx(11.97, abs=0.01)
    assert data["cagr_percent"] == pytest.approx(11.97, abs=0.01)
    assert data["total_invested"] == 1000
    assert data["absolute_return"] == 120


def test_investment_returns_endpoint_empty(client: TestClient):
    response = client.post("/v1/returns/investment", json={"investments": [], "current_value": 0})

    assert response.status_code == 200
    data = response.json()
    assert data["xirr_percent"] is None
    assert data["cagr_percent"] == 0
    assert data["total_invested"] == 0


def test_projections_endpoint(client: TestClient, sample_transaction_payload: list[dict]):
    """Sample history saves 3,000 a month against 2,000 of expenses with 16,000 in the bank"""
    response = client.post(
        "/v1/projections",
        json={
            "transactions": sample_transaction_payload,
            "sips": [{"name": "Index Fund", "monthly_amount": 500, "current_value": 10000}],
            "stocks": [{"symbol": "ACME", "current_value": 5000}],
            "mutual_funds": [{"fund_name": "Balanced", "current_value": 3000}],
        },
    )

    assert response.status_code == 200
    data = response.json()

    assert len(data["net_worth_projection"]) == 30
    assert data["net_worth_projection"][0]["year"] == 1
    assert len(data["portfolio_projection"]) == 10

    emergency = data["emergency_fund_progress"]
    assert emergency["current_months"] == 8.0
    assert emergency["target_months"] == 6
    assert emergency["months_to_target"] == 0

    assert data["fire"]["fire_number"] == 600_000
    assert data["fire"]["current_net_worth"] == 34_000

    assert len(data["sip_projections"]) == 1
    sip = data["sip_projections"][0]
    assert sip["name"] == "Index Fund"
    assert sip["current"] == 10_000
    assert sip["current"] < sip["projected_3y"] < sip["projected_5y"] < sip["projected_10y"]


def test_projections_endpoint_empty(client: TestClient):
    response = client.post("/v1/projections", json={})

    assert response.status_code == 200
    data = response.json()
    assert data["sip_projections"] == []
    assert data["emergency_fund_progress"]["months_to_target"] == 0
    assert data["fire"]["fire_number"] == 0


def test_fire_endpoint(client: TestClient):
    response = client.post(
        "/v1/projections/fire",
        json={
            "annual_expenses": 40_000,
            "current_net_worth": 0,
            "monthly_savings": 10_000,
            "expected_return_percent": 0,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["fire_number"] == 1_000_000
    assert data["years_to_fire"] == 9
    assert data["monthly_required"] == pytest.approx(2777.78, abs=0.01)
    assert len(data["projection_series"]) == 15


def test_fire_endpoint_default_return(client: TestClient):
    """Omitted return falls back to the configured portfolio return"""
    with_default = client.post(
        "/v1/projections/fire",
        json={"annual_expenses": 40_000, "current_net_worth": 0, "monthly_savings": 5000},
    ).json()
    explicit = client.post(
        "/v1/projections/fire",
        json={
            "annual_expenses": 40_000,
            "current_net_worth": 0,
            "monthly_savings": 5000,
            "expected_return_percent": 12,
        },
    ).json()

    assert with_default["years_to_fire"] == explicit["years_to_fire"]


def test_fire_endpoint_validation(client: TestClient):
    response = client.post(
        "/v1/projections/fire",
        json={"annual_expenses": -1, "current_net_worth": 0},
    )
    assert response.status_code == 422


def test_financial_health_endpoint(client: TestClient, sample_transaction_payload: list[dict]):
    response = client.post("/v1/financial-health", json={"transactions": sample_transaction_payload})

    assert response.status_code == 200
    data = response.json()

    assert data["emergency_fund_months"] == 8
    assert data["emergency_fund_target"] == 6
    assert data["score_breakdown"] == {
        "savings_rate": 25,
        "emergency_fund": 25,
        "nwi_adherence": 12.5,
        "investment_rate": 20,
    }
    assert data["financial_freedom_score"] == 82.5
    assert data["expense_velocity"]["trend"] == "stable"
    assert data["income_profile"]["avg_monthly_income"] == 5000
    assert data["income_profile"]["is_variable"] is False
    assert data["income_profile"]["last_income_date"] == "2025-03-01"

    timeline = data["net_worth_timeline"]
    assert [p["month"] for p in timeline] == ["2025-01", "2025-02", "2025-03"]
    assert [p["bank_balance"] for p in timeline] == [12_000, 14_000, 16_000]


def test_financial_health_with_nwi_target_and_holdings(
    client: TestClient,
    sample_transaction_payload: list[dict],
    nwi_target_payload: dict,
):
    response = client.post(
        "/v1/financial-health",
        json={
            "transactions": sample_transaction_payload,
            "investment_value": 3000,
            "nwi_target": nwi_target_payload,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["score_breakdown"]["nwi_adherence"] == pytest.approx(18.33, abs=0.01)
    assert [p["total_net_worth"] for p in data["net_worth_timeline"]] == [15_000, 17_000, 19_000]


def test_financial_health_endpoint_empty(client: TestClient):
    response = client.post("/v1/financial-health", json={})

    assert response.status_code == 200
    data = response.json()
    assert data["financial_freedom_score"] == 12.5
    assert data["net_worth_timeline"] == []
    assert data["income_profile"]["last_income_date"] is None


def test_financial_health_settings_override(sample_transaction_payload: list[dict]):
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: Settings(emergency_fund_target_months=3)
    client = TestClient(app)

    response = client.post("/v1/financial-health", json={"transactions": sample_transaction_payload})

    assert response.json()["emergency_fund_target"] == 3


def test_savings_goals_endpoint(client: TestClient):
    response = client.post(
        "/v1/savings-goals/progress",
        json={
            "goals": [
                {
                    "name": "Vacation",
                    "target_amount": 12_000,
                    "current_amount": 3000,
                    "target_date": "2025-12-31",
                    "monthly_contribution": 1000,
                },
                {
                    "name": "Laptop",
                    "target_amount": 2000,
                    "current_amount": 2000,
                    "target_date": "2025-06-30",
                },
            ],
            "today": "2025-01-15",
        },
    )

    assert response.status_code == 200
    vacation, laptop = response.json()["goals"]

    assert vacation["percentage_complete"] == 25
    assert vacation["months_remaining"] == 11
    assert vacation["required_monthly"] == pytest.approx(818.18)
    assert vacation["on_track"] is True
    assert vacation["projected_completion_date"] == "2025-10-15"

    assert laptop["percentage_complete"] == 100
    assert laptop["on_track"] is True
    assert laptop["required_monthly"] == 0


def test_savings_goals_endpoint_validation(client: TestClient):
    response = client.post(
        "/v1/savings-goals/progress",
        json={"goals": [{"name": "Bad", "target_amount": 0, "target_date": "2025-12-31"}]},
    )
    assert response.status_code == 422


def test_fire_endpoint_extreme_return(client: TestClient):
    """Very large returns saturate rather than failing the request"""
    response = client.post(
        "/v1/projections/fire",
        json={
            "annual_expenses": 40_000,
            "current_net_worth": 1000,
            "monthly_savings": 100,
            "expected_return_percent": 8000,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["years_to_fire"] == 2
    assert data["monthly_required"] == 0


def test_projections_endpoint_extreme_sip_return(client: TestClient):
    response = client.post(
        "/v1/projections",
        json={
            "sips": [
                {
                    "name": "Moonshot",
                    "monthly_amount": 100,
                    "current_value": 1000,
                    "expected_annual_return": 500_000,
                }
            ]
        },
    )

    assert response.status_code == 200
    [sip] = response.json()["sip_projections"]
    assert sip["projected_10y"] > sip["projected_3y"] > sip["current"]
