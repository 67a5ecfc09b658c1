"""
Tests for the calculation API endpoints.
"""

from dataclasses import asdict

import pytest

from app.calculations.parameters import (
    DEFAULT_SENSITIVITY_RANGE,
    CostParameters,
    FinanceParameters,
    ProjectParameters,
)
from app.config import Settings


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestDevelopmentAPI:
    """Test the development model endpoint."""

    def test_calculate_defaults(self, client):
        """Test an empty body runs the reference scenario."""
        response = client.post("/api/calculate/development", json={})
        assert response.status_code == 200
        data = response.json()

        metrics = data["metrics"]
        assert metrics["total_revenue"] == pytest.approx(16_240_000)
        assert metrics["total_costs"] == pytest.approx(10_997_200)
        assert metrics["interest_rate"] == pytest.approx(4.5)
        assert metrics["irr_converged"] is True
        assert metrics["irr"] == pytest.approx(metrics["irr_rate"] * 100)

        assert len(data["monthly_cashflows"]) == 55
        assert len(data["annual_cashflows"]) == 5
        assert len(data["sensitivity"]) == 11
        assert len(data["unit_mix"]) == 4
        for check in data["reality_checks"]:
            assert check["type"] in ("warning", "info")

    def test_post_completion_strategy(self, client):
        response = client.post(
            "/api/calculate/development",
            json={"exit_strategy": "postconstruction"},
        )
        assert response.status_code == 200
        monthly = response.json()["monthly_cashflows"]
        assert monthly[30]["revenue"] == 0
        assert monthly[31]["revenue"] > 0

    def test_start_date_labels_months(self, client):
        response = client.post(
            "/api/calculate/development",
            json={"project": {"start_date": "2025-03-01"}},
        )
        assert response.status_code == 200
        monthly = response.json()["monthly_cashflows"]
        assert monthly[0]["date"] == "2025-03-01"
        assert monthly[10]["date"] == "2026-01-01"

    def test_unit_mix_must_match_total(self, client):
        response = client.post(
            "/api/calculate/development",
            json={"project": {"total_units": 120}},
        )
        assert response.status_code == 422

    def test_negative_price_rejected(self, client):
        response = client.post(
            "/api/calculate/development",
            json={"project": {"price_per_sqm": -1}},
        )
        assert response.status_code == 422

    def test_unknown_exit_strategy_rejected(self, client):
        response = client.post(
            "/api/calculate/development",
            json={"exit_strategy": "hold"},
        )
        assert response.status_code == 422

    def test_zero_revenue_metrics_are_null(self, client):
        response = client.post(
            "/api/calculate/development",
            json={"project": {"price_per_sqm": 0}},
        )
        assert response.status_code == 200
        metrics = response.json()["metrics"]
        assert metrics["gross_margin"] is None
        assert metrics["irr_reliable"] is False
        assert metrics["irr"] is None

        advisories = [c["message"] for c in response.json()["reality_checks"]]
        irr_advisories = [m for m in advisories if m.startswith("IRR")]
        assert irr_advisories == ["IRR could not be determined for these cash flows"]
        assert all(row["irr_percent"] is None for row in response.json()["sensitivity"])

    def test_project_years_upper_bound(self, client):
        response = client.post(
            "/api/calculate/development",
            json={"project": {"total_project_years": 2000}},
        )
        assert response.status_code == 422

    def test_development_years_upper_bound(self, client):
        response = client.post(
            "/api/calculate/development",
            json={"project": {"development_years": 51, "total_project_years": 50}},
        )
        assert response.status_code == 422

    def test_development_longer_than_project_rejected(self, client):
        response = client.post(
            "/api/calculate/development",
            json={"project": {"development_years": 5, "total_project_years": 4}},
        )
        assert response.status_code == 422

    def test_development_equal_to_project_accepted(self, client):
        response = client.post(
            "/api/calculate/development",
            json={"project": {"development_years": 3, "total_project_years": 3}},
        )
        assert response.status_code == 200

    def test_sensitivity_range(self, client):
        response = client.post(
            "/api/calculate/development",
            json={"sensitivity_range": 0.1},
        )
        changes = [row["price_change_percent"] for row in response.json()["sensitivity"]]
        assert changes[0] == -10.0
        assert changes[-1] == 10.0

    def test_defaults_match_model(self, client):
        """Test the form defaults mirror the model's parameter defaults."""
        response = client.get("/api/calculate/development/defaults")
        assert response.status_code == 200
        data = response.json()

        assert data["project"] == asdict(ProjectParameters())
        assert data["costs"] == asdict(CostParameters())
        assert data["finance"] == asdict(FinanceParameters())
        assert data["exit_strategy"] == "presales"
        assert data["sensitivity_range"] == 0.2

    def test_settings_default_range_follows_model(self):
        assert Settings().default_sensitivity_range == DEFAULT_SENSITIVITY_RANGE


class TestIRRAPI:
    """Test the generic IRR endpoint."""

    def test_calculate_irr(self, client):
        response = client.post("/api/calculate/irr", json={"cash_flows": [-100, 110]})
        assert response.status_code == 200
        data = response.json()
        assert data["irr"] == pytest.approx(0.10)
        assert data["multiple"] == pytest.approx(1.1)
        assert data["profit"] == pytest.approx(10)
        assert data["npv_at_10_percent"] == pytest.approx(0)

    def test_irr_without_outflow(self, client):
        response = client.post("/api/calculate/irr", json={"cash_flows": [100, 110]})
        assert response.status_code == 400


class TestRentalAPI:
    """Test the rental portfolio endpoint."""

    def test_calculate_rental(self, client):
        response = client.post("/api/calculate/rental", json={})
        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["occupied_units"] == 230
        assert data["summary"]["cash_flow"] == pytest.approx(382_950)
        assert len(data["occupancy_scenarios"]) == 11
        assert len(data["delinquency_impact"]) == 16
        assert len(data["expense_breakdown"]) == 4

    def test_occupancy_above_100_rejected(self, client):
        response = client.post("/api/calculate/rental", json={"occupancy_rate": 120})
        assert response.status_code == 422
