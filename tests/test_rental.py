"""
Tests for the rental portfolio calculator.
"""

import pytest

from app.calculations.rental import (
    RentalInputs,
    calculate_rental_cash_flow,
    delinquency_impact,
    expense_breakdown,
    occupancy_scenarios,
    round_half_up,
)


class TestRentalCashFlow:
    """Test the stabilised one-year cash flow."""

    def test_default_portfolio(self):
        """Test 250 units at 92% occupancy and 1,850/month."""
        result = calculate_rental_cash_flow(RentalInputs())

        assert result.occupied_units == 230
        assert result.vacant_units == 20
        assert result.gross_rental_income == pytest.approx(5_106_000)
        assert result.delinquent_amount == pytest.approx(229_770)
        assert result.effective_rental_income == pytest.approx(4_876_230)
        assert result.operating_expenses == pytest.approx(2_297_700)
        assert result.net_operating_income == pytest.approx(2_578_530)
        assert result.debt_service == pytest.approx(1_787_100)
        assert result.capex_reserves == pytest.approx(408_480)
        assert result.cash_flow == pytest.approx(382_950)
        assert result.monthly_cash_flow == pytest.approx(382_950 / 12)
        assert result.vacancy_loss == pytest.approx(444_000)

    def test_value_and_return(self):
        result = calculate_rental_cash_flow(RentalInputs())
        assert result.property_value == pytest.approx(2_578_530 / 0.06)
        assert result.total_investment == pytest.approx(2_578_530 / 0.06 * 0.25)
        assert result.roi == pytest.approx(382_950 / (2_578_530 / 0.06 * 0.25) * 100)
        assert result.cash_on_cash_return == result.roi

    def test_no_income_return_undefined(self):
        """Test an empty portfolio reports no ROI instead of NaN."""
        result = calculate_rental_cash_flow(RentalInputs(occupancy_rate=0))
        assert result.occupied_units == 0
        assert result.roi is None

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(-2.5) == -2
        assert round_half_up(2.49) == 2


class TestRentalScenarios:
    """Test occupancy and delinquency sweeps."""

    def test_occupancy_grid(self):
        scenarios = occupancy_scenarios(RentalInputs())
        assert [s.occupancy for s in scenarios] == list(range(80, 101, 2))
        assert all(s.delinquency == 4.5 for s in scenarios)
        cash_flows = [s.cash_flow for s in scenarios]
        assert cash_flows == sorted(cash_flows)

    def test_occupancy_matches_direct_calculation(self):
        scenarios = occupancy_scenarios(RentalInputs())
        at_92 = next(s for s in scenarios if s.occupancy == 92)
        assert at_92.cash_flow == 382_950
        assert at_92.noi == 2_578_530

    def test_delinquency_grid(self):
        impacts = delinquency_impact(RentalInputs())
        assert [d.delinquency for d in impacts] == list(range(16))
        assert impacts[0].lost_revenue == 0
        assert impacts[10].lost_revenue == 510_600
        assert impacts[0].cash_flow > impacts[-1].cash_flow

    def test_expense_breakdown(self):
        result = calculate_rental_cash_flow(RentalInputs())
        names = [row["name"] for row in expense_breakdown(result)]
        assert names == [
            "Net Operating Income",
            "Operating Expenses",
            "Debt Service",
            "CapEx Reserves",
        ]
