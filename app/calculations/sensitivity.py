"""
Price Sensitivity

Re-solves IRR across a symmetric grid of sale-price changes.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from app.calculations.budget import calculate_revenue
from app.calculations.cashflow import AnnualCashFlow
from app.calculations.irr import solve_irr
from app.calculations.numeric import finite_or_none
from app.calculations.parameters import ProjectParameters

SENSITIVITY_STEPS = 5  # Steps either side of the base price


@dataclass(frozen=True)
class SensitivityPoint:
    price_change_percent: float
    irr_rate: Optional[float]  # Decimal; None when the solve blew up
    irr_percent: Optional[float]  # Rounded to 0.1; None when unreliable
    adjusted_price: float
    converged: bool


def price_adjustments(sensitivity_range: float) -> np.ndarray:
    """Price multipliers from (1 - range) to (1 + range) in 11 steps."""
    steps = np.arange(-SENSITIVITY_STEPS, SENSITIVITY_STEPS + 1)
    return 1 + steps * sensitivity_range / SENSITIVITY_STEPS


def run_price_sensitivity(
    project: ProjectParameters,
    annual_cash_flows: List[AnnualCashFlow],
    base_revenue: float,
    sensitivity_range: float,
) -> List[SensitivityPoint]:
    """
    Sweep the sale price and re-solve IRR for each step.

    The revenue change is spread evenly over the operating years: every
    year after year 0 receives delta / total_project_years. Year 0 is left
    unchanged. Costs (including agency fees) are held at the base case.
    """
    base_flows = [cf.cash_flow for cf in annual_cash_flows]
    points = []

    for adjustment in price_adjustments(sensitivity_range):
        adjusted_price = project.price_per_sqm * adjustment
        adjusted_revenue = calculate_revenue(project, adjusted_price)

        revenue_delta = adjusted_revenue - base_revenue
        per_year = 0.0
        if project.total_project_years:
            per_year = revenue_delta / project.total_project_years

        adjusted_flows = [
            cf if year == 0 else cf + per_year for year, cf in enumerate(base_flows)
        ]
        result = solve_irr(adjusted_flows)
        irr_pct = result.display_percent

        points.append(
            SensitivityPoint(
                price_change_percent=round(float((adjustment - 1) * 100), 1),
                irr_rate=finite_or_none(result.rate),
                irr_percent=round(irr_pct, 1) if irr_pct is not None else None,
                adjusted_price=float(adjusted_price),
                converged=result.converged,
            )
        )

    return points

