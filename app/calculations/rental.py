"""
Rental Portfolio Cash Flow

Stabilised one-year cash flow for a rental portfolio, with occupancy and
delinquency scenario sweeps. Percent inputs are whole numbers (92 = 92%).
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional

import numpy as np

from app.calculations.numeric import safe_divide

CAP_RATE = 0.06
DOWN_PAYMENT_RATIO = 0.25

OCCUPANCY_SCENARIOS = range(80, 101, 2)
DELINQUENCY_SCENARIOS = range(0, 16)


def round_half_up(value: float) -> int:
    """Round .5 upwards (not to even)."""
    return int(np.floor(value + 0.5))


@dataclass(frozen=True)
class RentalInputs:
    occupancy_rate: float = 92
    delinquency_rate: float = 4.5
    total_units: int = 250
    avg_rent: float = 1850  # Monthly, per unit
    operating_expense_ratio: float = 45
    debt_service_ratio: float = 35
    capex_reserve: float = 8


@dataclass(frozen=True)
class RentalCashFlow:
    occupied_units: int
    vacant_units: int
    gross_rental_income: float
    delinquent_amount: float
    effective_rental_income: float
    operating_expenses: float
    net_operating_income: float
    debt_service: float
    capex_reserves: float
    cash_flow: float
    monthly_cash_flow: float
    monthly_noi: float
    roi: Optional[float]  # Percent
    cash_on_cash_return: Optional[float]  # Percent, same as roi
    property_value: float
    total_investment: float
    vacancy_loss: float


@dataclass(frozen=True)
class OccupancyScenario:
    occupancy: int
    delinquency: float
    cash_flow: int
    noi: int
    roi: Optional[float]


@dataclass(frozen=True)
class DelinquencyImpact:
    delinquency: int
    cash_flow: int
    lost_revenue: int


def calculate_rental_cash_flow(inputs: RentalInputs) -> RentalCashFlow:
    """
    Calculate annual cash flow, NOI and return for a rental portfolio.

    Operating expenses, debt service and capex reserves are sized as a share
    of gross rental income. Value is NOI capitalised at CAP_RATE; the
    investment is the down payment on that value.
    """
    occupied = round_half_up(inputs.total_units * (inputs.occupancy_rate / 100))
    vacant = inputs.total_units - occupied

    gross = occupied * inputs.avg_rent * 12
    delinquent = gross * (inputs.delinquency_rate / 100)
    effective = gross - delinquent

    opex = gross * (inputs.operating_expense_ratio / 100)
    noi = effective - opex

    debt_service = gross * (inputs.debt_service_ratio / 100)
    capex = gross * (inputs.capex_reserve / 100)

    cash_flow = noi - debt_service - capex
    property_value = noi / CAP_RATE
    total_investment = property_value * DOWN_PAYMENT_RATIO

    roi = safe_divide(cash_flow, total_investment)
    if roi is not None:
        roi *= 100

    return RentalCashFlow(
        occupied_units=occupied,
        vacant_units=vacant,
        gross_rental_income=gross,
        delinquent_amount=delinquent,
        effective_rental_income=effective,
        operating_expenses=opex,
        net_operating_income=noi,
        debt_service=debt_service,
        capex_reserves=capex,
        cash_flow=cash_flow,
        monthly_cash_flow=cash_flow / 12,
        monthly_noi=noi / 12,
        roi=roi,
        cash_on_cash_return=roi,
        property_value=property_value,
        total_investment=total_investment,
        vacancy_loss=vacant * inputs.avg_rent * 12,
    )


def occupancy_scenarios(inputs: RentalInputs) -> List[OccupancyScenario]:
    """Cash flow and ROI across occupancy levels, delinquency held constant."""
    scenarios = []
    for occupancy in OCCUPANCY_SCENARIOS:
        result = calculate_rental_cash_flow(
            replace(inputs, occupancy_rate=occupancy)
        )
        roi = None
        if result.roi is not None:
            roi = round_half_up(result.roi * 10) / 10
        scenarios.append(
            OccupancyScenario(
                occupancy=occupancy,
                delinquency=inputs.delinquency_rate,
                cash_flow=round_half_up(result.cash_flow),
                noi=round_half_up(result.net_operating_income),
                roi=roi,
            )
        )
    return scenarios


def delinquency_impact(inputs: RentalInputs) -> List[DelinquencyImpact]:
    """Cash flow and lost revenue across delinquency levels at current occupancy."""
    impacts = []
    for delinquency in DELINQUENCY_SCENARIOS:
        result = calculate_rental_cash_flow(
            replace(inputs, delinquency_rate=delinquency)
        )
        impacts.append(
            DelinquencyImpact(
                delinquency=delinquency,
                cash_flow=round_half_up(result.cash_flow),
                lost_revenue=round_half_up(result.delinquent_amount),
            )
        )
    return impacts


def expense_breakdown(result: RentalCashFlow) -> List[Dict]:
    """Split of gross income for the allocation chart."""
    return [
        {"name": "Net Operating Income", "value": result.net_operating_income},
        {"name": "Operating Expenses", "value": result.operating_expenses},
        {"name": "Debt Service", "value": result.debt_service},
        {"name": "CapEx Reserves", "value": result.capex_reserves},
    ]
