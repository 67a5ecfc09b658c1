"""
Financial calculation API endpoints.

These endpoints accept inputs and return calculated results.
The front end calls them on every input change.
"""

from dataclasses import asdict
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, model_validator

from app.calculations import irr, rental
from app.calculations.development import run_development_model
from app.calculations.numeric import finite_or_none
from app.calculations.parameters import (
    CostParameters,
    ExitStrategy,
    FinanceParameters,
    ProjectParameters,
)
from app.config import get_settings

router = APIRouter()

MAX_PROJECT_YEARS = 50


class ProjectInput(BaseModel):
    """Unit mix, pricing and timing."""

    total_units: int = Field(100, ge=0)
    studio_units: int = Field(30, ge=0)
    one_br_units: int = Field(40, ge=0)
    two_br_units: int = Field(25, ge=0)
    three_br_units: int = Field(5, ge=0)
    studio_sqm: float = Field(35, ge=0)
    one_br_sqm: float = Field(55, ge=0)
    two_br_sqm: float = Field(75, ge=0)
    three_br_sqm: float = Field(95, ge=0)
    price_per_sqm: float = Field(2900, ge=0)
    development_years: float = Field(2.5, ge=0, le=MAX_PROJECT_YEARS)
    total_project_years: float = Field(4.5, ge=0, le=MAX_PROJECT_YEARS)
    units_per_month: float = Field(5, ge=0)
    start_date: Optional[date] = None

    @model_validator(mode="after")
    def check_unit_mix(self):
        mix_total = (
            self.studio_units + self.one_br_units + self.two_br_units + self.three_br_units
        )
        if mix_total != self.total_units:
            raise ValueError(
                f"Unit mix adds up to {mix_total} units but total_units is {self.total_units}"
            )
        if self.development_years > self.total_project_years:
            raise ValueError(
                f"development_years ({self.development_years:g}) cannot exceed "
                f"total_project_years ({self.total_project_years:g})"
            )
        return self


class CostInput(BaseModel):
    """Cost assumptions. Rates as decimals."""

    land_acquisition_total: float = Field(2_200_000, ge=0)
    construction_cost_per_unit: float = Field(58_000, ge=0)
    soft_cost_per_unit: float = Field(12_000, ge=0)
    marketing_total: float = Field(250_000, ge=0)
    agency_fee_rate: float = Field(0.03, ge=0)
    overhead_per_unit: float = Field(5_000, ge=0)
    contingency_rate: float = Field(0.08, ge=0)


class FinanceInput(BaseModel):
    """Capital structure."""

    debt_to_equity_ratio: float = Field(1.2, ge=0)
    base_rate: float = 0.035
    spread: float = 0.01
    equity_investment: float = Field(4_000_000, ge=0)


class DevelopmentInput(BaseModel):
    """Input for the development IRR model."""

    project: ProjectInput = ProjectInput()
    costs: CostInput = CostInput()
    finance: FinanceInput = FinanceInput()
    exit_strategy: ExitStrategy = ExitStrategy.presales
    sensitivity_range: Optional[float] = Field(None, ge=0)


class DevelopmentMetrics(BaseModel):
    """Headline results. Undefined metrics are null."""

    total_revenue: float
    total_costs: float
    total_investment: float
    interest_rate: float  # Percent
    irr: Optional[float] = None  # Percent
    irr_rate: Optional[float] = None  # Decimal
    irr_converged: bool
    irr_reliable: bool
    npv: Optional[float] = None
    cash_on_cash: Optional[float] = None
    equity_multiple: Optional[float] = None
    gross_margin: Optional[float] = None
    avg_sqm_per_unit: Optional[float] = None
    construction_cost_per_sqm: Optional[float] = None
    contingency_cost: float


class DevelopmentResponse(BaseModel):
    """Response with metrics, schedules and analysis tables."""

    metrics: DevelopmentMetrics
    annual_cashflows: List[dict]
    monthly_cashflows: List[dict]
    unit_mix: List[dict]
    sensitivity: List[dict]
    reality_checks: List[dict]


@router.post("/development", response_model=DevelopmentResponse)
async def calculate_development(inputs: DevelopmentInput):
    """Run the development model and return metrics, schedules and checks."""

    sensitivity_range = inputs.sensitivity_range
    if sensitivity_range is None:
        sensitivity_range = get_settings().default_sensitivity_range

    result = run_development_model(
        project=ProjectParameters(**inputs.project.model_dump()),
        costs=CostParameters(**inputs.costs.model_dump()),
        finance=FinanceParameters(**inputs.finance.model_dump()),
        exit_strategy=inputs.exit_strategy,
        sensitivity_range=sensitivity_range,
    )

    return DevelopmentResponse(
        metrics=DevelopmentMetrics(
            total_revenue=result.total_revenue,
            total_costs=result.total_costs,
            total_investment=result.total_investment,
            interest_rate=result.interest_rate * 100,
            irr=result.irr.display_percent,
            irr_rate=finite_or_none(result.irr.rate),
            irr_converged=result.irr.converged,
            irr_reliable=result.irr.reliable,
            npv=result.npv,
            cash_on_cash=result.cash_on_cash,
            equity_multiple=result.equity_multiple,
            gross_margin=result.gross_margin,
            avg_sqm_per_unit=result.avg_sqm_per_unit,
            construction_cost_per_sqm=result.construction_cost_per_sqm,
            contingency_cost=result.contingency_cost,
        ),
        annual_cashflows=[asdict(cf) for cf in result.annual_cash_flows],
        monthly_cashflows=[asdict(cf) for cf in result.monthly_cash_flows],
        unit_mix=[asdict(line) for line in result.unit_mix],
        sensitivity=[asdict(point) for point in result.sensitivity],
        reality_checks=[
            {"type": check.severity.value, "message": check.message}
            for check in result.reality_checks
        ],
    )


@router.get("/development/defaults", response_model=DevelopmentInput)
async def development_defaults():
    """Default inputs for the development model form."""
    return DevelopmentInput(sensitivity_range=get_settings().default_sensitivity_range)


class IRRInput(BaseModel):
    """Input for IRR calculation."""

    cash_flows: List[float]


class IRRResponse(BaseModel):
    """Response with IRR calculation."""

    irr: float
    multiple: float
    profit: float
    npv_at_10_percent: float


@router.post("/irr", response_model=IRRResponse)
async def calculate_irr_endpoint(inputs: IRRInput):
    """Calculate IRR for given periodic cash flows."""
    try:
        irr_val = irr.calculate_irr(inputs.cash_flows)
        multiple = irr.calculate_multiple(inputs.cash_flows)
        profit = irr.calculate_profit(inputs.cash_flows)
        npv = irr.calculate_npv(inputs.cash_flows, irr.NPV_DISCOUNT_RATE)

        return IRRResponse(
            irr=irr_val,
            multiple=multiple,
            profit=profit,
            npv_at_10_percent=npv,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


class RentalInput(BaseModel):
    """Input for the rental portfolio calculator. Percentages as whole numbers."""

    occupancy_rate: float = Field(92, ge=0, le=100)
    delinquency_rate: float = Field(4.5, ge=0, le=100)
    total_units: int = Field(250, ge=0)
    avg_rent: float = Field(1850, ge=0)
    operating_expense_ratio: float = Field(45, ge=0)
    debt_service_ratio: float = Field(35, ge=0)
    capex_reserve: float = Field(8, ge=0)


class RentalResponse(BaseModel):
    """Rental cash flow with scenario tables."""

    summary: dict
    occupancy_scenarios: List[dict]
    delinquency_impact: List[dict]
    expense_breakdown: List[dict]


@router.post("/rental", response_model=RentalResponse)
async def calculate_rental(inputs: RentalInput):
    """Calculate rental portfolio cash flow and scenario sweeps."""

    params = rental.RentalInputs(**inputs.model_dump())
    result = rental.calculate_rental_cash_flow(params)

    return RentalResponse(
        summary=asdict(result),
        occupancy_scenarios=[asdict(s) for s in rental.occupancy_scenarios(params)],
        delinquency_impact=[asdict(d) for d in rental.delinquency_impact(params)],
        expense_breakdown=rental.expense_breakdown(result),
    )
