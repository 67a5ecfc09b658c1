"""
Development IRR Model

Runs the full for-sale development analysis: budget, monthly schedule,
annual cash flows, IRR/NPV and summary metrics, price sensitivity and
reality checks. The model is a pure function of its inputs and is
recomputed in full on every call.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from app.calculations.budget import ProjectBudget, UnitMixLine, calculate_budget
from app.calculations.cashflow import (
    AnnualCashFlow,
    MonthlyCashFlow,
    annualize_cash_flows,
    generate_cash_flows,
)
from app.calculations.irr import NPV_DISCOUNT_RATE, IRRResult, calculate_npv, solve_irr
from app.calculations.numeric import finite_or_none, safe_divide
from app.calculations.parameters import (
    DEFAULT_SENSITIVITY_RANGE,
    CostParameters,
    ExitStrategy,
    FinanceParameters,
    ProjectParameters,
)
from app.calculations.reality_checks import RealityCheck, check_budget, check_irr_result
from app.calculations.sensitivity import SensitivityPoint, run_price_sensitivity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DevelopmentResult:
    """Everything the model produces for one set of inputs."""

    total_revenue: float
    total_costs: float
    total_investment: float
    interest_rate: float  # Decimal
    irr: IRRResult
    npv: Optional[float]  # At NPV_DISCOUNT_RATE
    cash_on_cash: Optional[float]
    equity_multiple: Optional[float]
    gross_margin: Optional[float]
    avg_sqm_per_unit: Optional[float]
    construction_cost_per_sqm: Optional[float]
    contingency_cost: float
    monthly_cash_flows: List[MonthlyCashFlow]
    annual_cash_flows: List[AnnualCashFlow]
    unit_mix: List[UnitMixLine]
    sensitivity: List[SensitivityPoint]
    reality_checks: List[RealityCheck]


def calculate_cash_on_cash(
    annual_cash_flows: List[AnnualCashFlow], equity_investment: float
) -> Optional[float]:
    """Positive cash returned after year 0 divided by equity invested."""
    returned = sum(max(0.0, cf.cash_flow) for cf in annual_cash_flows[1:])
    return safe_divide(returned, equity_investment)


def calculate_equity_multiple(
    budget: ProjectBudget,
    finance: FinanceParameters,
    total_project_years: float,
) -> Optional[float]:
    """
    Approximate equity multiple.

    Profit less interest on the full debt balance for half the project
    life, over equity. This is a rough proxy, not a true MOIC.
    """
    approx_interest = finance.total_debt * finance.interest_rate * (total_project_years / 2)
    return safe_divide(
        budget.total_revenue - budget.total_costs - approx_interest,
        finance.equity_investment,
    )


def run_development_model(
    project: ProjectParameters,
    costs: CostParameters,
    finance: FinanceParameters,
    exit_strategy: ExitStrategy = ExitStrategy.presales,
    sensitivity_range: float = DEFAULT_SENSITIVITY_RANGE,
) -> DevelopmentResult:
    """
    Run the development model.

    Args:
        project: Unit mix, pricing and timing
        costs: Cost assumptions
        finance: Capital structure
        exit_strategy: Pre-sales during construction or sales after completion
        sensitivity_range: Price swing for the sensitivity sweep (0.2 = +/-20%)

    Returns:
        DevelopmentResult
    """
    budget = calculate_budget(project, costs)
    checks = check_budget(project, costs, budget)

    monthly = generate_cash_flows(project, costs, finance, budget, exit_strategy)
    annual = annualize_cash_flows(
        monthly, project.total_project_years, finance.equity_investment
    )
    flows = [cf.cash_flow for cf in annual]

    irr_result = solve_irr(flows)
    if not irr_result.converged:
        logger.warning(
            f"IRR did not converge after {irr_result.iterations} iterations "
            f"(last rate {irr_result.rate}); reporting best effort"
        )
    checks.extend(check_irr_result(irr_result))

    sensitivity = run_price_sensitivity(
        project, annual, budget.total_revenue, sensitivity_range
    )

    logger.debug(
        f"Development model: {len(monthly)} months, {len(annual)} years, "
        f"irr={irr_result.rate}, checks={len(checks)}"
    )

    return DevelopmentResult(
        total_revenue=budget.total_revenue,
        total_costs=budget.total_costs,
        total_investment=finance.total_investment,
        interest_rate=finance.interest_rate,
        irr=irr_result,
        npv=finite_or_none(calculate_npv(flows, NPV_DISCOUNT_RATE)),
        cash_on_cash=calculate_cash_on_cash(annual, finance.equity_investment),
        equity_multiple=calculate_equity_multiple(
            budget, finance, project.total_project_years
        ),
        gross_margin=budget.gross_margin,
        avg_sqm_per_unit=budget.avg_sqm_per_unit,
        construction_cost_per_sqm=budget.construction_cost_per_sqm,
        contingency_cost=budget.contingency_cost,
        monthly_cash_flows=monthly,
        annual_cash_flows=annual,
        unit_mix=budget.unit_mix,
        sensitivity=sensitivity,
        reality_checks=checks,
    )
