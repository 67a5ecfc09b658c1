"""
Development Budget

Aggregates sales revenue and the total development cost from the unit mix
and cost assumptions, plus the per-sqm ratios used by the reality checks.
"""

from dataclasses import dataclass
from typing import List, Optional

from app.calculations.numeric import safe_divide
from app.calculations.parameters import CostParameters, ProjectParameters


@dataclass(frozen=True)
class UnitMixLine:
    """Revenue contribution of one unit type."""

    unit_type: str
    count: int
    sqm: float
    price_per_sqm: float
    unit_price: float  # sqm * price_per_sqm
    total_revenue: float  # count * unit_price


@dataclass(frozen=True)
class ProjectBudget:
    """Revenue and cost totals for a project."""

    total_revenue: float
    construction_cost: float
    soft_cost: float
    overhead: float
    contingency_cost: float
    agency_fees: float
    marketing: float
    land: float
    total_costs: float
    unit_mix: List[UnitMixLine]

    # Ratios; None when undefined (zero revenue, zero units, zero area)
    gross_margin: Optional[float]
    avg_sqm_per_unit: Optional[float]
    construction_cost_per_sqm: Optional[float]


def calculate_revenue(project: ProjectParameters, price_per_sqm: Optional[float] = None) -> float:
    """
    Calculate total sales revenue across the unit mix.

    Args:
        project: Project parameters
        price_per_sqm: Override for the sale price (used by sensitivity runs)

    Returns:
        Total revenue
    """
    if price_per_sqm is None:
        price_per_sqm = project.price_per_sqm
    return sum(count * sqm * price_per_sqm for _, count, sqm in project.unit_mix())


def build_unit_mix(project: ProjectParameters) -> List[UnitMixLine]:
    """Build the unit mix breakdown table."""
    lines = []
    for unit_type, count, sqm in project.unit_mix():
        unit_price = sqm * project.price_per_sqm
        lines.append(
            UnitMixLine(
                unit_type=unit_type,
                count=count,
                sqm=sqm,
                price_per_sqm=project.price_per_sqm,
                unit_price=unit_price,
                total_revenue=count * unit_price,
            )
        )
    return lines


def calculate_budget(project: ProjectParameters, costs: CostParameters) -> ProjectBudget:
    """
    Calculate revenue, cost totals and margin for a project.

    Contingency is applied to construction and soft costs only. Agency fees
    are charged on total revenue.
    """
    total_revenue = calculate_revenue(project)

    construction = project.total_units * costs.construction_cost_per_unit
    soft = project.total_units * costs.soft_cost_per_unit
    overhead = project.total_units * costs.overhead_per_unit
    contingency = (construction + soft) * costs.contingency_rate
    agency_fees = total_revenue * costs.agency_fee_rate

    total_costs = (
        costs.land_acquisition_total
        + construction
        + soft
        + costs.marketing_total
        + agency_fees
        + overhead
        + contingency
    )

    avg_sqm = safe_divide(project.total_sqm, project.total_units)

    return ProjectBudget(
        total_revenue=total_revenue,
        construction_cost=construction,
        soft_cost=soft,
        overhead=overhead,
        contingency_cost=contingency,
        agency_fees=agency_fees,
        marketing=costs.marketing_total,
        land=costs.land_acquisition_total,
        total_costs=total_costs,
        unit_mix=build_unit_mix(project),
        gross_margin=safe_divide(total_revenue - total_costs, total_revenue),
        avg_sqm_per_unit=avg_sqm,
        construction_cost_per_sqm=safe_divide(costs.construction_cost_per_unit, avg_sqm),
    )
