"""
Reality Checks

Heuristic advisories that flag assumptions outside typical market ranges.
Advisories never block a calculation; they are returned alongside results.
"""

import enum
from dataclasses import dataclass
from typing import List, Optional

from app.calculations.budget import ProjectBudget
from app.calculations.irr import IRRResult
from app.calculations.numeric import finite_or_none, safe_divide
from app.calculations.parameters import CostParameters, ProjectParameters

MIN_CONSTRUCTION_COST_PER_SQM = 800
MAX_PRICE_TO_CONSTRUCTION_RATIO = 4.0
MIN_MONTHS_TO_SELL_OUT = 15
MAX_GROSS_MARGIN = 0.45
MIN_LAND_TO_REVENUE = 0.08
MAX_LAND_TO_REVENUE = 0.30
HIGH_IRR = 0.45
ABOVE_AVERAGE_IRR = 0.35
LOW_IRR = 0.15


class Severity(str, enum.Enum):
    warning = "warning"
    info = "info"


@dataclass(frozen=True)
class RealityCheck:
    severity: Severity
    message: str


def check_budget(
    project: ProjectParameters,
    costs: CostParameters,
    budget: ProjectBudget,
) -> List[RealityCheck]:
    """
    Run the budget-level checks in fixed order.

    Each rule is evaluated independently; a rule whose metric is undefined
    (e.g. zero revenue) is skipped.
    """
    checks = []

    cost_per_sqm = budget.construction_cost_per_sqm
    if cost_per_sqm is not None and cost_per_sqm < MIN_CONSTRUCTION_COST_PER_SQM:
        checks.append(
            RealityCheck(
                Severity.warning,
                f"Construction cost of €{cost_per_sqm:.0f}/sqm seems low. "
                f"Typical range: €900-1,400/sqm",
            )
        )

    price_ratio = safe_divide(project.price_per_sqm, cost_per_sqm)
    if price_ratio is not None and price_ratio > MAX_PRICE_TO_CONSTRUCTION_RATIO:
        checks.append(
            RealityCheck(
                Severity.warning,
                f"Price-to-construction ratio of {price_ratio:.1f}x is very high. "
                f"Typical range: 2.5-3.5x",
            )
        )

    months_to_sell_out = safe_divide(project.total_units, project.units_per_month)
    if months_to_sell_out is not None and months_to_sell_out < MIN_MONTHS_TO_SELL_OUT:
        checks.append(
            RealityCheck(
                Severity.warning,
                f"Selling {project.units_per_month:g} units/month "
                f"({months_to_sell_out:.1f} months to sell out) is very aggressive",
            )
        )

    margin = budget.gross_margin
    if margin is not None and margin > MAX_GROSS_MARGIN:
        checks.append(
            RealityCheck(
                Severity.warning,
                f"Gross margin of {margin * 100:.1f}% is exceptionally high. "
                f"Typical range: 20-35%",
            )
        )

    land_share = safe_divide(costs.land_acquisition_total, budget.total_revenue)
    if land_share is not None:
        if land_share < MIN_LAND_TO_REVENUE:
            checks.append(
                RealityCheck(
                    Severity.info,
                    f"Land cost at {land_share * 100:.1f}% of revenue is quite low. "
                    f"Typical range: 15-25%",
                )
            )
        elif land_share > MAX_LAND_TO_REVENUE:
            checks.append(
                RealityCheck(
                    Severity.warning,
                    f"Land cost at {land_share * 100:.1f}% of revenue is very high. "
                    f"Consider reducing",
                )
            )

    return checks


def check_irr(irr_rate: Optional[float]) -> List[RealityCheck]:
    """Run the return check once the IRR is known. irr_rate is a decimal."""
    irr_rate = finite_or_none(irr_rate)
    if irr_rate is None:
        return []

    pct = irr_rate * 100
    if irr_rate > HIGH_IRR:
        return [
            RealityCheck(
                Severity.warning,
                f"IRR of {pct:.1f}% is exceptionally high. Consider reviewing assumptions",
            )
        ]
    if irr_rate > ABOVE_AVERAGE_IRR:
        return [
            RealityCheck(
                Severity.info,
                f"IRR of {pct:.1f}% is above average. Verify market assumptions",
            )
        ]
    if irr_rate < LOW_IRR:
        return [
            RealityCheck(
                Severity.warning,
                f"IRR of {pct:.1f}% may be too low for development risk",
            )
        ]
    return []


def check_irr_result(result: IRRResult) -> List[RealityCheck]:
    """Return check for a solver result; a diverged solve gets a fixed warning."""
    if not result.reliable:
        return [
            RealityCheck(
                Severity.warning,
                "IRR could not be determined for these cash flows",
            )
        ]
    return check_irr(result.rate)
