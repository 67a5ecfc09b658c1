"""
Development Model Inputs

Project, cost and finance parameters for a for-sale residential development.
Defaults mirror the reference scenario used by the calculator front end.
"""

import enum
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple


class ExitStrategy(str, enum.Enum):
    """When unit sales are recognised in the monthly schedule."""

    presales = "presales"  # Sales start during construction
    postconstruction = "postconstruction"  # Sales start after completion


@dataclass(frozen=True)
class ProjectParameters:
    """Unit mix, pricing and timing of the project."""

    total_units: int = 100
    studio_units: int = 30
    one_br_units: int = 40
    two_br_units: int = 25
    three_br_units: int = 5
    studio_sqm: float = 35
    one_br_sqm: float = 55
    two_br_sqm: float = 75
    three_br_sqm: float = 95
    price_per_sqm: float = 2900
    development_years: float = 2.5
    total_project_years: float = 4.5
    units_per_month: float = 5
    start_date: Optional[date] = None

    def unit_mix(self) -> List[Tuple[str, int, float]]:
        """Return (type, count, sqm) per unit type, in display order."""
        return [
            ("Studio", self.studio_units, self.studio_sqm),
            ("1BR", self.one_br_units, self.one_br_sqm),
            ("2BR", self.two_br_units, self.two_br_sqm),
            ("3BR", self.three_br_units, self.three_br_sqm),
        ]

    @property
    def total_sqm(self) -> float:
        return sum(count * sqm for _, count, sqm in self.unit_mix())

    @property
    def construction_months(self) -> float:
        return self.development_years * 12

    @property
    def project_months(self) -> float:
        return self.total_project_years * 12


@dataclass(frozen=True)
class CostParameters:
    """Hard, soft and sales costs. Rates are decimals (0.03 = 3%)."""

    land_acquisition_total: float = 2_200_000
    construction_cost_per_unit: float = 58_000
    soft_cost_per_unit: float = 12_000
    marketing_total: float = 250_000
    agency_fee_rate: float = 0.03
    overhead_per_unit: float = 5_000
    contingency_rate: float = 0.08  # Applied to construction + soft costs


@dataclass(frozen=True)
class FinanceParameters:
    """Capital structure. Debt is sized off equity, priced at base rate + spread."""

    debt_to_equity_ratio: float = 1.2
    base_rate: float = 0.035  # 6M EURIBOR
    spread: float = 0.01
    equity_investment: float = 4_000_000

    @property
    def interest_rate(self) -> float:
        return self.base_rate + self.spread

    @property
    def total_debt(self) -> float:
        return self.equity_investment * self.debt_to_equity_ratio

    @property
    def total_investment(self) -> float:
        return self.equity_investment + self.total_debt


DEFAULT_SENSITIVITY_RANGE = 0.2  # +/- 20% on price per sqm
