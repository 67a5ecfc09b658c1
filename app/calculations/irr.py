"""
IRR and NPV Calculations

Implements IRR using the Newton-Raphson method over periodic (annual) cash
flows. Discounting runs on numpy float64 so that a runaway rate overflows
to inf/nan instead of raising mid-iteration.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from app.calculations.numeric import finite_or_none

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-4  # Stop once |NPV| falls below this
DEFAULT_GUESS = 0.1
NPV_DISCOUNT_RATE = 0.10

# Rates outside this band are reported as unreliable
SANE_RATE_MIN = -0.99
SANE_RATE_MAX = 10.0


@dataclass(frozen=True)
class IRRResult:
    """Outcome of an IRR solve. rate is a decimal (0.15 = 15%)."""

    rate: float
    converged: bool
    iterations: int

    @property
    def reliable(self) -> bool:
        return (
            self.converged
            and bool(np.isfinite(self.rate))
            and SANE_RATE_MIN <= self.rate <= SANE_RATE_MAX
        )

    @property
    def percent(self) -> Optional[float]:
        return finite_or_none(self.rate * 100)

    @property
    def display_percent(self) -> Optional[float]:
        """Percent for display; None unless the solve is reliable."""
        if not self.reliable:
            return None
        return self.percent


def calculate_npv(cash_flows: List[float], discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of cash flows.

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow),
            the flow at index i is discounted by (1 + rate) ** i
        discount_rate: Periodic discount rate (e.g., 0.10 for 10%)

    Returns:
        NPV value (may be inf/nan for degenerate rates)
    """
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(len(flows))
    with np.errstate(all="ignore"):
        return float(np.sum(flows / np.power(1.0 + discount_rate, periods)))


def _npv_derivative(cash_flows: List[float], rate: float) -> float:
    """Calculate derivative of NPV with respect to rate (for Newton-Raphson)."""
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(len(flows))
    with np.errstate(all="ignore"):
        return float(-np.sum(periods * flows / np.power(1.0 + rate, periods + 1)))


def solve_irr(cash_flows: List[float], guess: float = DEFAULT_GUESS) -> IRRResult:
    """
    Solve for IRR with bounded Newton-Raphson iteration.

    There is no bracketing and no sign-change check: a sequence without a
    root (e.g. all outflows) simply fails to converge. The solver never
    raises; callers inspect `converged` / `reliable` on the result.

    Args:
        cash_flows: Periodic cash flows, index 0 = time zero
        guess: Initial rate (default 0.1 = 10%)

    Returns:
        IRRResult with the last rate reached
    """
    rate = guess

    for iteration in range(MAX_ITERATIONS):
        npv = calculate_npv(cash_flows, rate)

        if abs(npv) < TOLERANCE:
            return IRRResult(rate=rate, converged=True, iterations=iteration)

        dnpv = _npv_derivative(cash_flows, rate)

        if dnpv == 0 or not np.isfinite(npv) or not np.isfinite(dnpv):
            logger.debug(f"IRR iteration stopped at step {iteration}: npv={npv}, dnpv={dnpv}")
            return IRRResult(rate=rate, converged=False, iterations=iteration)

        rate = rate - npv / dnpv

    return IRRResult(rate=rate, converged=False, iterations=MAX_ITERATIONS)


def calculate_irr(cash_flows: List[float], guess: float = DEFAULT_GUESS) -> float:
    """
    Calculate IRR, rejecting cash flows that cannot have a meaningful one.

    Args:
        cash_flows: Array of periodic cash flows
        guess: Initial guess for rate (default 0.1 = 10%)

    Returns:
        IRR as decimal (e.g., 0.15 for 15%)

    Raises:
        ValueError: If IRR cannot be calculated
    """
    if len(cash_flows) < 2:
        raise ValueError("At least 2 cash flows required")

    has_positive = any(cf > 0 for cf in cash_flows)
    has_negative = any(cf < 0 for cf in cash_flows)

    if not has_positive or not has_negative:
        raise ValueError("Cash flows must contain both positive and negative values")

    result = solve_irr(cash_flows, guess)
    if not result.converged:
        raise ValueError("IRR calculation did not converge")

    return result.rate


def calculate_multiple(cash_flows: List[float]) -> float:
    """
    Calculate equity multiple.

    Args:
        cash_flows: Array of cash flows (investments are negative)

    Returns:
        Multiple (e.g., 2.0 = 2.0x return)
    """
    total_inflows = sum(cf for cf in cash_flows if cf > 0)
    total_outflows = abs(sum(cf for cf in cash_flows if cf < 0))

    if total_outflows == 0:
        raise ValueError("No investment (outflows) found")

    return total_inflows / total_outflows


def calculate_profit(cash_flows: List[float]) -> float:
    """Calculate profit (total inflows minus total outflows)."""
    return sum(cash_flows)
