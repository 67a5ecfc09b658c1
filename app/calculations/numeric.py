"""
Numeric helpers shared by the calculators.

Metrics that cannot be computed (division by zero, overflow) are reported
as None rather than NaN/Infinity so they serialise cleanly and render as
"n/a" instead of garbage.
"""

from typing import Optional

import numpy as np


def finite_or_none(value: Optional[float]) -> Optional[float]:
    """Return value as a float if it is finite, otherwise None."""
    if value is None:
        return None
    value = float(value)
    if not np.isfinite(value):
        return None
    return value


def safe_divide(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
    """Divide, returning None for a zero/undefined denominator or non-finite result."""
    if numerator is None or denominator is None or denominator == 0:
        return None
    return finite_or_none(numerator / denominator)
