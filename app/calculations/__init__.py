"""
Financial Calculation Engine

Core calculation modules for for-sale development and rental analysis.
"""

from app.calculations import (
    budget,
    cashflow,
    development,
    irr,
    reality_checks,
    rental,
    sensitivity,
)

__all__ = [
    "budget",
    "cashflow",
    "development",
    "irr",
    "reality_checks",
    "rental",
    "sensitivity",
]
