"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from app.main import app
from app.calculations.parameters import (
    CostParameters,
    FinanceParameters,
    ProjectParameters,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture(scope="session")
def anyio_backend():
    """Backend for async tests."""
    return "asyncio"


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def project():
    """Reference project: 100 units, 30/40/25/5 mix."""
    return ProjectParameters()


@pytest.fixture
def costs():
    return CostParameters()


@pytest.fixture
def finance():
    return FinanceParameters()


@pytest.fixture
def single_type_project():
    """24 one-sqm studios at 100/sqm, sold one a month after a zero-length build."""
    return ProjectParameters(
        total_units=24,
        studio_units=24,
        one_br_units=0,
        two_br_units=0,
        three_br_units=0,
        studio_sqm=1,
        price_per_sqm=100,
        development_years=0,
        total_project_years=2,
        units_per_month=1,
    )


@pytest.fixture
def zero_costs():
    """No land, hard, soft, marketing, agency, overhead or contingency cost."""
    return CostParameters(
        land_acquisition_total=0,
        construction_cost_per_unit=0,
        soft_cost_per_unit=0,
        marketing_total=0,
        agency_fee_rate=0,
        overhead_per_unit=0,
        contingency_rate=0,
    )


@pytest.fixture
def unlevered_finance():
    return FinanceParameters(debt_to_equity_ratio=0, equity_investment=1500)
