"""
Cash Flow Calculations

Generates the monthly development cash flow schedule and rolls it up into
the annual series used for IRR/NPV.

The schedule is a fold over months: cumulative revenue, cumulative costs
and the outstanding debt balance are carried from one month to the next in
an explicit ScheduleState.
"""

from dataclasses import dataclass, replace
from datetime import date
from typing import List, Optional, Tuple

import numpy as np
from dateutil.relativedelta import relativedelta

from app.calculations.budget import ProjectBudget
from app.calculations.numeric import safe_divide
from app.calculations.parameters import (
    CostParameters,
    ExitStrategy,
    FinanceParameters,
    ProjectParameters,
)

PRESALES_START_FRACTION = 0.3  # Pre-sales open 30% into construction


@dataclass(frozen=True)
class MonthlyCashFlow:
    """One month of the development schedule."""

    month: int
    year: int
    revenue: float
    costs: float  # Includes interest expense
    interest_expense: float
    net_cash_flow: float
    cumulative_revenue: float
    cumulative_costs: float
    outstanding_debt: float  # Balance after this month's paydown
    date: Optional[str] = None


@dataclass(frozen=True)
class AnnualCashFlow:
    year: int
    cash_flow: float


@dataclass(frozen=True)
class ScheduleState:
    """Running totals carried between months."""

    cumulative_revenue: float
    cumulative_costs: float
    outstanding_debt: float


def generate_monthly_dates(start_date: date, num_months: int) -> List[date]:
    """Generate array of monthly dates."""
    return [start_date + relativedelta(months=i) for i in range(num_months + 1)]


def _sales_revenue(
    project: ProjectParameters,
    state: ScheduleState,
    avg_unit_price: Optional[float],
) -> float:
    """Revenue from units sold this month at the absorption pace, capped by remaining stock."""
    if not avg_unit_price:
        return 0.0
    # Units sold so far are implied by revenue recognised at the average price
    remaining_units = project.total_units - state.cumulative_revenue / avg_unit_price
    return min(project.units_per_month, remaining_units) * avg_unit_price


def step_month(
    month: int,
    state: ScheduleState,
    project: ProjectParameters,
    costs: CostParameters,
    finance: FinanceParameters,
    budget: ProjectBudget,
    exit_strategy: ExitStrategy,
) -> Tuple[MonthlyCashFlow, ScheduleState]:
    """
    Compute a single month of the schedule.

    Returns:
        The month's record and the state to carry into the next month
    """
    construction_months = project.construction_months
    avg_unit_price = safe_divide(budget.total_revenue, project.total_units)

    revenue = 0.0
    month_costs = 0.0
    interest_expense = 0.0

    if month == 0:
        month_costs += costs.land_acquisition_total

    if 0 < month <= construction_months:
        # Hard, soft, overhead and contingency spread evenly over construction
        month_costs += (
            budget.construction_cost
            + budget.soft_cost
            + budget.overhead
            + budget.contingency_cost
        ) / construction_months

        if (
            exit_strategy == ExitStrategy.presales
            and month >= construction_months * PRESALES_START_FRACTION
        ):
            revenue = _sales_revenue(project, state, avg_unit_price)

        month_costs += costs.marketing_total / construction_months

    if exit_strategy == ExitStrategy.postconstruction and month > construction_months:
        revenue = _sales_revenue(project, state, avg_unit_price)

    if revenue > 0:
        month_costs += revenue * costs.agency_fee_rate

    outstanding_debt = state.outstanding_debt
    if outstanding_debt > 0:
        interest_expense = outstanding_debt * (finance.interest_rate / 12)
        month_costs += interest_expense

    net_cash_flow = revenue - month_costs

    # Surplus cash sweeps the debt; there is no fixed amortization
    if net_cash_flow > 0 and outstanding_debt > 0:
        paydown = min(net_cash_flow, outstanding_debt)
        outstanding_debt = max(0.0, outstanding_debt - paydown)

    new_state = ScheduleState(
        cumulative_revenue=state.cumulative_revenue + revenue,
        cumulative_costs=state.cumulative_costs + month_costs,
        outstanding_debt=outstanding_debt,
    )

    record = MonthlyCashFlow(
        month=month,
        year=month // 12,
        revenue=revenue,
        costs=month_costs,
        interest_expense=interest_expense,
        net_cash_flow=net_cash_flow,
        cumulative_revenue=new_state.cumulative_revenue,
        cumulative_costs=new_state.cumulative_costs,
        outstanding_debt=new_state.outstanding_debt,
    )
    return record, new_state


def generate_cash_flows(
    project: ProjectParameters,
    costs: CostParameters,
    finance: FinanceParameters,
    budget: ProjectBudget,
    exit_strategy: ExitStrategy = ExitStrategy.presales,
) -> List[MonthlyCashFlow]:
    """
    Generate the monthly development cash flow schedule.

    Simulates months 0 through floor(total_project_years * 12) inclusive.
    Debt is drawn in full at month 0 and accrues interest monthly until
    positive net cash flow has repaid it.

    Args:
        project: Unit mix, pricing and timing
        costs: Cost assumptions
        finance: Capital structure
        budget: Pre-computed revenue/cost totals for the same inputs
        exit_strategy: Whether sales start during or after construction

    Returns:
        One MonthlyCashFlow per month, in month order
    """
    num_months = int(np.floor(project.project_months))
    dates = None
    if project.start_date is not None and num_months >= 0:
        dates = generate_monthly_dates(project.start_date, num_months)

    state = ScheduleState(
        cumulative_revenue=0.0,
        cumulative_costs=0.0,
        outstanding_debt=finance.total_debt,
    )
    cash_flows = []

    for month in range(num_months + 1):
        record, state = step_month(
            month, state, project, costs, finance, budget, exit_strategy
        )
        if dates is not None:
            record = replace(record, date=dates[month].isoformat())
        cash_flows.append(record)

    return cash_flows


def annualize_cash_flows(
    monthly_cash_flows: List[MonthlyCashFlow],
    total_project_years: float,
    equity_investment: float,
) -> List[AnnualCashFlow]:
    """
    Convert monthly net cash flows to annual totals.

    Produces years 0 through floor(total_project_years). The equity
    investment is booked as an outflow in year 0.
    """
    num_years = int(np.floor(total_project_years))
    totals = [0.0] * (num_years + 1)

    for cf in monthly_cash_flows:
        if 0 <= cf.year <= num_years:
            totals[cf.year] += cf.net_cash_flow

    annual_data = []
    for year, total in enumerate(totals):
        if year == 0:
            total -= equity_investment
        annual_data.append(AnnualCashFlow(year=year, cash_flow=total))

    return annual_data
