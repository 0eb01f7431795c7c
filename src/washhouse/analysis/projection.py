# src/washhouse/analysis/projection.py
from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from washhouse.domain.deal import (
    AncillaryIncome,
    Deal,
    ExpenseItem,
    LeaseDetails,
    MachineInventory,
)
from washhouse.domain.equipment import DEFAULT_EQUIPMENT_CATALOG, EquipmentCatalog, ReplacementSpec
from washhouse.domain.finance import deal_annual_debt_service
from washhouse.domain.results import ProjectionSummary, YearlyProjection

RENT_EXPENSE_NAME = "Rent"


@dataclass(frozen=True)
class ProjectionAssumptions:
    income_growth_rate: float = 0.02        # annual, fraction
    expense_growth_rate: float = 0.03       # every expense except escalated rent
    default_rent_growth_rate: float = 0.03  # used when the lease states no escalation
    horizon_years: int = 10

    @classmethod
    def from_deal(cls, deal: Deal, **overrides) -> "ProjectionAssumptions":
        """
        Growth taken from the deal's own income/expense growth fields.

        The default projection does not do this; callers opt in.
        """
        params = dict(
            income_growth_rate=deal.income_growth_rate_percent / 100.0,
            expense_growth_rate=deal.expense_growth_rate_percent / 100.0,
        )
        params.update(overrides)
        return cls(**params)


DEFAULT_ASSUMPTIONS = ProjectionAssumptions()


# ---------------------------------------------------------------------
# Equipment replacement scheduling
# ---------------------------------------------------------------------

def replacement_years(machine: MachineInventory, spec: ReplacementSpec, horizon_years: int) -> list[int]:
    """
    Years in [1, horizon] when this machine gets replaced.

    First replacement lands at (lifespan - age); later ones every lifespan
    years after that. Machines already past their lifespan can still have a
    later cycle land inside the window.
    """
    lifespan = spec.lifespan_years
    if lifespan <= 0:
        return []

    # jump straight to the first cycle at or after year 1
    first = lifespan - machine.age_years
    cycles_before_window = max(0, math.ceil((1 - first) / lifespan))
    next_year = first + cycles_before_window * lifespan

    years: list[int] = []
    while next_year <= horizon_years:
        if next_year >= 1 and float(next_year).is_integer():
            years.append(int(next_year))
        next_year += lifespan
    return years


def capex_for_year(
    machine_inventory: Sequence[MachineInventory],
    year: int,
    catalog: EquipmentCatalog = DEFAULT_EQUIPMENT_CATALOG,
    horizon_years: int = DEFAULT_ASSUMPTIONS.horizon_years,
) -> float:
    total = 0.0
    for machine in machine_inventory:
        spec = catalog.get(machine.machine_type)
        if spec is None:
            continue
        if year in replacement_years(machine, spec, horizon_years):
            total += spec.replacement_cost * machine.quantity
    return total


def capex_schedule(
    machine_inventory: Sequence[MachineInventory],
    catalog: EquipmentCatalog = DEFAULT_EQUIPMENT_CATALOG,
    horizon_years: int = DEFAULT_ASSUMPTIONS.horizon_years,
) -> list[float]:
    """CapEx per year, index 0 = year 1."""
    schedule = [0.0] * horizon_years
    for machine in machine_inventory:
        spec = catalog.get(machine.machine_type)
        if spec is None:
            continue
        for y in replacement_years(machine, spec, horizon_years):
            schedule[y - 1] += spec.replacement_cost * machine.quantity
    return schedule


# ---------------------------------------------------------------------
# Ten-year projection
# ---------------------------------------------------------------------

def _base_gross_income(deal: Deal, ancillary_income: AncillaryIncome | None) -> float:
    base = deal.gross_income_annual
    if ancillary_income is not None:
        base += ancillary_income.total_annual
    return base


def _rent_growth_rate(lease: LeaseDetails | None, assumptions: ProjectionAssumptions) -> float:
    # an unset or zero escalation both fall back to the default rate
    if lease is None or not lease.annual_rent_increase_percent:
        return assumptions.default_rent_growth_rate
    return lease.annual_rent_increase_percent / 100.0


def _operating_expenses_for_year(
    expense_items: Sequence[ExpenseItem],
    lease: LeaseDetails | None,
    year: int,
    assumptions: ProjectionAssumptions,
) -> float:
    """
    The "Rent" line follows the lease escalation when a lease is on file;
    everything else grows at the flat expense rate.
    """
    rent_growth = _rent_growth_rate(lease, assumptions)
    total = 0.0
    for expense in expense_items:
        if expense.expense_name == RENT_EXPENSE_NAME and lease is not None:
            total += lease.annual_rent * (1 + rent_growth) ** (year - 1)
        else:
            total += expense.amount_annual * (1 + assumptions.expense_growth_rate) ** (year - 1)
    return total


def calculate_ten_year_projection(
    deal: Deal,
    lease_details: LeaseDetails | None = None,
    expense_items: Sequence[ExpenseItem] = (),
    machine_inventory: Sequence[MachineInventory] = (),
    ancillary_income: AncillaryIncome | None = None,
    *,
    assumptions: ProjectionAssumptions | None = None,
    catalog: EquipmentCatalog | None = None,
) -> list[YearlyProjection]:
    """
    Year-by-year cash flow table, year 1 first.

    Debt service is the flat annual payment of the acquisition loan and drops
    to zero once the loan term has run out. CapEx comes from the equipment
    replacement schedule.
    """
    assumptions = assumptions or DEFAULT_ASSUMPTIONS
    catalog = catalog if catalog is not None else DEFAULT_EQUIPMENT_CATALOG
    expense_items = expense_items or ()
    machine_inventory = machine_inventory or ()

    base_gross_income = _base_gross_income(deal, ancillary_income)
    annual_debt = deal_annual_debt_service(deal)
    capex_by_year = capex_schedule(machine_inventory, catalog, assumptions.horizon_years)

    projections: list[YearlyProjection] = []
    cumulative = 0.0

    for year in range(1, assumptions.horizon_years + 1):
        gross_income = base_gross_income * (1 + assumptions.income_growth_rate) ** (year - 1)
        operating_expenses = _operating_expenses_for_year(expense_items, lease_details, year, assumptions)
        noi = gross_income - operating_expenses

        cap_ex = capex_by_year[year - 1]
        debt_service = annual_debt if year <= deal.loan_term_years else 0.0
        cash_flow = noi - debt_service - cap_ex
        cumulative += cash_flow

        projections.append(
            YearlyProjection(
                year=year,
                gross_income=gross_income,
                operating_expenses=operating_expenses,
                noi=noi,
                debt_service=debt_service,
                cash_flow=cash_flow,
                cap_ex=cap_ex,
                cumulative_cash_flow=cumulative,
            )
        )

    return projections


def summarize_projection(
    projections: Sequence[YearlyProjection],
    initial_investment: float,
) -> ProjectionSummary:
    if not projections:
        return ProjectionSummary(
            total_cash_flow=0.0,
            total_cap_ex=0.0,
            avg_annual_cash_flow=0.0,
            final_cumulative_cash_flow=0.0,
            payback_years=None,
        )

    total_cash_flow = sum(p.cash_flow for p in projections)
    avg = total_cash_flow / len(projections)
    return ProjectionSummary(
        total_cash_flow=total_cash_flow,
        total_cap_ex=sum(p.cap_ex for p in projections),
        avg_annual_cash_flow=avg,
        final_cumulative_cash_flow=projections[-1].cumulative_cash_flow,
        payback_years=initial_investment / avg if avg > 0 else None,
    )
