# src/washhouse/analysis/metrics.py
from __future__ import annotations

from collections.abc import Sequence

from washhouse.domain.deal import (
    AncillaryIncome,
    Deal,
    ExpenseItem,
    LeaseDetails,
    MachineInventory,
    UtilityAnalysis,
)
from washhouse.domain.finance import annual_debt_service, down_payment_amount
from washhouse.domain.results import CalculatedMetrics

BASE_MULTIPLIER = 4.0
MIN_MULTIPLIER = 2.5
MAX_MULTIPLIER = 6.0
VALUATION_BAND = 0.15


def _total_gross_income(deal: Deal, ancillary_income: AncillaryIncome | None) -> float:
    """
    Reported gross + WDF + vending/other + value-added services.
    """
    total = deal.gross_income_annual
    if ancillary_income is not None:
        total += ancillary_income.total_annual
    total += sum(s.potential_revenue for s in deal.value_added_services)
    return total


def _age_adjustment(machines: Sequence[MachineInventory]) -> float:
    if not machines:
        return 0.0
    avg_age = sum(m.age_years for m in machines) / len(machines)
    if avg_age <= 5:
        return 0.75
    if avg_age <= 10:
        return 0.25
    if avg_age > 15:
        return -0.5
    return 0.0


def _condition_adjustment(machines: Sequence[MachineInventory]) -> float:
    if not machines:
        return 0.0
    avg_condition = sum(m.condition_rating for m in machines) / len(machines)
    if avg_condition >= 4:
        return 0.25
    if avg_condition <= 2:
        return -0.5
    return 0.0


def _lease_adjustment(lease: LeaseDetails | None, total_gross_income: float) -> float:
    """
    Lease runway plus rent burden. No lease on file, no adjustment.
    """
    if lease is None:
        return 0.0

    adj = 0.0
    term = lease.total_term_years
    if term >= 15:
        adj += 0.5
    elif term < 5:
        adj -= 0.75

    rent_ratio = lease.annual_rent / total_gross_income if total_gross_income > 0 else 0.0
    if rent_ratio >= 0.33:
        adj -= 0.5
    elif rent_ratio <= 0.15:
        adj += 0.25

    return adj


def _cap_rate_adjustment(cap_rate: float) -> float:
    if cap_rate >= 10:
        return 0.25
    if cap_rate < 6:
        return -0.5
    return 0.0


def valuation_multiplier(
    machines: Sequence[MachineInventory],
    lease: LeaseDetails | None,
    total_gross_income: float,
    cap_rate: float,
) -> float:
    """
    NOI multiple for a laundromat business sale.

    Starts at 4.0x and moves on equipment age, lease runway, rent burden,
    cap rate and equipment condition. Each signal fires at most once and the
    result is clamped to [2.5, 6.0].
    """
    m = BASE_MULTIPLIER
    m += _age_adjustment(machines)
    m += _lease_adjustment(lease, total_gross_income)
    m += _cap_rate_adjustment(cap_rate)
    m += _condition_adjustment(machines)
    return max(MIN_MULTIPLIER, min(MAX_MULTIPLIER, m))


def calculate_metrics(
    deal: Deal | None,
    lease_details: LeaseDetails | None = None,
    expense_items: Sequence[ExpenseItem] = (),
    machine_inventory: Sequence[MachineInventory] = (),
    ancillary_income: AncillaryIncome | None = None,
    utility_analysis: UtilityAnalysis | None = None,
) -> CalculatedMetrics:
    """
    Point-in-time scorecard for a deal.

    A missing deal is the "nothing entered yet" state and yields the empty
    scorecard. utility_analysis is accepted so callers can hand over the whole
    deal bundle; it does not move any metric.
    """
    if deal is None:
        return CalculatedMetrics.empty()

    expense_items = expense_items or ()
    machine_inventory = machine_inventory or ()

    # --- income / expenses ---
    total_gross_income = _total_gross_income(deal, ancillary_income)
    total_operating_expenses = sum(e.amount_annual for e in expense_items)
    noi = total_gross_income - total_operating_expenses

    # --- financing ---
    down_payment = down_payment_amount(deal)
    loan_amount = deal.asking_price - down_payment
    debt_service = annual_debt_service(
        principal=loan_amount,
        annual_rate_percent=deal.loan_interest_rate_percent,
        term_years=deal.loan_term_years,
    )

    # --- returns ---
    annual_cash_flow = noi - debt_service
    coc_roi = annual_cash_flow / down_payment * 100 if down_payment > 0 else 0.0
    cap_rate = noi / deal.asking_price * 100 if deal.asking_price > 0 else 0.0
    dscr = noi / debt_service if debt_service > 0 else 0.0

    # --- valuation ---
    multiplier = valuation_multiplier(machine_inventory, lease_details, total_gross_income, cap_rate)
    # with negative NOI the band flips; keep low <= high
    low, high = sorted((noi * (multiplier - VALUATION_BAND), noi * (multiplier + VALUATION_BAND)))

    return CalculatedMetrics(
        total_gross_income=total_gross_income,
        total_operating_expenses=total_operating_expenses,
        noi=noi,
        loan_amount=loan_amount,
        annual_debt_service=debt_service,
        annual_cash_flow=annual_cash_flow,
        coc_roi=coc_roi,
        cap_rate=cap_rate,
        dscr=dscr,
        suggested_valuation_low=low,
        suggested_valuation_high=high,
        valuation_multiplier=multiplier,
    )
