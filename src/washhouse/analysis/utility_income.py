# src/washhouse/analysis/utility_income.py
from __future__ import annotations

from collections.abc import Sequence

from washhouse.domain.deal import MachineInventory, UtilityAnalysis


def water_based_income(
    utility_analysis: UtilityAnalysis | None,
    machine_inventory: Sequence[MachineInventory],
) -> float:
    """
    Back out annual washer revenue from the water bill.

    gallons/month / avg gallons per cycle = cycles/month, times the average
    washer vend price, times 12. Only washers with a stated water figure
    count. Returns 0 when the bill or the washer data is missing.
    """
    if utility_analysis is None or not machine_inventory:
        return 0.0
    if utility_analysis.water_bill_period_months <= 0:
        return 0.0

    washers = [
        m for m in machine_inventory
        if m.is_washer and m.water_consumption_gal_per_cycle
    ]
    if not washers:
        return 0.0

    total_units = sum(w.quantity for w in washers)
    avg_gal_per_cycle = sum(w.water_consumption_gal_per_cycle * w.quantity for w in washers) / total_units

    monthly_gallons = utility_analysis.water_bill_total_gallons / utility_analysis.water_bill_period_months
    cycles_per_month = monthly_gallons / avg_gal_per_cycle

    avg_vend_price = sum(w.vend_price_per_use for w in washers) / len(washers)
    return cycles_per_month * avg_vend_price * 12


def collection_based_income(utility_analysis: UtilityAnalysis | None) -> float:
    """Annualized coin/card collections."""
    if utility_analysis is None or utility_analysis.collection_period_weeks <= 0:
        return 0.0
    return utility_analysis.total_collected_amount / utility_analysis.collection_period_weeks * 52
