# src/washhouse/services/deal_analyzer.py
from __future__ import annotations

from typing import Any

from washhouse.adapters.config import AppConfig, config
from washhouse.adapters.logging_utils import get_logger
from washhouse.analysis.breakeven import calculate_breakeven
from washhouse.analysis.metrics import calculate_metrics
from washhouse.analysis.projection import (
    ProjectionAssumptions,
    calculate_ten_year_projection,
    summarize_projection,
)
from washhouse.analysis.returns import (
    IrrUnresolvedError,
    calculate_irr,
    calculate_roi,
    initial_investment,
)
from washhouse.analysis.utility_income import collection_based_income, water_based_income
from washhouse.domain.deal import Deal, DealInputs
from washhouse.domain.equipment import DEFAULT_EQUIPMENT_CATALOG, EquipmentCatalog
from washhouse.services.guardrails import apply_guardrails
from washhouse.services.validation import validate_and_prepare_payload

logger = get_logger(__name__)


def projection_assumptions(deal: Deal, settings: AppConfig = config) -> ProjectionAssumptions:
    """
    Growth assumptions for the projection table.

    By default these are the flat house rates from settings; the deal's own
    growth fields only apply when USE_DEAL_GROWTH_RATES is switched on.
    """
    if settings.USE_DEAL_GROWTH_RATES:
        return ProjectionAssumptions.from_deal(
            deal,
            default_rent_growth_rate=settings.DEFAULT_RENT_GROWTH_RATE,
            horizon_years=settings.PROJECTION_YEARS,
        )
    return ProjectionAssumptions(
        income_growth_rate=settings.INCOME_GROWTH_RATE,
        expense_growth_rate=settings.EXPENSE_GROWTH_RATE,
        default_rent_growth_rate=settings.DEFAULT_RENT_GROWTH_RATE,
        horizon_years=settings.PROJECTION_YEARS,
    )


def returns_summary(projections, investment: float, settings: AppConfig = config) -> dict[str, Any]:
    """Total ROI and IRR; an IRR that cannot be solved comes back as None/"unresolved"."""
    try:
        irr = calculate_irr(
            projections,
            investment,
            seed=settings.IRR_SEED,
            tolerance=settings.IRR_TOLERANCE,
            max_iterations=settings.IRR_MAX_ITERATIONS,
            bracket=settings.irr_bracket,
        )
        irr_status = "converged"
    except IrrUnresolvedError as exc:
        logger.warning(
            "irr_unresolved",
            extra={"context": {"initial_investment": investment, "error": str(exc)}},
        )
        irr = None
        irr_status = "unresolved"

    return {
        "initial_investment": investment,
        "total_roi_percent": calculate_roi(projections, investment),
        "irr_percent": irr,
        "irr_status": irr_status,
    }


def analyze_inputs(
    inputs: DealInputs,
    *,
    catalog: EquipmentCatalog = DEFAULT_EQUIPMENT_CATALOG,
    settings: AppConfig = config,
) -> dict[str, Any]:
    """
    Full analysis of one normalized deal bundle.

    Returns a JSON-ready dict with the scorecard, the projection table and
    its summary, ROI/IRR, breakeven, utility income cross-checks and
    guardrail flags. A bundle without a deal gets the empty scorecard and
    no projection.
    """
    deal = inputs.deal

    metrics = calculate_metrics(
        deal,
        inputs.lease_details,
        inputs.expense_items,
        inputs.machine_inventory,
        inputs.ancillary_income,
        inputs.utility_analysis,
    )

    result: dict[str, Any] = {
        "deal": None,
        "metrics": metrics.to_dict(),
        "projection": [],
        "summary": None,
        "returns": None,
        "breakeven": calculate_breakeven(deal, inputs.expense_items).to_dict(),
        "income_checks": {
            "reported_gross_income": deal.gross_income_annual if deal else 0.0,
            "water_based_income": water_based_income(inputs.utility_analysis, inputs.machine_inventory),
            "collection_based_income": collection_based_income(inputs.utility_analysis),
        },
    }

    if deal is None:
        logger.info("deal_analysis_skipped", extra={"context": {"reason": "no deal"}})
        return apply_guardrails(inputs, result)

    projections = calculate_ten_year_projection(
        deal,
        inputs.lease_details,
        inputs.expense_items,
        inputs.machine_inventory,
        inputs.ancillary_income,
        assumptions=projection_assumptions(deal, settings),
        catalog=catalog,
    )
    investment = initial_investment(deal)

    result["deal"] = {
        "deal_id": deal.deal_id,
        "deal_name": deal.deal_name,
        "property_address": deal.property_address,
        "asking_price": deal.asking_price,
    }
    result["projection"] = [p.to_dict() for p in projections]
    result["summary"] = summarize_projection(projections, investment).to_dict()
    result["returns"] = returns_summary(projections, investment, settings)

    logger.info(
        "deal_analyzed",
        extra={
            "context": {
                "deal_id": deal.deal_id,
                "noi": metrics.noi,
                "cap_rate": metrics.cap_rate,
                "valuation_multiplier": metrics.valuation_multiplier,
                "irr_status": result["returns"]["irr_status"],
            }
        },
    )

    return apply_guardrails(inputs, result)


def analyze_deal(
    raw_payload: dict[str, Any],
    *,
    catalog: EquipmentCatalog = DEFAULT_EQUIPMENT_CATALOG,
    settings: AppConfig = config,
) -> dict[str, Any]:
    """
    Normalize a raw payload (flat deal or full bundle) and analyze it.
    Raises ValueError for payloads that cannot be normalized.
    """
    inputs = validate_and_prepare_payload(raw_payload)
    return analyze_inputs(inputs, catalog=catalog, settings=settings)
