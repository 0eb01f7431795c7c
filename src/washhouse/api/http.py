# src/washhouse/api/http.py
from __future__ import annotations

from fastapi import FastAPI, HTTPException

from washhouse.adapters.logging_utils import get_logger
from washhouse.analysis.metrics import calculate_metrics
from washhouse.analysis.projection import calculate_ten_year_projection
from washhouse.analysis.returns import initial_investment
from washhouse.domain.deal import DealInputs
from washhouse.domain.equipment import DEFAULT_EQUIPMENT_CATALOG
from washhouse.services.deal_analyzer import analyze_inputs, projection_assumptions, returns_summary
from washhouse.services.validation import validate_and_prepare_payload
from .schemas import AnalyzeResponse, DealBundleRequest, MetricsResponse, ProjectionResponse

logger = get_logger(__name__)

app = FastAPI(title="washhouse")


def _normalize(payload: DealBundleRequest) -> DealInputs:
    # normalization errors (incl. pydantic ValidationError) -> 400
    try:
        return validate_and_prepare_payload(payload.to_payload())
    except ValueError as e:
        logger.info("payload_rejected", extra={"context": {"error": str(e)}})
        raise HTTPException(status_code=400, detail=str(e)) from e


@app.post("/metrics", response_model=MetricsResponse)
def metrics_endpoint(payload: DealBundleRequest) -> MetricsResponse:
    """
    Scorecard only. A bundle without a deal returns the empty scorecard.
    """
    inputs = _normalize(payload)
    metrics = calculate_metrics(
        inputs.deal,
        inputs.lease_details,
        inputs.expense_items,
        inputs.machine_inventory,
        inputs.ancillary_income,
        inputs.utility_analysis,
    )
    return MetricsResponse(**metrics.to_dict())


@app.post("/projection", response_model=ProjectionResponse)
def projection_endpoint(payload: DealBundleRequest) -> ProjectionResponse:
    inputs = _normalize(payload)
    if inputs.deal is None:
        raise HTTPException(status_code=400, detail="Missing required section: deal")

    deal = inputs.deal
    projections = calculate_ten_year_projection(
        deal,
        inputs.lease_details,
        inputs.expense_items,
        inputs.machine_inventory,
        inputs.ancillary_income,
        assumptions=projection_assumptions(deal),
    )
    returns = returns_summary(projections, initial_investment(deal))

    return ProjectionResponse(
        projections=[p.to_dict() for p in projections],
        total_roi_percent=returns["total_roi_percent"],
        irr_percent=returns["irr_percent"],
        irr_status=returns["irr_status"],
    )


@app.post("/analyze", response_model=AnalyzeResponse)
def analyze_endpoint(payload: DealBundleRequest) -> AnalyzeResponse:
    """
    Everything at once: scorecard, projection, returns, breakeven, flags.
    """
    inputs = _normalize(payload)
    result = analyze_inputs(inputs)
    return AnalyzeResponse(**result)


@app.get("/equipment-catalog", response_model=dict[str, dict[str, float]])
def equipment_catalog() -> dict[str, dict[str, float]]:
    return DEFAULT_EQUIPMENT_CATALOG.to_dict()
