# src/washhouse/api/schemas.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict


# --------------------------------------------
# Requests
# --------------------------------------------

class DealBundleRequest(BaseModel):
    """
    Raw deal bundle as the wizard holds it.

    Sections are left as plain dicts: normalization (string coercion,
    defaults, camelCase keys) happens in services.validation, not here.
    """
    model_config = ConfigDict(extra="allow")

    deal: dict[str, Any] | None = None
    lease_details: dict[str, Any] | None = None
    expense_items: list[dict[str, Any]] | None = None
    machine_inventory: list[dict[str, Any]] | None = None
    ancillary_income: dict[str, Any] | None = None
    utility_analysis: dict[str, Any] | None = None

    def to_payload(self) -> dict[str, Any]:
        return {k: v for k, v in self.model_dump().items() if v is not None}


# --------------------------------------------
# Responses
# --------------------------------------------

class MetricsResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    total_gross_income: float
    total_operating_expenses: float
    noi: float
    loan_amount: float
    annual_debt_service: float
    annual_cash_flow: float
    coc_roi: float
    cap_rate: float
    dscr: float
    suggested_valuation_low: float
    suggested_valuation_high: float
    valuation_multiplier: float


class YearlyProjectionItem(BaseModel):
    year: int
    gross_income: float
    operating_expenses: float
    noi: float
    debt_service: float
    cash_flow: float
    cap_ex: float
    cumulative_cash_flow: float


class ProjectionResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    projections: list[YearlyProjectionItem]
    total_roi_percent: float
    irr_percent: float | None = None
    irr_status: str = "converged"


class AnalyzeResponse(BaseModel):
    """
    Full analysis payload.

    The analyzer returns a rich dict with nested structures; keep this
    permissive so it won't break when fields are added.
    """
    model_config = ConfigDict(extra="allow")
