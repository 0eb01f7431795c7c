# src/washhouse/services/guardrails.py
from __future__ import annotations

from typing import Any, Dict, List

from washhouse.adapters.logging_utils import get_logger
from washhouse.domain.deal import DealInputs

logger = get_logger(__name__)

# Expense lines every laundromat P&L should carry in some form
REQUIRED_EXPENSE_CATEGORIES = ("rent", "utilities", "insurance", "maintenance")

# Utility bills are often itemized instead of lumped under "utilities"
_UTILITY_ALIASES = ("utilit", "water", "sewer", "gas", "electric")


def _flag(code: str, severity: str, message: str, **context: Any) -> Dict[str, Any]:
    return {
        "code": code,
        "severity": severity,
        "message": message,
        "context": context,
    }


def _has_expense_category(names: List[str], category: str) -> bool:
    if category == "utilities":
        return any(alias in n for n in names for alias in _UTILITY_ALIASES)
    return any(category in n for n in names)


def apply_guardrails(
    inputs: DealInputs,
    result: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Attach data-quality and risk checks to the deal analysis result.

    Produces:
        result["guardrails"] = {
            "has_flags": bool,
            "flags": [
                {
                    "code": "EXPENSE_RATIO_HIGH",
                    "severity": "warning" | "error" | "suggestion",
                    "message": "...human readable...",
                    "context": {...raw numbers...},
                },
                ...
            ],
        }

    These do *not* block anything; they just flag suspicious inputs so the
    UI / caller can highlight them.
    """
    flags: List[Dict[str, Any]] = []

    deal = inputs.deal
    metrics = result.get("metrics") or {}
    returns = result.get("returns") or {}

    if deal is None:
        result.setdefault("guardrails", {})
        result["guardrails"]["flags"] = flags
        result["guardrails"]["has_flags"] = False
        return result

    gross = deal.gross_income_annual

    # ------------------------------------------------------------------
    # 1) Basic data sanity
    # ------------------------------------------------------------------
    if deal.asking_price <= 0:
        flags.append(_flag("ASKING_PRICE_MISSING", "warning", "Asking price is missing or zero.",
                           asking_price=deal.asking_price))

    if gross <= 0:
        flags.append(_flag("GROSS_INCOME_MISSING", "warning", "Reported gross income is missing or zero.",
                           gross_income_annual=gross))

    # ------------------------------------------------------------------
    # 2) Income vs industry norms
    # ------------------------------------------------------------------
    if gross > 0 and deal.facility_size_sqft > 0:
        per_sqft = gross / deal.facility_size_sqft
        if per_sqft < 50:
            flags.append(_flag(
                "INCOME_PER_SQFT_LOW", "warning",
                f"Income per sq ft (${per_sqft:.2f}) is below industry standard ($50-150/sq ft).",
                income_per_sqft=per_sqft,
            ))

    if gross > 0 and deal.annual_net:
        margin = deal.annual_net / gross * 100
        if margin < 25:
            flags.append(_flag(
                "NOI_MARGIN_LOW", "warning",
                f"NOI margin ({margin:.1f}%) is below industry standard (25-35%).",
                noi_margin_pct=margin,
            ))
        elif margin > 50:
            flags.append(_flag(
                "NOI_MARGIN_HIGH", "warning",
                f"NOI margin ({margin:.1f}%) seems unusually high; verify expenses are complete.",
                noi_margin_pct=margin,
            ))

    # ------------------------------------------------------------------
    # 3) Expenses
    # ------------------------------------------------------------------
    total_expenses = sum(e.amount_annual for e in inputs.expense_items)
    if gross > 0 and total_expenses:
        ratio = total_expenses / gross * 100
        if ratio < 30:
            flags.append(_flag(
                "EXPENSE_RATIO_LOW", "warning",
                f"Total expense ratio ({ratio:.1f}%) seems low; ensure all expenses are included.",
                expense_ratio_pct=ratio,
            ))
        elif ratio > 75:
            flags.append(_flag(
                "EXPENSE_RATIO_HIGH", "warning",
                f"Total expense ratio ({ratio:.1f}%) is very high; verify expense amounts.",
                expense_ratio_pct=ratio,
            ))

    names = [e.expense_name.lower() for e in inputs.expense_items]
    for category in REQUIRED_EXPENSE_CATEGORIES:
        if not _has_expense_category(names, category):
            flags.append(_flag(
                f"EXPENSE_MISSING_{category.upper()}", "suggestion",
                f"Consider adding {category} expense if not already included.",
                category=category,
            ))

    # ------------------------------------------------------------------
    # 4) Equipment
    # ------------------------------------------------------------------
    machines = inputs.machine_inventory
    if machines:
        avg_age = sum(m.age_years for m in machines) / len(machines)
        if avg_age > 15:
            flags.append(_flag(
                "EQUIPMENT_AGE_HIGH", "warning",
                f"Average equipment age ({avg_age:.1f} years) indicates potential major replacement costs.",
                avg_age_years=avg_age,
            ))

        avg_condition = sum(m.condition_rating for m in machines) / len(machines)
        if avg_condition < 2.5:
            flags.append(_flag(
                "EQUIPMENT_CONDITION_POOR", "warning",
                "Poor average equipment condition may require immediate repairs/replacements.",
                avg_condition=avg_condition,
            ))

    # ------------------------------------------------------------------
    # 5) Seller-stated cap rate
    # ------------------------------------------------------------------
    if deal.asking_price > 0 and deal.annual_net:
        stated_cap = deal.annual_net / deal.asking_price * 100
        if stated_cap < 6:
            flags.append(_flag(
                "STATED_CAP_RATE_LOW", "warning",
                f"Cap rate ({stated_cap:.1f}%) is below typical laundromat range (8-12%).",
                stated_cap_rate_pct=stated_cap,
            ))
        elif stated_cap > 15:
            flags.append(_flag(
                "STATED_CAP_RATE_HIGH", "warning",
                f"Cap rate ({stated_cap:.1f}%) is unusually high; verify all data is accurate.",
                stated_cap_rate_pct=stated_cap,
            ))

    # ------------------------------------------------------------------
    # 6) Computed results
    # ------------------------------------------------------------------
    dscr = float(metrics.get("dscr") or 0.0)
    if dscr and dscr < 1.0:
        flags.append(_flag(
            "DSCR_BELOW_ONE", "error",
            "DSCR below 1.0; income does not cover the loan payment.",
            dscr=dscr,
        ))

    if returns.get("irr_status") == "unresolved":
        flags.append(_flag(
            "IRR_UNRESOLVED", "warning",
            "IRR could not be computed for this cash-flow series.",
            initial_investment=returns.get("initial_investment"),
        ))

    # ------------------------------------------------------------------
    # Attach & log
    # ------------------------------------------------------------------
    result.setdefault("guardrails", {})
    result["guardrails"]["flags"] = flags
    result["guardrails"]["has_flags"] = bool(flags)

    if flags:
        logger.info("deal_guardrails_flags", extra={"context": {"codes": [f["code"] for f in flags]}})

    return result
