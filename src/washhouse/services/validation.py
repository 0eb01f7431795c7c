# src/washhouse/services/validation.py

from typing import Any, get_args

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from washhouse.domain.deal import (
    AncillaryIncome,
    Deal,
    DealInputs,
    ExpenseItem,
    LeaseDetails,
    MachineInventory,
    UtilityAnalysis,
    ValueAddedService,
)

# Fields that are truly required to reason about a deal
REQUIRED_DEAL_FIELDS = [
    "asking_price",
]

# Defaults applied here and nowhere else; callers pass raw user input only
DEFAULT_DOWN_PAYMENT_PERCENT = 25.0
DEFAULT_INTEREST_RATE_PERCENT = 7.5
DEFAULT_LOAN_TERM_YEARS = 10
DEFAULT_INCOME_GROWTH_RATE_PERCENT = 2.0
DEFAULT_EXPENSE_GROWTH_RATE_PERCENT = 3.0
DEFAULT_TARGET_CAP_RATE_PERCENT = 10.0
DEFAULT_TARGET_COC_ROI_PERCENT = 15.0

_DEAL_DEFAULTS: dict[str, float] = {
    "down_payment_percent": DEFAULT_DOWN_PAYMENT_PERCENT,
    "loan_interest_rate_percent": DEFAULT_INTEREST_RATE_PERCENT,
    "loan_term_years": DEFAULT_LOAN_TERM_YEARS,
    "income_growth_rate_percent": DEFAULT_INCOME_GROWTH_RATE_PERCENT,
    "expense_growth_rate_percent": DEFAULT_EXPENSE_GROWTH_RATE_PERCENT,
    "target_cap_rate_percent": DEFAULT_TARGET_CAP_RATE_PERCENT,
    "target_coc_roi_percent": DEFAULT_TARGET_COC_ROI_PERCENT,
}

# Given as 0.25 instead of 25 -> promote to a whole percent. Interest rates are
# left alone: 0.5 is a real (if rare) APR, a 0.5% down payment is not.
_FRACTION_PROMOTED_FIELDS = ("down_payment_percent",)

_SECTION_KEYS = (
    "deal",
    "lease_details",
    "expense_items",
    "machine_inventory",
    "ancillary_income",
    "utility_analysis",
)


def _to_num(val: Any, field_name: str) -> float:
    """
    Coerce values like:
      - 250000
      - "250000"
      - "$250,000"
      - "6.5%"
    into float.
    """
    if val is None:
        raise ValueError(f"Missing required numeric field: {field_name}")
    if isinstance(val, bool):
        raise ValueError(f"Invalid type for {field_name}: {type(val)}")
    if isinstance(val, (int, float)):
        return float(val)
    if isinstance(val, str):
        s = val.strip().replace("$", "").replace(",", "")
        if s.endswith("%"):
            s = s[:-1]
        try:
            return float(s)
        except ValueError:
            raise ValueError(f"Invalid number for {field_name}: {val!r}")
    raise ValueError(f"Invalid type for {field_name}: {type(val)}")


def _is_blank(val: Any) -> bool:
    return val is None or (isinstance(val, str) and not val.strip())


def _pick(raw: dict[str, Any], name: str, alias: str | None = None) -> Any:
    """Look a field up by snake_case name, then by its camelCase alias."""
    for key in (name, alias or to_camel(name)):
        if key in raw:
            return raw[key]
    return None


def _numeric_fields(model: type[BaseModel]) -> set[str]:
    names = set()
    for name, field in model.model_fields.items():
        ann = field.annotation
        if ann in (int, float) or any(a in (int, float) for a in get_args(ann)):
            names.add(name)
    return names


def _prepare_section(raw: dict[str, Any] | None, model: type[BaseModel]) -> dict[str, Any] | None:
    """
    Map one raw section onto `model`'s field names and coerce numeric strings.
    Blank numeric values are dropped so the model default applies.
    """
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValueError(f"{model.__name__} must be an object, got {type(raw).__name__}")

    numeric = _numeric_fields(model)
    cleaned: dict[str, Any] = {}
    for name, field in model.model_fields.items():
        val = _pick(raw, name, field.alias)
        if name in numeric:
            if _is_blank(val):
                continue
            val = _to_num(val, name)
        elif val is None:
            continue
        cleaned[name] = val
    return cleaned


def _prepare_deal(raw: dict[str, Any]) -> Deal:
    cleaned = _prepare_section(raw, Deal)

    for field in REQUIRED_DEAL_FIELDS:
        if field not in cleaned:
            raise ValueError(f"Missing required field: {field}")

    for field, default in _DEAL_DEFAULTS.items():
        cleaned.setdefault(field, default)

    for field in _FRACTION_PROMOTED_FIELDS:
        v = cleaned[field]
        if 0.0 < v < 1.0:
            cleaned[field] = v * 100.0

    cleaned["loan_term_years"] = int(cleaned["loan_term_years"])

    services = _pick(raw, "value_added_services") or []
    cleaned["value_added_services"] = [
        _prepare_section(s, ValueAddedService) for s in services if s is not None
    ]
    return Deal.model_validate(cleaned)


def _prepare_list(raw: Any, model: type[BaseModel], field_name: str) -> tuple:
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)):
        raise ValueError(f"{field_name} must be a list")
    return tuple(model.model_validate(_prepare_section(item, model)) for item in raw if item is not None)


def _prepare_optional(raw: Any, model: type[BaseModel]):
    cleaned = _prepare_section(raw, model)
    return model.model_validate(cleaned) if cleaned is not None else None


def _is_bundle(raw: dict[str, Any]) -> bool:
    return any(_pick(raw, key) is not None for key in _SECTION_KEYS)


def validate_and_prepare_payload(raw: dict[str, Any]) -> DealInputs:
    """
    Normalize an incoming deal payload into calculation inputs.

    Responsibilities:
      - Accept a flat deal dict or a {deal, lease_details, ...} bundle, in
        snake_case or camelCase.
      - Coerce money/percent strings ("$1,200", "6.5%") to floats.
      - Apply the default financing/growth assumptions when omitted.
      - Leave `deal` as None when the payload carries no deal section; the
        calculators treat that as "not ready yet".
    """
    if not isinstance(raw, dict):
        raise ValueError("payload must be an object")

    if not _is_bundle(raw):
        return DealInputs(deal=_prepare_deal(raw)) if raw else DealInputs()

    deal_raw = _pick(raw, "deal")
    return DealInputs(
        deal=_prepare_deal(deal_raw) if deal_raw is not None else None,
        lease_details=_prepare_optional(_pick(raw, "lease_details"), LeaseDetails),
        expense_items=_prepare_list(_pick(raw, "expense_items"), ExpenseItem, "expense_items"),
        machine_inventory=_prepare_list(_pick(raw, "machine_inventory"), MachineInventory, "machine_inventory"),
        ancillary_income=_prepare_optional(_pick(raw, "ancillary_income"), AncillaryIncome),
        utility_analysis=_prepare_optional(_pick(raw, "utility_analysis"), UtilityAnalysis),
    )
