# src/washhouse/pipelines/core.py

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Sequence

import json

import pandas as pd
from loguru import logger

from washhouse.adapters.config import config
from washhouse.analysis.formatting import format_currency, format_percentage
from washhouse.domain.results import YearlyProjection
from washhouse.services.deal_analyzer import analyze_deal


PROJECTION_COLUMNS = [
    "year",
    "gross_income",
    "operating_expenses",
    "noi",
    "debt_service",
    "cap_ex",
    "cash_flow",
    "cumulative_cash_flow",
]


def projection_frame(projections: Sequence[YearlyProjection | Dict[str, Any]]) -> pd.DataFrame:
    """
    Projection table as a DataFrame indexed by year.
    Accepts YearlyProjection records or their dict form.
    """
    rows = [p.to_dict() if isinstance(p, YearlyProjection) else dict(p) for p in projections]
    df = pd.DataFrame(rows, columns=PROJECTION_COLUMNS)
    return df.set_index("year")


def load_deal_file(path: Path | str) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"deal file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise ValueError(f"deal file must hold a JSON object: {path}")
    return payload


def summary_lines(result: Dict[str, Any]) -> list[str]:
    """Human-readable headline numbers for the CLI."""
    m = result["metrics"]
    lines = [
        f"Gross income:        {format_currency(m['total_gross_income'])}",
        f"Operating expenses:  {format_currency(m['total_operating_expenses'])}",
        f"NOI:                 {format_currency(m['noi'])}",
        f"Debt service:        {format_currency(m['annual_debt_service'])}",
        f"Cash flow:           {format_currency(m['annual_cash_flow'])}",
        f"Cap rate:            {format_percentage(m['cap_rate'])}",
        f"Cash-on-cash ROI:    {format_percentage(m['coc_roi'])}",
        f"DSCR:                {m['dscr']:.2f}",
        f"Multiplier:          {m['valuation_multiplier']:.2f}x",
        f"Valuation range:     {format_currency(m['suggested_valuation_low'])}"
        f" - {format_currency(m['suggested_valuation_high'])}",
    ]

    returns = result.get("returns")
    if returns:
        irr = returns["irr_percent"]
        lines.append(f"10-year ROI:         {format_percentage(returns['total_roi_percent'])}")
        lines.append(f"IRR:                 {format_percentage(irr) if irr is not None else 'unresolved'}")

    for flag in (result.get("guardrails") or {}).get("flags", []):
        lines.append(f"[{flag['severity']}] {flag['message']}")

    return lines


def analyze_deal_file(
    path: Path | str,
    output_dir: Path | str | None = None,
) -> Dict[str, Any]:
    """
    Analyze one deal JSON file and write:
      - <stem>_analysis.json   full analysis result
      - <stem>_projection.csv  projection table
    Returns the analysis result.
    """
    path = Path(path)
    out_dir = Path(output_dir or config.REPORTS_DIR)

    logger.info("Analyzing deal file", path=str(path), output_dir=str(out_dir))

    try:
        payload = load_deal_file(path)
        result = analyze_deal(payload)
    except Exception:
        logger.exception("Deal analysis failed", path=str(path))
        raise

    out_dir.mkdir(parents=True, exist_ok=True)

    analysis_path = out_dir / f"{path.stem}_analysis.json"
    with analysis_path.open("w", encoding="utf-8") as f:
        json.dump(result, f, indent=2)

    projection_path = out_dir / f"{path.stem}_projection.csv"
    projection_frame(result["projection"]).to_csv(projection_path)

    logger.info(
        "Deal analysis written",
        analysis_path=str(analysis_path),
        projection_path=str(projection_path),
        has_flags=result["guardrails"]["has_flags"],
    )
    return result


def analyze_deal_files(
    paths: Sequence[Path | str],
    output_dir: Path | str | None = None,
) -> Dict[str, Dict[str, Any]]:
    """Batch version; one bad file does not stop the rest."""
    results: Dict[str, Dict[str, Any]] = {}
    failed: list[str] = []
    for p in paths:
        try:
            results[str(p)] = analyze_deal_file(p, output_dir)
        except (OSError, ValueError):
            failed.append(str(p))

    logger.info("Batch analysis completed", analyzed=len(results), failed=failed)
    return results
