from __future__ import annotations

from typing import List, Optional

import typer

from washhouse.domain.equipment import DEFAULT_EQUIPMENT_CATALOG
from washhouse.pipelines.core import (
    analyze_deal_file,
    analyze_deal_files,
    projection_frame,
    summary_lines,
)

app = typer.Typer(help="Washhouse laundromat deal analysis (metrics, projections, returns).")


@app.command("analyze")
def analyze_cmd(
    deal_file: str = typer.Argument(..., help="Path to a deal JSON file"),
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", help="Where reports are written (defaults to WASHHOUSE_REPORTS_DIR)"
    ),
    show_projection: bool = typer.Option(
        False, "--show-projection", help="Print the year-by-year projection table."
    ),
) -> None:
    """
    Analyze one deal and print the scorecard.
    """
    result = analyze_deal_file(deal_file, output_dir)
    for line in summary_lines(result):
        typer.echo(line)
    if show_projection and result["projection"]:
        typer.echo(projection_frame(result["projection"]).round(2).to_string())


@app.command("analyze-batch")
def analyze_batch_cmd(
    deal_files: List[str] = typer.Argument(..., help="Deal JSON files"),
    output_dir: Optional[str] = typer.Option(None, "--output-dir"),
) -> None:
    """
    Analyze several deal files; failures are logged and skipped.
    """
    results = analyze_deal_files(deal_files, output_dir)
    typer.echo(f"Analyzed {len(results)} of {len(deal_files)} deal files.")


@app.command("catalog")
def catalog_cmd() -> None:
    """
    Show equipment lifespans and replacement costs used for CapEx.
    """
    for machine_type, spec in DEFAULT_EQUIPMENT_CATALOG.items():
        typer.echo(f"{machine_type:<22} {spec.lifespan_years:>3}y  ${spec.replacement_cost:,.0f}")


if __name__ == "__main__":
    app()
