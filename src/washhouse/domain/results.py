from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class CalculatedMetrics:
    total_gross_income: float         # annual, incl. ancillary + value-added services
    total_operating_expenses: float   # annual, no escalation
    noi: float                        # gross income - operating expenses
    loan_amount: float
    annual_debt_service: float
    annual_cash_flow: float           # NOI - debt service
    coc_roi: float                    # %, cash flow / down payment
    cap_rate: float                   # %, NOI / asking price
    dscr: float                       # NOI / debt service
    suggested_valuation_low: float
    suggested_valuation_high: float
    valuation_multiplier: float       # clamped to [2.5, 6.0]

    @classmethod
    def empty(cls) -> "CalculatedMetrics":
        """Zero-valued scorecard used while no deal has been entered yet."""
        return cls(
            total_gross_income=0.0,
            total_operating_expenses=0.0,
            noi=0.0,
            loan_amount=0.0,
            annual_debt_service=0.0,
            annual_cash_flow=0.0,
            coc_roi=0.0,
            cap_rate=0.0,
            dscr=0.0,
            suggested_valuation_low=0.0,
            suggested_valuation_high=0.0,
            valuation_multiplier=4.0,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class YearlyProjection:
    year: int
    gross_income: float
    operating_expenses: float
    noi: float
    debt_service: float
    cash_flow: float                  # NOI - debt service - CapEx
    cap_ex: float
    cumulative_cash_flow: float       # running sum of cash_flow through this year

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ProjectionSummary:
    total_cash_flow: float
    total_cap_ex: float
    avg_annual_cash_flow: float
    final_cumulative_cash_flow: float
    payback_years: Optional[float]    # None when the deal never pays back on average

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BreakevenAnalysis:
    monthly_breakeven_revenue: float
    breakeven_occupancy: float        # % of current revenue needed to break even
    months_to_breakeven: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
