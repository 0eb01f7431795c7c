# src/washhouse/analysis/returns.py
from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Literal

import numpy as np
from scipy import optimize

from washhouse.domain.deal import Deal
from washhouse.domain.finance import down_payment_amount
from washhouse.domain.results import YearlyProjection

IRR_SEED = 0.10
IRR_TOLERANCE = 1e-4
IRR_MAX_ITERATIONS = 100
IRR_BRACKET = (-0.99, 10.0)

# below this the Newton step is meaningless
_MIN_DERIVATIVE = 1e-12
# Newton iterates past this are treated as divergence (100,000%)
_MAX_RATE = 1e3


class RootFindingError(RuntimeError):
    pass


class IrrUnresolvedError(RootFindingError):
    """No discount rate zeroes the NPV of this cash-flow series."""


@dataclass(frozen=True)
class RootSolution:
    root: float
    iterations: int
    method: Literal["newton", "brentq"]


def initial_investment(deal: Deal) -> float:
    """Cash into the deal at close: the down payment."""
    return down_payment_amount(deal)


def calculate_roi(projections: Sequence[YearlyProjection], initial_investment: float) -> float:
    """
    Total ROI (%) = sum of projected cash flow / cash invested.
    """
    if initial_investment == 0:
        return 0.0
    total_cash_flow = sum(p.cash_flow for p in projections)
    return total_cash_flow / initial_investment * 100


def npv(rate: float, initial_investment: float, cash_flows: Sequence[float]) -> float:
    """
    NPV = -I + sum_y CF_y / (1+r)^y, y = 1..N.
    """
    cf = np.asarray(cash_flows, dtype=float)
    years = np.arange(1, cf.shape[0] + 1)
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        return float(-initial_investment + np.sum(cf / (1.0 + rate) ** years))


def npv_derivative(rate: float, cash_flows: Sequence[float]) -> float:
    """
    dNPV/dr = sum_y -y * CF_y / (1+r)^(y+1).
    """
    cf = np.asarray(cash_flows, dtype=float)
    years = np.arange(1, cf.shape[0] + 1)
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        return float(np.sum(-years * cf / (1.0 + rate) ** (years + 1)))


def _bracketed_root(
    f: Callable[[float], float],
    bracket: tuple[float, float],
    max_iterations: int,
) -> RootSolution | None:
    lo, hi = bracket
    f_lo, f_hi = f(lo), f(hi)
    if not (math.isfinite(f_lo) and math.isfinite(f_hi)):
        return None
    if f_lo == 0.0:
        return RootSolution(root=lo, iterations=0, method="brentq")
    if f_hi == 0.0:
        return RootSolution(root=hi, iterations=0, method="brentq")
    if f_lo * f_hi > 0:
        return None

    root, info = optimize.brentq(f, lo, hi, maxiter=max_iterations, full_output=True, disp=False)
    if not info.converged:
        return None
    return RootSolution(root=float(root), iterations=int(info.iterations), method="brentq")


def solve_root(
    f: Callable[[float], float],
    fprime: Callable[[float], float],
    seed: float = IRR_SEED,
    *,
    tolerance: float = IRR_TOLERANCE,
    max_iterations: int = IRR_MAX_ITERATIONS,
    bracket: tuple[float, float] | None = IRR_BRACKET,
) -> RootSolution:
    """
    Newton-Raphson from `seed`, accepting r once |f(r)| < tolerance.

    Newton is abandoned on a flat derivative, a non-finite value, a step to
    r <= -1 or past _MAX_RATE, or an exhausted iteration budget. In that case
    we fall back to Brent's method over `bracket` (if it straddles a sign
    change). If that
    also fails, RootFindingError is raised; no NaN ever leaves this function.
    """
    rate = seed
    for i in range(max_iterations):
        value = f(rate)
        if not math.isfinite(value):
            break
        if abs(value) < tolerance:
            return RootSolution(root=rate, iterations=i, method="newton")

        slope = fprime(rate)
        if not math.isfinite(slope) or abs(slope) < _MIN_DERIVATIVE:
            break

        rate = rate - value / slope
        if not math.isfinite(rate) or rate <= -1.0 or rate > _MAX_RATE:
            break

    if bracket is not None:
        solution = _bracketed_root(f, bracket, max_iterations)
        if solution is not None:
            return solution

    raise RootFindingError(
        f"root not found: newton from seed={seed} and bracket={bracket} both failed"
    )


def calculate_irr(
    projections: Sequence[YearlyProjection],
    initial_investment: float,
    *,
    seed: float = IRR_SEED,
    tolerance: float = IRR_TOLERANCE,
    max_iterations: int = IRR_MAX_ITERATIONS,
    bracket: tuple[float, float] | None = IRR_BRACKET,
) -> float:
    """
    IRR (%) of -initial_investment at t=0 followed by each year's cash flow.

    Raises IrrUnresolvedError when no rate can be found (e.g. every flow
    has the same sign).
    """
    cash_flows = [p.cash_flow for p in projections]

    try:
        solution = solve_root(
            lambda r: npv(r, initial_investment, cash_flows),
            lambda r: npv_derivative(r, cash_flows),
            seed,
            tolerance=tolerance,
            max_iterations=max_iterations,
            bracket=bracket,
        )
    except RootFindingError as err:
        raise IrrUnresolvedError(
            f"IRR did not converge for initial_investment={initial_investment:.2f}"
        ) from err

    return solution.root * 100
