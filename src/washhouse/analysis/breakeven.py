from __future__ import annotations

from collections.abc import Sequence

from washhouse.domain.deal import Deal, ExpenseItem
from washhouse.domain.finance import down_payment_amount, loan_amount, monthly_payment
from washhouse.domain.results import BreakevenAnalysis


def calculate_breakeven(
    deal: Deal | None,
    expense_items: Sequence[ExpenseItem] = (),
) -> BreakevenAnalysis:
    """
    How much monthly revenue covers operating costs plus the loan payment,
    what share of current revenue that is, and how many months of profit
    it takes to earn back the down payment.
    """
    if deal is None:
        return BreakevenAnalysis(
            monthly_breakeven_revenue=0.0,
            breakeven_occupancy=0.0,
            months_to_breakeven=0.0,
        )

    monthly_expenses = sum(e.amount_annual for e in expense_items or ()) / 12.0
    monthly_debt = monthly_payment(
        principal=loan_amount(deal),
        annual_rate_percent=deal.loan_interest_rate_percent,
        term_years=deal.loan_term_years,
    )
    monthly_breakeven_revenue = monthly_expenses + monthly_debt

    current_monthly_revenue = deal.gross_income_annual / 12.0
    breakeven_occupancy = 0.0
    if current_monthly_revenue > 0:
        breakeven_occupancy = monthly_breakeven_revenue / current_monthly_revenue * 100

    monthly_profit = current_monthly_revenue - monthly_breakeven_revenue
    months_to_breakeven = 0.0
    if monthly_profit > 0:
        months_to_breakeven = down_payment_amount(deal) / monthly_profit

    return BreakevenAnalysis(
        monthly_breakeven_revenue=monthly_breakeven_revenue,
        breakeven_occupancy=breakeven_occupancy,
        months_to_breakeven=months_to_breakeven,
    )
