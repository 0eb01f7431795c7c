from __future__ import annotations

from washhouse.domain.deal import Deal


def monthly_payment(principal: float, annual_rate_percent: float, term_years: float) -> float:
    """
    Standard fixed-rate amortization formula:
    M = P * [ r(1+r)^n / ((1+r)^n - 1) ]
    P = loan principal
    r = monthly interest rate (annual percent / 100 / 12)
    n = number of payments (months)

    No principal, no rate or no term means no payment.
    """
    r = annual_rate_percent / 100.0 / 12.0
    n = term_years * 12

    if principal <= 0 or r <= 0 or n <= 0:
        return 0.0

    growth = (1 + r) ** n
    return principal * (r * growth) / (growth - 1)


def annual_debt_service(principal: float, annual_rate_percent: float, term_years: float) -> float:
    return monthly_payment(principal, annual_rate_percent, term_years) * 12.0


def down_payment_amount(deal: Deal) -> float:
    return deal.asking_price * (deal.down_payment_percent / 100.0)


def loan_amount(deal: Deal) -> float:
    return deal.asking_price - down_payment_amount(deal)


def deal_annual_debt_service(deal: Deal) -> float:
    return annual_debt_service(
        principal=loan_amount(deal),
        annual_rate_percent=deal.loan_interest_rate_percent,
        term_years=deal.loan_term_years,
    )
