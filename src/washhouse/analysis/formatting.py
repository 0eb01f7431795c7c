def format_currency(amount: float) -> str:
    """USD with thousands separators and cents: -1234.5 -> '-$1,234.50'."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_percentage(value: float, decimals: int = 1) -> str:
    return f"{value:.{decimals}f}%"
