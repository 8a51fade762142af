"""
Formatting utilities.
"""

from decimal import Decimal, ROUND_HALF_UP

CURRENCY_SYMBOLS = {
    "GBP": "£",
    "USD": "$",
    "EUR": "€",
}


def format_currency(amount: int, currency: str = "GBP") -> str:
    """
    Format an integer amount as currency.

    Args:
        amount: The amount in whole units (e.g., pounds, not pence).
        currency: Currency code (default GBP).

    Returns:
        Formatted currency string.
    """
    symbol = CURRENCY_SYMBOLS.get(currency, currency + " ")
    return f"{symbol}{amount:,}"


def format_currency_approx(amount: int, significant: int = 3, currency: str = "GBP") -> str:
    """
    Format an amount rounded to a number of significant figures.

    5872500 -> "£5,870,000". Ties round up.
    """
    if amount == 0:
        return format_currency(0, currency)
    sign = -1 if amount < 0 else 1
    magnitude = abs(amount)
    factor = 10 ** max(len(str(magnitude)) - significant, 0)
    rounded = (magnitude + factor // 2) // factor * factor
    return format_currency(sign * rounded, currency)


def format_percent(value: float, decimals: int = 1) -> str:
    """
    Format a number as a percentage.

    Args:
        value: The percentage value.
        decimals: Number of decimal places.

    Returns:
        Formatted percentage string.
    """
    return f"{value:.{decimals}f}%"


def format_growth(growth_factor: float) -> str:
    """Format a growth factor as a signed whole percentage (1.305 -> "+31%")."""
    percent = int(((Decimal(repr(growth_factor)) - 1) * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return f"{percent:+d}%"
