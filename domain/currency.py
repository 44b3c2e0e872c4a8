"""
Currency conversion for FreightDesk.

Static conversion table (USD-based). There is no live rate feed; rates are
updated by editing CURRENCY_RATES.
"""

from typing import List

# 1 unit of currency expressed in USD
CURRENCY_RATES = {
    "USD": 1.0,
    "EUR": 1.08,
    "GBP": 1.27,
    "PKR": 0.0036,
}

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "PKR": "₨",
}

BASE_CURRENCY = "USD"


def get_rate(currency: str) -> float:
    """Get USD rate for a currency code. Unknown or empty codes count as 1."""
    return CURRENCY_RATES.get((currency or "").upper(), 1.0)


def convert_currency(amount: float, from_currency: str, to_currency: str) -> float:
    """
    Convert an amount between two currencies.

    Args:
        amount: Amount in from_currency
        from_currency: Source currency code (unknown codes use rate 1)
        to_currency: Target currency code (unknown codes use rate 1)

    Returns:
        Converted amount (not rounded)

    Example:
        >>> convert_currency(100, "EUR", "USD")
        108.0
    """
    from_rate = get_rate(from_currency)
    to_rate = get_rate(to_currency)

    if from_rate == to_rate:
        return amount

    return amount * from_rate / to_rate


def get_currency_symbol(currency: str) -> str:
    """Get display symbol for currency code (defaults to $)."""
    return CURRENCY_SYMBOLS.get((currency or "").upper(), "$")


def format_currency_value(amount: float, currency: str = BASE_CURRENCY) -> str:
    """
    Format amount with currency symbol, thousands separator and 2 decimals.

    Example:
        >>> format_currency_value(1234.5, "EUR")
        '€1,234.50'
    """
    symbol = get_currency_symbol(currency)
    return f"{symbol}{(amount or 0.0):,.2f}"


def get_currency_options() -> List[str]:
    """Get list of supported currency codes."""
    return list(CURRENCY_RATES.keys())
