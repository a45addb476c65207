"""Money formatting for display"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CURRENCY_SYMBOLS = {
    "USD": "$",
    "CAD": "CA$",
    "AUD": "A$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
}

# Currencies shown without minor units
ZERO_DECIMAL = {"JPY", "KRW"}


def format_price(amount: Union[Decimal, str, float], currency_code: str = "USD") -> str:
    """
    Format an amount for display, e.g. "$749.95" or "12.00 CHF".

    Negative amounts keep the sign in front of the symbol.
    """
    value = Decimal(str(amount))
    exponent = Decimal("1") if currency_code in ZERO_DECIMAL else Decimal("0.01")
    value = value.quantize(exponent, rounding=ROUND_HALF_UP)

    sign = "-" if value < 0 else ""
    digits = f"{abs(value):,}"

    symbol = CURRENCY_SYMBOLS.get(currency_code)
    if symbol:
        return f"{sign}{symbol}{digits}"
    return f"{sign}{digits} {currency_code}"
