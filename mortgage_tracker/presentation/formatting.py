"""Display formatting for amounts, rates and schedule dates.

Values coming out of the engine are already rounded; these helpers only
change how they look.
"""

from datetime import date
from decimal import Decimal

MONTH_ABBR_ES = ["ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic"]

CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£"}


def format_currency(amount: Decimal | float, currency: str = "EUR") -> str:
    """es-ES style: dot thousands separator, comma decimals, trailing symbol.

    >>> format_currency(Decimal("1234.5"))
    '1.234,50 €'
    """
    text = f"{Decimal(amount):,.2f}"
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{text} {CURRENCY_SYMBOLS.get(currency, currency)}"


def format_percent(rate: Decimal | float) -> str:
    return f"{Decimal(rate):.2f}%"


def format_month(d: date) -> str:
    """Short month label used in schedule tables, e.g. 'mar 2025'."""
    return f"{MONTH_ABBR_ES[d.month - 1]} {d.year}"


def format_date(d: date) -> str:
    return d.strftime("%d/%m/%Y")
