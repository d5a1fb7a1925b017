from datetime import date
from decimal import Decimal

import pytest

from mortgage_tracker.presentation.formatting import (
    format_currency,
    format_date,
    format_month,
    format_percent,
)


class TestFormatCurrency:
    @pytest.mark.parametrize("amount,expected", [
        (Decimal("1234.5"), "1.234,50 €"),
        (Decimal("673.57"), "673,57 €"),
        (Decimal("150000"), "150.000,00 €"),
        (Decimal("0"), "0,00 €"),
        (Decimal("-42.1"), "-42,10 €"),
        (1234567.891, "1.234.567,89 €"),
    ])
    def test_euro(self, amount, expected):
        assert format_currency(amount) == expected

    def test_other_currencies(self):
        assert format_currency(Decimal("10"), "USD") == "10,00 $"
        assert format_currency(Decimal("10"), "CHF") == "10,00 CHF"


def test_format_percent():
    assert format_percent(Decimal("3.5")) == "3.50%"
    assert format_percent(Decimal("0")) == "0.00%"


def test_format_month():
    assert format_month(date(2025, 1, 15)) == "ene 2025"
    assert format_month(date(2030, 9, 1)) == "sept 2030"
    assert format_month(date(2054, 12, 15)) == "dic 2054"


def test_format_date():
    assert format_date(date(2025, 1, 5)) == "05/01/2025"
