import pytest
from ledger_api.core.currency import CURRENCY_CONFIG, format_amount, get_currency_format, to_major_units


class TestFormatAmount:
    """Minor units rendered in the account's locale"""

    def test_usd(self):
        assert format_amount(1000, "USD", fallback="USD") == "$10.00"

    def test_cents_and_grouping(self):
        assert format_amount(123456789, "USD", fallback="USD") == "$1,234,567.89"

    def test_cad_in_canadian_locale(self):
        assert format_amount(550, "CAD", fallback="USD") == "$5.50"

    def test_inr_uses_indian_grouping(self):
        assert format_amount(1234567800, "INR", fallback="USD") == "₹1,23,45,678.00"

    def test_zero(self):
        assert format_amount(0, "USD", fallback="USD") == "$0.00"

    def test_unknown_code_uses_fallback(self):
        assert format_amount(1000, "XYZ", fallback="USD") == format_amount(1000, "USD", fallback="USD")
        assert get_currency_format(None, "CAD") is CURRENCY_CONFIG["CAD"]

    def test_major_units(self):
        assert to_major_units(1999, "USD", fallback="USD") == pytest.approx(19.99)

