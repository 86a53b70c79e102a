"""Locale-aware rendering of integer minor-unit amounts."""

from dataclasses import dataclass
from decimal import Decimal

from babel.numbers import format_currency


@dataclass(frozen=True)
class CurrencyFormat:
    locale: str
    currency: str
    divisor: int


CURRENCY_CONFIG: dict[str, CurrencyFormat] = {
    "USD": CurrencyFormat(locale="en_US", currency="USD", divisor=100),
    "CAD": CurrencyFormat(locale="en_CA", currency="CAD", divisor=100),
    "INR": CurrencyFormat(locale="en_IN", currency="INR", divisor=100),
}


def get_currency_format(currency_code: str | None, fallback: str) -> CurrencyFormat:
    """Return the formatting entry for a code, or the fallback code's entry."""
    if currency_code and currency_code in CURRENCY_CONFIG:
        return CURRENCY_CONFIG[currency_code]
    return CURRENCY_CONFIG[fallback]


def to_major_units(amount: int, currency_code: str | None, fallback: str) -> float:
    config = get_currency_format(currency_code, fallback)
    return float(Decimal(amount) / config.divisor)


def format_amount(amount: int, currency_code: str | None, fallback: str) -> str:
    """
    Format minor units (cents) as currency text.

    Example:
        format_amount(1000, "USD", fallback="USD") -> "$10.00"
    """
    config = get_currency_format(currency_code, fallback)
    value = Decimal(amount) / config.divisor
    return format_currency(value, config.currency, locale=config.locale)
