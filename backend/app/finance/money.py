"""
Decimal helpers for money and rates.

Every amount in the calculator goes through `round2` after each step, so
the same inputs always produce the same cents on every platform.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

Number = Union[Decimal, int, float, str]

CENTS = Decimal("0.01")
RATE_PLACES = Decimal("0.0001")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

_CURRENCY_SYMBOLS = {"NGN": "₦", "USD": "$", "EUR": "€", "GBP": "£"}


def to_decimal(value: Number | None) -> Decimal:
    """
    Convert to Decimal without binary float artefacts (0.1 -> Decimal("0.1")).

    Raises ValueError for values that are not finite numbers.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    else:
        try:
            result = Decimal(str(value).strip().replace(",", ""))
        except InvalidOperation:
            raise ValueError(f"Not a number: {value!r}") from None
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def round2(value: Number) -> Decimal:
    """Round half-up to 2 decimal places (money)."""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def round4(value: Number) -> Decimal:
    """Round half-up to 4 decimal places (rates)."""
    return to_decimal(value).quantize(RATE_PLACES, rounding=ROUND_HALF_UP)


def percent_of(amount: Number, pct: Number) -> Decimal:
    """round2(amount * pct / 100)."""
    return round2(to_decimal(amount) * to_decimal(pct) / HUNDRED)


def format_currency(amount: Number, currency: str = "NGN") -> str:
    """
    Format an amount for messages: ``format_currency(10000) -> "₦10,000.00"``.

    Unknown currencies fall back to an ISO-code prefix ("XOF 1,000.00").
    """
    value = round2(amount)
    sign = "-" if value < 0 else ""
    symbol = _CURRENCY_SYMBOLS.get(currency.upper())
    body = f"{abs(value):,.2f}"
    if symbol:
        return f"{sign}{symbol}{body}"
    return f"{sign}{currency.upper()} {body}"


def format_percentage(value: Number, decimals: int = 2) -> str:
    quantum = Decimal(1).scaleb(-decimals)
    return f"{to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)}%"
