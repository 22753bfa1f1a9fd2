"""
Input guards applied at the edge, before the calculator runs.

The calculator itself is pure arithmetic; these functions turn request
values into clean Decimals or raise a BrokerageError the API can map.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Mapping

from app.core.errors import (
    BelowMinimumPremiumError,
    InvalidFieldError,
    InvalidPercentageError,
    MalformedLeviesError,
)
from app.core.logging import get_logger
from app.finance.money import HUNDRED, ZERO, Number, to_decimal
from app.finance.slabs import validate_minimum_premium

logger = get_logger(__name__)


def validate_percentage(name: str, value: Any) -> Decimal:
    """Parse a percentage and require 0 <= value <= 100."""
    try:
        pct = to_decimal(value)
    except ValueError:
        raise InvalidPercentageError(
            f"{name} must be a number between 0 and 100",
            field=name,
            value=value,
        ) from None
    if pct < ZERO or pct > HUNDRED:
        raise InvalidPercentageError(
            f"{name} must be between 0 and 100, got {value}",
            field=name,
            value=value,
        )
    return pct


def validate_amount(name: str, value: Any, *, allow_zero: bool = False) -> Decimal:
    """Parse a money amount and require it to be positive (or zero)."""
    try:
        amount = to_decimal(value)
    except ValueError:
        raise InvalidFieldError(f"{name} must be a number", field=name, value=value) from None
    if amount < ZERO or (amount == ZERO and not allow_zero):
        raise InvalidFieldError(f"{name} must be greater than 0", field=name, value=value)
    return amount


def coerce_levy_rates(raw: Any) -> dict[str, Decimal] | None:
    """
    Normalise a levies payload to {name: Decimal}.

    Accepts None, a mapping, or a JSON object string.  An individual value
    that does not parse becomes 0; a negative value or a payload that is
    not a mapping raises MalformedLeviesError.
    """
    if raw is None or raw == "":
        return None

    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            raise MalformedLeviesError("Levies must be a JSON object") from None

    if not isinstance(raw, Mapping):
        raise MalformedLeviesError(
            "Levies must be a mapping of levy name to rate",
            details={"received": type(raw).__name__},
        )

    rates: dict[str, Decimal] = {}
    for name, value in raw.items():
        try:
            rate = to_decimal(value)
        except (ValueError, TypeError):
            logger.warning("Unparseable levy rate treated as 0", levy=str(name), value=str(value))
            rate = ZERO
        if rate < ZERO:
            raise MalformedLeviesError(
                f"Levy rate for {name!r} cannot be negative",
                details={"levy": str(name), "value": str(value)},
            )
        rates[str(name)] = rate
    return rates


def ensure_minimum_premium(
    gross_premium: Number,
    min_premium: Number,
    *,
    currency: str = "NGN",
) -> None:
    """Raise BelowMinimumPremiumError when the premium is under the minimum."""
    check = validate_minimum_premium(gross_premium, min_premium, currency=currency)
    if not check.valid:
        raise BelowMinimumPremiumError(
            check.message,
            gross_premium=to_decimal(gross_premium),
            min_premium=to_decimal(min_premium),
        )
