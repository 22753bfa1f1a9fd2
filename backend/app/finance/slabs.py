"""Brokerage slabs, minimum premium check, commission and co-insurance splits."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping

from app.core.constants import BrokerageSlab
from app.core.errors import CoInsuranceError
from app.finance.money import Number, format_currency, format_percentage, percent_of, round2, to_decimal

SLAB_RATES: dict[BrokerageSlab, Decimal] = {
    BrokerageSlab.BASIC: Decimal("9"),
    BrokerageSlab.STANDARD: Decimal("15"),
    BrokerageSlab.PREMIUM: Decimal("20"),
}

# Lower bound of gross premium (inclusive) for each slab, highest first.
SLAB_THRESHOLDS: tuple[tuple[Decimal, BrokerageSlab], ...] = (
    (Decimal("10000000"), BrokerageSlab.PREMIUM),
    (Decimal("1000000"), BrokerageSlab.STANDARD),
)

CO_INSURANCE_TOLERANCE = Decimal("0.01")


def suggest_brokerage_slab(gross_premium: Number) -> Decimal:
    """Advisory brokerage % for a premium; never applied automatically."""
    gross = to_decimal(gross_premium)
    for threshold, slab in SLAB_THRESHOLDS:
        if gross >= threshold:
            return SLAB_RATES[slab]
    return SLAB_RATES[BrokerageSlab.BASIC]


def slab_name(brokerage_pct: Number) -> str:
    pct = to_decimal(brokerage_pct)
    for slab, rate in SLAB_RATES.items():
        if pct == rate:
            return f"{slab.value} ({rate}%)"
    return f"Custom ({pct.normalize():f}%)"


@dataclass(frozen=True)
class MinimumPremiumCheck:
    valid: bool
    message: str | None = None


def validate_minimum_premium(
    gross_premium: Number,
    min_premium: Number,
    *,
    currency: str = "NGN",
) -> MinimumPremiumCheck:
    """Inclusive check: a premium equal to the minimum passes.  Never clamps."""
    gross = to_decimal(gross_premium)
    minimum = to_decimal(min_premium)
    if gross < minimum:
        return MinimumPremiumCheck(
            valid=False,
            message=(
                f"Gross premium ({format_currency(gross, currency)}) is below "
                f"minimum required ({format_currency(minimum, currency)})"
            ),
        )
    return MinimumPremiumCheck(valid=True)


@dataclass(frozen=True)
class CommissionShare:
    agent_id: int
    percentage: Decimal
    amount: Decimal


def split_commission(
    total_commission: Number,
    splits: Iterable[Mapping[str, Number]],
) -> list[CommissionShare]:
    """
    Divide a commission between agents.

    Each split is {"agent_id": ..., "percentage": ...}; every amount is
    rounded on its own, so the parts may differ from the total by a cent.
    """
    total = to_decimal(total_commission)
    return [
        CommissionShare(
            agent_id=int(split["agent_id"]),
            percentage=to_decimal(split["percentage"]),
            amount=percent_of(total, split["percentage"]),
        )
        for split in splits
    ]


@dataclass(frozen=True)
class CoInsuranceAllocation:
    insurer_id: int
    percentage: Decimal
    amount: Decimal


def allocate_co_insurance(
    gross_premium: Number,
    shares: Iterable[Mapping[str, Number]],
) -> list[CoInsuranceAllocation]:
    """
    Split a gross premium across co-insurers.

    Percentages must be positive and sum to 100 (within 0.01).
    Raises CoInsuranceError otherwise.
    """
    shares = list(shares)
    if not shares:
        raise CoInsuranceError("At least one co-insurer share is required")

    gross = to_decimal(gross_premium)
    allocations = []
    total_pct = Decimal("0")
    for index, share in enumerate(shares):
        try:
            pct = to_decimal(share["percentage"])
            insurer_id = int(share["insurer_id"])
        except (KeyError, TypeError, ValueError):
            raise CoInsuranceError(
                f"Co-insurer share {index} needs insurer_id and percentage",
                details={"index": index},
            ) from None
        if pct <= 0:
            raise CoInsuranceError(
                f"Co-insurer share {index} must have a positive percentage",
                details={"index": index, "percentage": str(pct)},
            )
        total_pct += pct
        allocations.append(
            CoInsuranceAllocation(insurer_id=insurer_id, percentage=pct, amount=percent_of(gross, pct))
        )

    if abs(total_pct - Decimal("100")) > CO_INSURANCE_TOLERANCE:
        raise CoInsuranceError(
            f"Co-insurance percentages must total 100%, got {format_percentage(total_pct)}",
            details={"total_percentage": str(round2(total_pct))},
        )
    return allocations
