"""
Finance package — premium breakdown, slabs and the rate triangle.

    from app.finance import compute_breakdown

    breakdown = compute_breakdown(100_000, 15)
    breakdown.net_amount_due   # Decimal("81875.00")
"""

from app.finance.calculator import PremiumBreakdown, compute_breakdown, default_levy_rates
from app.finance.guards import coerce_levy_rates, ensure_minimum_premium, validate_amount, validate_percentage
from app.finance.money import format_currency, format_percentage, round2, round4, to_decimal
from app.finance.slabs import (
    MinimumPremiumCheck,
    allocate_co_insurance,
    slab_name,
    split_commission,
    suggest_brokerage_slab,
    validate_minimum_premium,
)
from app.finance.solver import AutoPopulateResult, PremiumTriangle, auto_populate, solve_premium_triangle

__all__ = [
    "AutoPopulateResult",
    "MinimumPremiumCheck",
    "PremiumBreakdown",
    "PremiumTriangle",
    "allocate_co_insurance",
    "auto_populate",
    "coerce_levy_rates",
    "compute_breakdown",
    "default_levy_rates",
    "ensure_minimum_premium",
    "format_currency",
    "format_percentage",
    "round2",
    "round4",
    "slab_name",
    "solve_premium_triangle",
    "split_commission",
    "suggest_brokerage_slab",
    "to_decimal",
    "validate_amount",
    "validate_minimum_premium",
    "validate_percentage",
]
