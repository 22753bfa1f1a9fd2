"""
Sum insured / gross premium / rate triangle and form auto-population.

    gross_premium = sum_insured * rate_pct / 100
    rate_pct      = gross_premium / sum_insured * 100    (4 dp)
    sum_insured   = gross_premium / rate_pct * 100
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping

from app.finance.calculator import PremiumBreakdown, compute_breakdown
from app.finance.money import HUNDRED, ZERO, Number, format_currency, round2, round4, to_decimal
from app.finance.slabs import slab_name, suggest_brokerage_slab


@dataclass(frozen=True)
class PremiumTriangle:
    sum_insured: Decimal
    gross_premium: Decimal
    rate_pct: Decimal


def _known(value: Number | None) -> Decimal | None:
    """Treat None and zero as "not supplied"."""
    if value is None:
        return None
    number = to_decimal(value)
    return number if number != ZERO else None


def gross_premium_from_rate(sum_insured: Number, rate_pct: Number) -> Decimal:
    return round2(to_decimal(sum_insured) * to_decimal(rate_pct) / HUNDRED)


def rate_from_premium(sum_insured: Number, gross_premium: Number) -> Decimal:
    sum_insured = to_decimal(sum_insured)
    if sum_insured == ZERO:
        return round4(ZERO)
    return round4(to_decimal(gross_premium) / sum_insured * HUNDRED)


def sum_insured_from_rate(gross_premium: Number, rate_pct: Number) -> Decimal:
    rate = to_decimal(rate_pct)
    if rate == ZERO:
        return round2(ZERO)
    return round2(to_decimal(gross_premium) / rate * HUNDRED)


def solve_premium_triangle(
    sum_insured: Number | None = None,
    gross_premium: Number | None = None,
    rate_pct: Number | None = None,
) -> PremiumTriangle | None:
    """
    Fill in whichever of the three values is missing.

    Returns None when fewer than two are known.  When all three are given
    they are returned as-is (rounded), without cross-checking.
    """
    si, gp, rate = _known(sum_insured), _known(gross_premium), _known(rate_pct)

    if si is not None and gp is not None and rate is None:
        rate = rate_from_premium(si, gp)
    elif si is not None and rate is not None and gp is None:
        gp = gross_premium_from_rate(si, rate)
    elif gp is not None and rate is not None and si is None:
        si = sum_insured_from_rate(gp, rate)
    elif si is None or gp is None or rate is None:
        return None

    return PremiumTriangle(sum_insured=round2(si), gross_premium=round2(gp), rate_pct=round4(rate))


@dataclass(frozen=True)
class AutoPopulateResult:
    sum_insured: Decimal
    gross_premium: Decimal
    rate_pct: Decimal
    brokerage_pct: Decimal
    breakdown: PremiumBreakdown
    suggestions: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "sum_insured": str(self.sum_insured),
            "gross_premium": str(self.gross_premium),
            "rate_pct": str(self.rate_pct),
            "brokerage_pct": str(self.brokerage_pct),
            "breakdown": self.breakdown.to_dict(),
            "suggestions": dict(self.suggestions),
        }


def auto_populate(
    *,
    sum_insured: Number | None = None,
    gross_premium: Number | None = None,
    rate_pct: Number | None = None,
    brokerage_pct: Number | None = None,
    lob_default_brokerage: Number | None = None,
    lob_min_premium: Number | None = None,
    vat_pct: Number | None = None,
    agent_commission_pct: Number | None = None,
    levy_rates: Mapping[str, Number] | None = None,
) -> AutoPopulateResult | None:
    """
    Complete a premium form from partial input.

    Brokerage % is taken from `brokerage_pct`, else the LOB default, else
    the slab suggestion.  Suggestions are advisory only: a slab hint when
    the chosen brokerage differs from the slab, and a warning when the
    premium is under the LOB minimum.
    """
    if not any(_known(v) is not None for v in (sum_insured, gross_premium, rate_pct)):
        return None

    triangle = solve_premium_triangle(sum_insured, gross_premium, rate_pct)
    if triangle is None:
        # Only one of the three was given; keep it and leave the rest at zero.
        triangle = PremiumTriangle(
            sum_insured=round2(_known(sum_insured) or ZERO),
            gross_premium=round2(_known(gross_premium) or ZERO),
            rate_pct=round4(_known(rate_pct) or ZERO),
        )

    gross = triangle.gross_premium
    chosen = _known(brokerage_pct) or _known(lob_default_brokerage) or suggest_brokerage_slab(gross)

    breakdown = compute_breakdown(
        gross,
        chosen,
        vat_pct=vat_pct,
        agent_commission_pct=agent_commission_pct,
        levy_rates=levy_rates,
    )

    suggestions: dict[str, str] = {}
    suggested = suggest_brokerage_slab(gross)
    if suggested != chosen:
        suggestions["brokerage_slab"] = f"Consider {slab_name(suggested)} based on premium amount"

    minimum = _known(lob_min_premium)
    if minimum is not None and gross < minimum:
        suggestions["min_premium_warning"] = f"Premium is below LOB minimum of {format_currency(minimum)}"

    return AutoPopulateResult(
        sum_insured=triangle.sum_insured,
        gross_premium=gross,
        rate_pct=triangle.rate_pct,
        brokerage_pct=chosen,
        breakdown=breakdown,
        suggestions=suggestions,
    )
