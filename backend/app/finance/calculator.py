"""
Premium breakdown — derive brokerage, VAT, commission, levies and net
payable amounts from a gross premium.

Order of operations (each step rounded half-up to 2 places):

    brokerage_amount        = gross * brokerage_pct / 100
    vat_on_brokerage        = brokerage_amount * vat_pct / 100
    agent_commission_amount = gross * agent_commission_pct / 100
    net_brokerage           = brokerage_amount - agent_commission_amount
    levy[k]                 = gross * rate[k] / 100
    levies_total            = sum(levy[k])
    net_amount_due          = gross - brokerage - vat - levies_total
    insurer_net_amount      = gross - brokerage - levies_total

VAT is not taken off net_brokerage, and agent commission does not change
what the insurer is owed.  The functions here are pure; range checks on
the inputs belong to the caller (see app.finance.guards).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping

from app.core.config import settings
from app.finance.money import Number, percent_of, round2, to_decimal


def default_levy_rates() -> dict[str, Decimal]:
    """Statutory levy rates (% of gross) from settings."""
    return {name: to_decimal(rate) for name, rate in settings.DEFAULT_LEVY_RATES.items()}


@dataclass(frozen=True)
class PremiumBreakdown:
    gross_premium: Decimal
    brokerage_pct: Decimal
    brokerage_amount: Decimal
    vat_pct: Decimal
    vat_on_brokerage: Decimal
    agent_commission_pct: Decimal
    agent_commission_amount: Decimal
    net_brokerage: Decimal
    levies: dict[str, Decimal] = field(default_factory=dict)
    levies_total: Decimal = Decimal("0.00")
    net_amount_due: Decimal = Decimal("0.00")
    insurer_net_amount: Decimal = Decimal("0.00")

    def to_dict(self) -> dict[str, object]:
        """JSON-friendly view; money is serialised as exact decimal strings."""
        return {
            "gross_premium": str(self.gross_premium),
            "brokerage_pct": str(self.brokerage_pct),
            "brokerage_amount": str(self.brokerage_amount),
            "vat_pct": str(self.vat_pct),
            "vat_on_brokerage": str(self.vat_on_brokerage),
            "agent_commission_pct": str(self.agent_commission_pct),
            "agent_commission_amount": str(self.agent_commission_amount),
            "net_brokerage": str(self.net_brokerage),
            "levies": {name: str(amount) for name, amount in self.levies.items()},
            "levies_total": str(self.levies_total),
            "net_amount_due": str(self.net_amount_due),
            "insurer_net_amount": str(self.insurer_net_amount),
        }


def compute_breakdown(
    gross_premium: Number,
    brokerage_pct: Number,
    *,
    vat_pct: Number | None = None,
    agent_commission_pct: Number | None = None,
    levy_rates: Mapping[str, Number] | None = None,
) -> PremiumBreakdown:
    """
    Compute the full premium breakdown.

    `levy_rates` is merged over the default levy table, so passing
    {"niacom": 0} drops one levy and keeps the others.
    """
    gross = to_decimal(gross_premium)
    brokerage_rate = to_decimal(brokerage_pct)
    vat_rate = to_decimal(settings.DEFAULT_VAT_PCT if vat_pct is None else vat_pct)
    commission_rate = to_decimal(
        settings.DEFAULT_AGENT_COMMISSION_PCT if agent_commission_pct is None else agent_commission_pct
    )

    rates = default_levy_rates()
    if levy_rates:
        rates.update({name: to_decimal(rate) for name, rate in levy_rates.items()})

    brokerage_amount = percent_of(gross, brokerage_rate)
    vat_on_brokerage = percent_of(brokerage_amount, vat_rate)
    agent_commission_amount = percent_of(gross, commission_rate)
    net_brokerage = round2(brokerage_amount - agent_commission_amount)

    levies = {name: percent_of(gross, rate) for name, rate in rates.items()}
    levies_total = round2(sum(levies.values(), Decimal("0")))

    net_amount_due = round2(gross - brokerage_amount - vat_on_brokerage - levies_total)
    insurer_net_amount = round2(gross - brokerage_amount - levies_total)

    return PremiumBreakdown(
        gross_premium=round2(gross),
        brokerage_pct=brokerage_rate,
        brokerage_amount=brokerage_amount,
        vat_pct=vat_rate,
        vat_on_brokerage=vat_on_brokerage,
        agent_commission_pct=commission_rate,
        agent_commission_amount=agent_commission_amount,
        net_brokerage=net_brokerage,
        levies=levies,
        levies_total=levies_total,
        net_amount_due=net_amount_due,
        insurer_net_amount=insurer_net_amount,
    )
