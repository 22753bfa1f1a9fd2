"""Financial calculator request/response schemas."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field


class BreakdownRequest(BaseModel):
    gross_premium: Decimal = Field(..., ge=0)
    brokerage_pct: Decimal
    vat_pct: Decimal | None = None
    agent_commission_pct: Decimal | None = None
    levies: dict[str, Any] | str | None = None


class PremiumBreakdownResponse(BaseModel):
    """Money fields are serialised as exact decimal strings."""

    gross_premium: Decimal
    brokerage_pct: Decimal
    brokerage_amount: Decimal
    vat_pct: Decimal
    vat_on_brokerage: Decimal
    agent_commission_pct: Decimal
    agent_commission_amount: Decimal
    net_brokerage: Decimal
    levies: dict[str, Decimal]
    levies_total: Decimal
    net_amount_due: Decimal
    insurer_net_amount: Decimal


class MinimumPremiumRequest(BaseModel):
    """Check against an explicit minimum, or the one resolved from a LOB."""

    gross_premium: Decimal
    min_premium: Decimal | None = None
    lob_id: int | None = None
    sub_lob_id: int | None = None
    currency: str = "NGN"


class MinimumPremiumResponse(BaseModel):
    valid: bool
    message: str | None = None
    min_premium: Decimal


class SlabResponse(BaseModel):
    gross_premium: Decimal
    brokerage_pct: Decimal
    slab_name: str


class AutoPopulateRequest(BaseModel):
    """Any two of sum_insured / gross_premium / rate_pct complete the third."""

    sum_insured: Decimal | None = None
    gross_premium: Decimal | None = None
    rate_pct: Decimal | None = None
    brokerage_pct: Decimal | None = None
    lob_id: int | None = None
    sub_lob_id: int | None = None
    vat_pct: Decimal | None = None
    agent_commission_pct: Decimal | None = None
    levies: dict[str, Any] | str | None = None


class AutoPopulateResponse(BaseModel):
    sum_insured: Decimal
    gross_premium: Decimal
    rate_pct: Decimal
    brokerage_pct: Decimal
    breakdown: PremiumBreakdownResponse
    suggestions: dict[str, str] = Field(default_factory=dict)
