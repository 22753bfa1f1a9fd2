"""Financial calculator endpoints (stateless except for LOB lookups)."""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.api.schemas.calculator import (
    AutoPopulateRequest,
    AutoPopulateResponse,
    BreakdownRequest,
    MinimumPremiumRequest,
    MinimumPremiumResponse,
    PremiumBreakdownResponse,
    SlabResponse,
)
from app.core.errors import InvalidFieldError
from app.finance import (
    auto_populate,
    coerce_levy_rates,
    compute_breakdown,
    slab_name,
    suggest_brokerage_slab,
    validate_minimum_premium,
    validate_percentage,
)
from app.repositories import catalog as catalog_repository

router = APIRouter(prefix="/calculator", tags=["Calculator"])


def _optional_pct(name: str, value: Decimal | None) -> Decimal | None:
    return None if value is None else validate_percentage(name, value)


@router.post("/breakdown", response_model=PremiumBreakdownResponse)
async def breakdown(payload: BreakdownRequest) -> PremiumBreakdownResponse:
    """Full premium breakdown for a gross premium and brokerage %."""
    result = compute_breakdown(
        payload.gross_premium,
        validate_percentage("brokerage_pct", payload.brokerage_pct),
        vat_pct=_optional_pct("vat_pct", payload.vat_pct),
        agent_commission_pct=_optional_pct("agent_commission_pct", payload.agent_commission_pct),
        levy_rates=coerce_levy_rates(payload.levies),
    )
    return PremiumBreakdownResponse.model_validate(result.to_dict())


@router.post("/minimum-premium", response_model=MinimumPremiumResponse)
async def minimum_premium(
    payload: MinimumPremiumRequest,
    db: AsyncSession = Depends(get_db),
) -> MinimumPremiumResponse:
    """Check a premium against an explicit minimum or the LOB / Sub-LOB minimum."""
    if payload.min_premium is not None:
        minimum = payload.min_premium
    elif payload.lob_id is not None:
        defaults = await catalog_repository.resolve_product_defaults(db, payload.lob_id, payload.sub_lob_id)
        minimum = defaults.min_premium
    else:
        raise InvalidFieldError("Either min_premium or lob_id is required", field="min_premium")

    check = validate_minimum_premium(payload.gross_premium, minimum, currency=payload.currency)
    return MinimumPremiumResponse(valid=check.valid, message=check.message, min_premium=minimum)


@router.get("/slab", response_model=SlabResponse)
async def slab(gross_premium: Decimal = Query(..., ge=0)) -> SlabResponse:
    """Suggested brokerage slab for a premium (advisory)."""
    pct = suggest_brokerage_slab(gross_premium)
    return SlabResponse(gross_premium=gross_premium, brokerage_pct=pct, slab_name=slab_name(pct))


@router.post("/auto-populate", response_model=AutoPopulateResponse)
async def auto_populate_form(
    payload: AutoPopulateRequest,
    db: AsyncSession = Depends(get_db),
) -> AutoPopulateResponse:
    """Complete the sum insured / premium / rate triangle and cost it."""
    lob_brokerage = lob_minimum = None
    if payload.lob_id is not None:
        defaults = await catalog_repository.resolve_product_defaults(db, payload.lob_id, payload.sub_lob_id)
        lob_brokerage, lob_minimum = defaults.brokerage_pct, defaults.min_premium

    result = auto_populate(
        sum_insured=payload.sum_insured,
        gross_premium=payload.gross_premium,
        rate_pct=payload.rate_pct,
        brokerage_pct=_optional_pct("brokerage_pct", payload.brokerage_pct),
        lob_default_brokerage=lob_brokerage,
        lob_min_premium=lob_minimum,
        vat_pct=_optional_pct("vat_pct", payload.vat_pct),
        agent_commission_pct=_optional_pct("agent_commission_pct", payload.agent_commission_pct),
        levy_rates=coerce_levy_rates(payload.levies),
    )
    if result is None:
        raise InvalidFieldError(
            "At least one of sum_insured, gross_premium or rate_pct is required",
            field="gross_premium",
        )
    return AutoPopulateResponse.model_validate(result.to_dict())
