"""
Product catalog repository — LOB / Sub-LOB lookups for issuance defaults.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.db.models.lob import Lob, SubLob


@dataclass(frozen=True)
class ProductDefaults:
    """Effective LOB settings after Sub-LOB overrides are applied."""

    lob_id: int
    sub_lob_id: int | None
    min_premium: Decimal
    brokerage_pct: Decimal
    vat_pct: Decimal


async def get_lob(db: AsyncSession, lob_id: int) -> Lob | None:
    return await db.get(Lob, lob_id)


async def get_lob_by_code(db: AsyncSession, code: str) -> Lob | None:
    stmt = select(Lob).where(Lob.code == code.strip().upper())
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_sub_lob(db: AsyncSession, sub_lob_id: int) -> SubLob | None:
    return await db.get(SubLob, sub_lob_id)


async def create_lob(
    db: AsyncSession,
    *,
    code: str,
    name: str,
    default_brokerage_pct: Decimal | float | str,
    min_premium: Decimal | float | str,
    default_vat_pct: Decimal | float | str = Decimal("7.5"),
    description: str | None = None,
) -> Lob:
    """Create a LOB row (seed script and tests)."""
    lob = Lob(
        code=code.strip().upper(),
        name=name.strip(),
        description=description,
        default_brokerage_pct=Decimal(str(default_brokerage_pct)),
        default_vat_pct=Decimal(str(default_vat_pct)),
        min_premium=Decimal(str(min_premium)),
    )
    db.add(lob)
    await db.flush()
    return lob


async def create_sub_lob(
    db: AsyncSession,
    *,
    lob_id: int,
    code: str,
    name: str,
    override_brokerage_pct: Decimal | float | str | None = None,
    override_vat_pct: Decimal | float | str | None = None,
    override_min_premium: Decimal | float | str | None = None,
) -> SubLob:
    def _opt(value):
        return None if value is None else Decimal(str(value))

    sub_lob = SubLob(
        lob_id=lob_id,
        code=code.strip().upper(),
        name=name.strip(),
        override_brokerage_pct=_opt(override_brokerage_pct),
        override_vat_pct=_opt(override_vat_pct),
        override_min_premium=_opt(override_min_premium),
    )
    db.add(sub_lob)
    await db.flush()
    return sub_lob


async def resolve_product_defaults(
    db: AsyncSession,
    lob_id: int,
    sub_lob_id: int | None = None,
) -> ProductDefaults:
    """
    Resolve minimum premium, brokerage % and VAT % for a LOB / Sub-LOB.

    A Sub-LOB override is used whenever it is not NULL (a zero override is
    a real value).  Raises NotFoundError for a missing LOB, or a Sub-LOB
    that is missing or belongs to another LOB.
    """
    lob = await get_lob(db, lob_id)
    if lob is None:
        raise NotFoundError(f"LOB {lob_id} not found", details={"lob_id": lob_id})

    min_premium = lob.min_premium
    brokerage_pct = lob.default_brokerage_pct
    vat_pct = lob.default_vat_pct

    if sub_lob_id is not None:
        sub_lob = await get_sub_lob(db, sub_lob_id)
        if sub_lob is None or sub_lob.lob_id != lob.id:
            raise NotFoundError(
                f"Sub-LOB {sub_lob_id} not found for LOB {lob_id}",
                details={"lob_id": lob_id, "sub_lob_id": sub_lob_id},
            )
        if sub_lob.override_min_premium is not None:
            min_premium = sub_lob.override_min_premium
        if sub_lob.override_brokerage_pct is not None:
            brokerage_pct = sub_lob.override_brokerage_pct
        if sub_lob.override_vat_pct is not None:
            vat_pct = sub_lob.override_vat_pct

    return ProductDefaults(
        lob_id=lob.id,
        sub_lob_id=sub_lob_id,
        min_premium=Decimal(min_premium),
        brokerage_pct=Decimal(brokerage_pct),
        vat_pct=Decimal(vat_pct),
    )


async def get_sub_lob_by_code(db: AsyncSession, lob_id: int, code: str) -> SubLob | None:
    stmt = select(SubLob).where(SubLob.lob_id == lob_id, SubLob.code == code.strip().upper())
    result = await db.execute(stmt)
    return result.scalar_one_or_none()
