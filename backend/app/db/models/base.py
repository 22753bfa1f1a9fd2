"""
SQLAlchemy declarative base and shared utilities for all models.

Convention:
    - Each table lives in its own file under `app/db/models/`
    - Every model file imports `Base` from here
    - The `__init__.py` re-exports all models so Alembic sees them
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import JSON, Numeric
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


# ─── Shared column types ──────────────────────
# JSONB on Postgres, plain JSON elsewhere (SQLite in tests).
JSONType = JSON().with_variant(JSONB(), "postgresql")

# Money is stored with two decimals; rates keep four.
Money = Numeric(18, 2)
Rate = Numeric(9, 4)


# ─── Shared helpers ───────────────────────────
def utcnow() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


class PremiumSnapshotMixin:
    """Columns holding a PremiumBreakdown snapshot on the owning record."""

    brokerage_pct: Mapped[Decimal] = mapped_column(Rate, nullable=False, default=0)
    brokerage_amount: Mapped[Decimal] = mapped_column(Money, nullable=False, default=0)
    vat_pct: Mapped[Decimal] = mapped_column(Rate, nullable=False, default=Decimal("7.5"))
    vat_on_brokerage: Mapped[Decimal] = mapped_column(Money, nullable=False, default=0)
    agent_commission_pct: Mapped[Decimal] = mapped_column(Rate, nullable=False, default=0)
    agent_commission_amount: Mapped[Decimal] = mapped_column(Money, nullable=False, default=0)
    net_brokerage: Mapped[Decimal] = mapped_column(Money, nullable=False, default=0)
    levies: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    levies_total: Mapped[Decimal] = mapped_column(Money, nullable=False, default=0)
    net_amount_due: Mapped[Decimal] = mapped_column(Money, nullable=False, default=0)
    insurer_net_amount: Mapped[Decimal] = mapped_column(Money, nullable=False, default=0)

    def apply_breakdown(self, breakdown) -> None:
        """Copy a PremiumBreakdown onto this record."""
        self.brokerage_pct = breakdown.brokerage_pct
        self.brokerage_amount = breakdown.brokerage_amount
        self.vat_pct = breakdown.vat_pct
        self.vat_on_brokerage = breakdown.vat_on_brokerage
        self.agent_commission_pct = breakdown.agent_commission_pct
        self.agent_commission_amount = breakdown.agent_commission_amount
        self.net_brokerage = breakdown.net_brokerage
        self.levies = {key: str(amount) for key, amount in breakdown.levies.items()}
        self.levies_total = breakdown.levies_total
        self.net_amount_due = breakdown.net_amount_due
        self.insurer_net_amount = breakdown.insurer_net_amount
