"""
Policy — the placed risk.  `policy_number` is generated (POL/{YYYY}/{SEQ});
`policy_seq` / `policy_year` snapshot the counter value it came from.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base, Money, Rate, utcnow


class Policy(Base):
    __tablename__ = "policies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    policy_number: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    policy_seq: Mapped[int] = mapped_column(Integer, nullable=False)
    policy_year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    # ── Parties / product ────────────────────
    client_id: Mapped[int] = mapped_column(ForeignKey("clients.id"), nullable=False, index=True)
    insurer_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    lob_id: Mapped[int] = mapped_column(ForeignKey("lobs.id"), nullable=False)
    sub_lob_id: Mapped[Optional[int]] = mapped_column(ForeignKey("sub_lobs.id"), nullable=True)
    import_batch_id: Mapped[Optional[int]] = mapped_column(ForeignKey("import_batches.id"), nullable=True)

    # ── Amounts ──────────────────────────────
    sum_insured: Mapped[Decimal] = mapped_column(Money, nullable=False)
    gross_premium: Mapped[Decimal] = mapped_column(Money, nullable=False)
    rate_pct: Mapped[Optional[Decimal]] = mapped_column(Rate, nullable=True)
    brokerage_pct: Mapped[Optional[Decimal]] = mapped_column(Rate, nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="NGN")

    # ── Period ───────────────────────────────
    policy_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    policy_end_date: Mapped[date] = mapped_column(Date, nullable=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    created_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Policy {self.policy_number} gross={self.gross_premium} status={self.status}>"
