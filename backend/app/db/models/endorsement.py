"""
Endorsement — mid-term change to a policy (END/{YYYY}/{SEQ}).

Financials are computed on the gross premium delta and snapshotted.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base, Money, PremiumSnapshotMixin, utcnow


class Endorsement(PremiumSnapshotMixin, Base):
    __tablename__ = "endorsements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    endorsement_number: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    endorsement_seq: Mapped[int] = mapped_column(Integer, nullable=False)
    endorsement_year: Mapped[int] = mapped_column(Integer, nullable=False)

    policy_id: Mapped[int] = mapped_column(ForeignKey("policies.id"), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    sum_insured_delta: Mapped[Decimal] = mapped_column(Money, nullable=False, default=0)
    gross_premium_delta: Mapped[Decimal] = mapped_column(Money, nullable=False, default=0)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Draft")
    prepared_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    authorized_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Endorsement {self.endorsement_number} policy_id={self.policy_id} delta={self.gross_premium_delta}>"
