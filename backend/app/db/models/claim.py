"""
Claim — loss notification against a policy (CLM/{YYYY}/{SEQ}).
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base, Money, utcnow


class Claim(Base):
    __tablename__ = "claims"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    claim_number: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    claim_seq: Mapped[int] = mapped_column(Integer, nullable=False)
    claim_year: Mapped[int] = mapped_column(Integer, nullable=False)

    policy_id: Mapped[int] = mapped_column(ForeignKey("policies.id"), nullable=False, index=True)
    claimant_name: Mapped[str] = mapped_column(String(255), nullable=False)
    claimant_phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    claimant_email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)

    loss_date: Mapped[date] = mapped_column(Date, nullable=False)
    reported_date: Mapped[date] = mapped_column(Date, nullable=False)
    loss_location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    loss_description: Mapped[str] = mapped_column(Text, nullable=False)

    claim_amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="NGN")
    exchange_rate: Mapped[Decimal] = mapped_column(Numeric(12, 6), nullable=False, default=1)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Registered")
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default="Medium")
    registered_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Claim {self.claim_number} policy_id={self.policy_id} status={self.status}>"
