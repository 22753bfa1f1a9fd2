"""
Lob / SubLob — product catalog supplying brokerage, VAT and minimum premium.

A Sub-LOB may override any of the three LOB defaults; NULL means
"inherit from the parent LOB".
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.models.base import Base, Money, Rate, utcnow


class Lob(Base):
    __tablename__ = "lobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    default_brokerage_pct: Mapped[Decimal] = mapped_column(Rate, nullable=False, default=0)
    default_vat_pct: Mapped[Decimal] = mapped_column(Rate, nullable=False, default=Decimal("7.5"))
    min_premium: Mapped[Decimal] = mapped_column(Money, nullable=False, default=0)
    rate_basis: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    sub_lobs: Mapped[list["SubLob"]] = relationship(back_populates="lob", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Lob {self.code} min_premium={self.min_premium}>"


class SubLob(Base):
    __tablename__ = "sub_lobs"
    __table_args__ = (UniqueConstraint("lob_id", "code", name="uq_sub_lob_code"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lob_id: Mapped[int] = mapped_column(ForeignKey("lobs.id"), nullable=False, index=True)
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    override_brokerage_pct: Mapped[Optional[Decimal]] = mapped_column(Rate, nullable=True)
    override_vat_pct: Mapped[Optional[Decimal]] = mapped_column(Rate, nullable=True)
    override_min_premium: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    lob: Mapped[Lob] = relationship(back_populates="sub_lobs")

    def __repr__(self) -> str:
        return f"<SubLob {self.code} lob_id={self.lob_id}>"
