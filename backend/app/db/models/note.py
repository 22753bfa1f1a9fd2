"""
Note — debit note (DN) or credit note (CN), numbered per note type and year.

CN notes may be split across co-insurers; each share is one
CoInsuranceShare row.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.models.base import Base, Money, PremiumSnapshotMixin, utcnow


class Note(PremiumSnapshotMixin, Base):
    __tablename__ = "notes"
    __table_args__ = (
        UniqueConstraint("note_type", "note_year", "note_seq", name="uq_note_type_year_seq"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    note_number: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    note_type: Mapped[str] = mapped_column(String(2), nullable=False)  # DN | CN
    note_seq: Mapped[int] = mapped_column(Integer, nullable=False)
    note_year: Mapped[int] = mapped_column(Integer, nullable=False)

    client_id: Mapped[int] = mapped_column(ForeignKey("clients.id"), nullable=False, index=True)
    policy_id: Mapped[int] = mapped_column(ForeignKey("policies.id"), nullable=False, index=True)
    insurer_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    gross_premium: Mapped[Decimal] = mapped_column(Money, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="NGN")
    payable_bank_account_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Draft")
    prepared_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    authorized_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    co_insurance_shares: Mapped[list["CoInsuranceShare"]] = relationship(
        back_populates="note", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Note {self.note_number} gross={self.gross_premium} due={self.net_amount_due}>"


class CoInsuranceShare(Base):
    __tablename__ = "co_insurance_shares"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    note_id: Mapped[int] = mapped_column(ForeignKey("notes.id"), nullable=False, index=True)
    insurer_id: Mapped[int] = mapped_column(Integer, nullable=False)
    percentage: Mapped[Decimal] = mapped_column(Numeric(7, 4), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    note: Mapped[Note] = relationship(back_populates="co_insurance_shares")
