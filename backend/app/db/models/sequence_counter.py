"""
SequenceCounter — one row per numbering partition.

Key: (entity_type, year, sub_type).  The unique constraint, not the
application, guarantees there is exactly one counter per partition.
`sub_type` is never NULL: the empty string is the "no sub-type" partition.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.core.constants import NO_SUB_TYPE
from app.db.models.base import Base, utcnow


class SequenceCounter(Base):
    __tablename__ = "sequence_counters"
    __table_args__ = (
        UniqueConstraint("entity_type", "year", "sub_type", name="uq_sequence_counter_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity_type: Mapped[str] = mapped_column(String(32), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    sub_type: Mapped[str] = mapped_column(
        String(16), nullable=False, default=NO_SUB_TYPE, server_default=NO_SUB_TYPE
    )
    last_seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        sub = f"/{self.sub_type}" if self.sub_type else ""
        return f"<SequenceCounter {self.entity_type}{sub} {self.year} last_seq={self.last_seq}>"
