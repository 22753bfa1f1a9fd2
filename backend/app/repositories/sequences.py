"""
Sequence counter repository — atomic read-increment-write on the
sequence_counters table.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit (the caller owns the transaction)
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.base import utcnow
from app.db.models.sequence_counter import SequenceCounter
from app.numbering.codes import SequenceKey

_UPSERT_DIALECTS = ("postgresql", "sqlite")


def _key_filter(key: SequenceKey):
    return (
        SequenceCounter.entity_type == key.entity_type.value,
        SequenceCounter.year == key.year,
        SequenceCounter.sub_type == key.storage_sub_type,
    )


def _upsert_statement(dialect_name: str, key: SequenceKey, now: datetime):
    """INSERT ... ON CONFLICT DO UPDATE SET last_seq = last_seq + 1 RETURNING last_seq."""
    if dialect_name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    else:
        from sqlalchemy.dialects.sqlite import insert

    stmt = insert(SequenceCounter).values(
        entity_type=key.entity_type.value,
        year=key.year,
        sub_type=key.storage_sub_type,
        last_seq=1,
        created_at=now,
        updated_at=now,
    )
    return stmt.on_conflict_do_update(
        index_elements=["entity_type", "year", "sub_type"],
        set_={"last_seq": SequenceCounter.last_seq + 1, "updated_at": now},
    ).returning(SequenceCounter.last_seq)


async def increment(
    db: AsyncSession,
    key: SequenceKey,
    *,
    now: datetime | None = None,
) -> int:
    """
    Advance the counter for `key` and return the new value.

    A missing row is created with last_seq = 1.  On PostgreSQL and SQLite
    this is a single upsert statement; elsewhere the row is locked with
    SELECT ... FOR UPDATE before being updated.
    """
    now = now or utcnow()
    dialect_name = db.get_bind().dialect.name

    if dialect_name in _UPSERT_DIALECTS:
        result = await db.execute(_upsert_statement(dialect_name, key, now))
        return int(result.scalar_one())

    stmt = select(SequenceCounter).where(*_key_filter(key)).with_for_update()
    counter = (await db.execute(stmt)).scalar_one_or_none()
    if counter is None:
        counter = SequenceCounter(
            entity_type=key.entity_type.value,
            year=key.year,
            sub_type=key.storage_sub_type,
            last_seq=1,
            created_at=now,
            updated_at=now,
        )
        db.add(counter)
    else:
        counter.last_seq = counter.last_seq + 1
        counter.updated_at = now
    await db.flush()
    return counter.last_seq


async def release(
    db: AsyncSession,
    key: SequenceKey,
    seq: int,
    *,
    now: datetime | None = None,
) -> bool:
    """
    Compensating decrement: hand `seq` back only if it is still the last
    value issued for `key`.  Returns True when the counter moved.
    """
    stmt = (
        update(SequenceCounter)
        .where(*_key_filter(key), SequenceCounter.last_seq == seq)
        .values(last_seq=seq - 1, updated_at=now or utcnow())
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    await db.flush()
    return result.rowcount == 1


async def get_counter(db: AsyncSession, key: SequenceKey) -> SequenceCounter | None:
    """Fetch the counter row for a partition, if it exists."""
    result = await db.execute(select(SequenceCounter).where(*_key_filter(key)))
    return result.scalar_one_or_none()


async def list_counters(
    db: AsyncSession,
    *,
    year: int | None = None,
    entity_type: str | None = None,
) -> list[SequenceCounter]:
    """List counters, optionally filtered by year and/or entity type."""
    stmt = select(SequenceCounter).order_by(
        SequenceCounter.year.desc(),
        SequenceCounter.entity_type,
        SequenceCounter.sub_type,
    )
    if year is not None:
        stmt = stmt.where(SequenceCounter.year == year)
    if entity_type is not None:
        stmt = stmt.where(SequenceCounter.entity_type == entity_type.upper())
    result = await db.execute(stmt)
    return list(result.scalars().all())
