"""
SequenceGenerator — issues unique, gap-minimising document numbers.

Each call to `next_code` runs the atomic increment in its own short
transaction on a fresh session, so a number is durably reserved before the
caller starts writing the owning record.  Transient store failures
(serialization conflicts, lock timeouts, dropped connections) are retried
with exponential backoff up to SEQUENCE_MAX_RETRIES attempts.

Usage:
    generator = SequenceGenerator(async_session)
    code = await generator.next_code("POLICY")
    code.code   # "POL/2025/000001"
"""

from __future__ import annotations

import asyncio
from typing import Callable

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock, system_clock
from app.core.config import settings
from app.core.constants import EntityType
from app.core.errors import SequenceConflictError, SequenceStoreError
from app.core.logging import get_logger
from app.db.models.sequence_counter import SequenceCounter
from app.numbering.codes import GeneratedCode, SequenceKey, render_code
from app.repositories import sequences as sequence_repository

logger = get_logger(__name__)


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, (OperationalError, IntegrityError)):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    return isinstance(exc, (ConnectionError, TimeoutError))


def _is_conflict(exc: BaseException) -> bool:
    """True for write conflicts, False for an unreachable store."""
    if isinstance(exc, IntegrityError):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return False
    if isinstance(exc, OperationalError):
        text = str(exc.orig if exc.orig is not None else exc).lower()
        return any(m in text for m in ("lock", "serializ", "deadlock", "could not obtain"))
    return False


class SequenceGenerator:
    """Issues document numbers from the sequence_counters table."""

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        *,
        clock: Clock = system_clock,
        max_retries: int | None = None,
        backoff_ms: int | None = None,
        org: str | None = None,
    ) -> None:
        self._session_factory = session_factory
        self.clock = clock
        self.max_retries = max(1, max_retries if max_retries is not None else settings.SEQUENCE_MAX_RETRIES)
        self.backoff_ms = backoff_ms if backoff_ms is not None else settings.SEQUENCE_RETRY_BACKOFF_MS
        self.org = org

    def key_for(
        self,
        entity_type: EntityType | str,
        year: int | None = None,
        sub_type: str | None = None,
    ) -> SequenceKey:
        """Build a partition key, defaulting the year to the clock's year."""
        return SequenceKey.build(
            entity_type,
            year if year is not None else self.clock.today().year,
            sub_type,
        )

    # ── Issue ─────────────────────────────────────────────

    async def next_code(
        self,
        entity_type: EntityType | str,
        year: int | None = None,
        sub_type: str | None = None,
    ) -> GeneratedCode:
        """
        Reserve the next number in (entity_type, year, sub_type) and render it.

        Raises:
            UnknownEntityTypeError / InvalidSubTypeError / InvalidYearError
                before touching the store.
            SequenceConflictError when retries are exhausted on conflicts.
            SequenceStoreError when the store is unreachable.
        """
        key = self.key_for(entity_type, year, sub_type)
        seq = await self._increment_with_retry(key)
        generated = render_code(key, seq, org=self.org)
        logger.info(
            "Sequence issued",
            entity_type=key.entity_type.value,
            year=key.year,
            sub_type=key.sub_type,
            seq=seq,
            code=generated.code,
        )
        return generated

    async def _increment_with_retry(self, key: SequenceKey) -> int:
        log = logger.bind(sequence_key=str(key))

        for attempt in range(1, self.max_retries + 1):
            try:
                async with self._session_factory() as session:
                    async with session.begin():
                        return await sequence_repository.increment(
                            session, key, now=self.clock.now()
                        )

            except (SQLAlchemyError, ConnectionError, TimeoutError) as exc:
                if not _is_transient(exc):
                    log.error("Sequence store failure", error=str(exc))
                    raise SequenceStoreError(
                        f"Sequence store failed while issuing {key}",
                        details={"sequence_key": str(key)},
                    ) from exc

                if attempt < self.max_retries:
                    wait_ms = self.backoff_ms * 2 ** (attempt - 1)
                    log.warning(
                        f"Sequence increment failed (attempt {attempt}/{self.max_retries}), "
                        f"retrying in {wait_ms}ms",
                        error=str(exc),
                    )
                    await asyncio.sleep(wait_ms / 1000)
                    continue

                log.error(
                    "Sequence increment failed after all retries",
                    attempts=attempt,
                    error=str(exc),
                )
                if _is_conflict(exc):
                    raise SequenceConflictError(
                        f"Could not issue a number for {key} after {attempt} attempts",
                        attempts=attempt,
                        details={"sequence_key": str(key)},
                    ) from exc
                raise SequenceStoreError(
                    f"Sequence store unreachable while issuing {key}",
                    details={"sequence_key": str(key), "attempts": attempt},
                ) from exc

        raise SequenceConflictError(
            f"Could not issue a number for {key}", attempts=self.max_retries
        )

    # ── Compensation ──────────────────────────────────────

    async def release(self, generated: GeneratedCode) -> bool:
        """
        Best-effort return of an issued number whose record was never saved.

        The counter is decremented only if `generated.seq` is still the last
        value issued for its partition.  Never raises; a failed release just
        leaves a gap.
        """
        log = logger.bind(code=generated.code, seq=generated.seq)
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    released = await sequence_repository.release(
                        session, generated.key, generated.seq, now=self.clock.now()
                    )
        except (SQLAlchemyError, ConnectionError, TimeoutError) as exc:
            log.warning("Sequence release failed, leaving a gap", error=str(exc))
            return False

        if released:
            log.info("Sequence released")
        else:
            log.warning("Sequence not released, a later number was already issued")
        return released

    # ── Read side ─────────────────────────────────────────

    async def current_value(
        self,
        entity_type: EntityType | str,
        year: int | None = None,
        sub_type: str | None = None,
    ) -> int:
        """Last value issued in a partition (0 if nothing issued yet)."""
        key = self.key_for(entity_type, year, sub_type)
        async with self._session_factory() as session:
            counter = await sequence_repository.get_counter(session, key)
        return counter.last_seq if counter is not None else 0

    async def list_counters(
        self,
        *,
        year: int | None = None,
        entity_type: EntityType | str | None = None,
    ) -> list[SequenceCounter]:
        async with self._session_factory() as session:
            return await sequence_repository.list_counters(
                session,
                year=year,
                entity_type=str(entity_type) if entity_type is not None else None,
            )
