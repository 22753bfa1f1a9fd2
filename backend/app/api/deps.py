"""Shared dependencies for API routes."""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock, system_clock
from app.db.session import async_session
from app.db.session import get_db as _get_db
from app.issuance import IssuanceService
from app.numbering import SequenceGenerator


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session."""
    async for session in _get_db():
        yield session


def get_clock() -> Clock:
    return system_clock


def get_sequence_generator(clock: Clock = Depends(get_clock)) -> SequenceGenerator:
    """Generator bound to the application session factory."""
    return SequenceGenerator(async_session, clock=clock)


def get_issuance_service(
    db: AsyncSession = Depends(get_db),
    generator: SequenceGenerator = Depends(get_sequence_generator),
) -> IssuanceService:
    return IssuanceService(db, generator)


async def get_actor_id(x_user_id: str | None = Header(default=None)) -> int | None:
    """
    Acting user id from the X-User-Id header.

    Authentication happens upstream; this only records who prepared a
    document.  A missing header is allowed, a malformed one is not.
    """
    if x_user_id is None or x_user_id.strip() == "":
        return None
    try:
        return int(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-User-Id must be an integer",
        ) from None
