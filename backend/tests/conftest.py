"""Pytest configuration and shared fixtures."""

import os

# Set environment BEFORE importing app modules (settings are read at import).
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite://")

from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.clock import FixedClock
from app.db.models import Base, Client
from app.numbering import SequenceGenerator
from app.repositories import catalog as catalog_repository


@pytest_asyncio.fixture
async def engine(tmp_path):
    """File-backed SQLite so concurrent sessions really use separate connections."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'brokerage.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def generator(session_factory, clock) -> SequenceGenerator:
    return SequenceGenerator(session_factory, clock=clock, max_retries=10, backoff_ms=5)


@pytest_asyncio.fixture
async def catalog(session_factory):
    """
    FIRE LOB (15% brokerage, 10,000 minimum) with two Sub-LOBs:
    FIRE-STK overrides the minimum to 20,000 and brokerage to 12.5%;
    FIRE-FSP inherits everything.  Plus one corporate client.
    """
    async with session_factory() as db:
        lob = await catalog_repository.create_lob(
            db, code="FIRE", name="Fire & Special Perils", default_brokerage_pct="15", min_premium="10000"
        )
        stock = await catalog_repository.create_sub_lob(
            db,
            lob_id=lob.id,
            code="FIRE-STK",
            name="Stock",
            override_brokerage_pct="12.5",
            override_min_premium="20000",
        )
        standard = await catalog_repository.create_sub_lob(db, lob_id=lob.id, code="FIRE-FSP", name="Fire & Special Perils")
        client = Client(client_code="MEIBL/CL/2024/00001", client_type="CORP", company_name="Dangote Foods Ltd")
        db.add(client)
        await db.commit()

    return SimpleNamespace(lob_id=lob.id, stock_id=stock.id, standard_id=standard.id, client_id=client.id)


@pytest.fixture
def policy_payload(catalog) -> dict:
    return {
        "client_id": catalog.client_id,
        "insurer_id": 3,
        "lob_id": catalog.lob_id,
        "sub_lob_id": None,
        "sum_insured": "50000000",
        "gross_premium": "100000",
        "currency": "NGN",
        "policy_start_date": date(2025, 1, 1),
        "policy_end_date": date(2025, 12, 31),
    }
