"""HTTP client wired to the test database and a fixed-clock generator."""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.api.deps import get_db, get_sequence_generator
from app.main import app


@pytest_asyncio.fixture
async def client(session_factory, generator):
    async def _get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_sequence_generator] = lambda: generator
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()
