"""Shared test fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.hh_common.database import get_db_session
from src.main import app


@pytest.fixture
def fake_db() -> MagicMock:
    db = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


@pytest.fixture
async def client(fake_db: MagicMock) -> AsyncClient:
    """Async HTTP client with the DB session dependency replaced by a mock."""

    async def _override():
        yield fake_db

    app.dependency_overrides[get_db_session] = _override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_db_session, None)
