"""Integration-test fixtures (requires a migrated PostgreSQL).

Pre-condition: alembic upgrade head

All integration tests share a single event loop so that the module-level
SQLAlchemy async engine pool (created at import time) stays valid across
the whole session. Without a reachable database every test is skipped.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.hh_common.database import async_session_factory, ping_database
from src.main import app


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client sharing the engine pool."""
    try:
        await ping_database()
    except Exception as e:
        pytest.skip(f"PostgreSQL not reachable: {e}")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session")
async def household(client: AsyncClient) -> dict[str, str]:
    """A fresh user with one routine of two tasks ($0.50 and $0.25)."""
    uid = uuid.uuid4().hex[:8]
    ids = {
        "user": f"kid_{uid}",
        "routine": f"morning_{uid}",
        "bed": f"bed_{uid}",
        "teeth": f"teeth_{uid}",
    }
    async with async_session_factory() as db:
        await db.execute(
            text("INSERT INTO tasks (id, name, value_cents) VALUES (:id, :name, :v)"),
            [
                {"id": ids["bed"], "name": "Make bed", "v": 50},
                {"id": ids["teeth"], "name": "Brush teeth", "v": 25},
            ],
        )
        await db.execute(
            text("INSERT INTO routines (id, name, assigned_user_id) VALUES (:id, 'Morning', :u)"),
            {"id": ids["routine"], "u": ids["user"]},
        )
        await db.execute(
            text(
                "INSERT INTO routine_tasks (routine_id, task_id, position) "
                "VALUES (:r, :t, :p)"
            ),
            [
                {"r": ids["routine"], "t": ids["bed"], "p": 0},
                {"r": ids["routine"], "t": ids["teeth"], "p": 1},
            ],
        )
        await db.commit()
    return ids
