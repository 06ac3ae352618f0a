"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with foreign keys enforced
    - db_manager singleton patched so get_db_manager() serves the test database
    - Helpers read tables directly with SQL, bypassing the repository

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL behavior covered by tests/integration)
    - Schema built from Base.metadata here; the Alembic path is covered by test_migrations
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

import obscura.infrastructure.database as db_module
from obscura.db.base import Base
from obscura.infrastructure.database import DatabaseSessionManager
from obscura.main import app
from obscura.models.story import StoryRecord, StoryTagRecord  # noqa: F401
from obscura.services.story_service import StoryService



@pytest.fixture
async def db_manager():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield manager
    await manager.dispose()


@pytest.fixture
async def client(db_manager):
    """FastAPI test client bound to the test database."""
    original_manager = db_module.db_manager
    db_module.db_manager = db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    db_module.db_manager = original_manager


@pytest.fixture
def story_service(db_manager):
    return StoryService(db_manager)


@pytest.fixture
def run_sql(db_manager):
    """Execute raw SQL against the test database and return the first scalar."""
    async def _run(sql: str, **params):
        async with db_manager.session() as session:
            result = await session.execute(text(sql), params)
            return result.scalar_one_or_none()
    return _run


@pytest.fixture
def story_payload():
    def _payload(**overrides) -> dict:
        body = {
            "title": "The Lighthouse",
            "content": "The lamp went dark at midnight.",
            "author": "Ada",
            "tags": ["sea", "night"],
        }
        body.update(overrides)
        return body
    return _payload
