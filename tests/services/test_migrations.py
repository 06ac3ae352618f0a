"""Schema migrations — Alembic upgrade, history and baseline against file-backed SQLite.

Invariants:
    - run_migrations() creates the story schema and is idempotent
    - History lists 001_create_story_schema once, in state Success after upgrade
    - story_tags rows cascade with their story; blank titles are refused by a CHECK
    - Existing story tables without history are stamped, not recreated
    - A non-empty unversioned database fails when baseline is disabled
"""

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.exc import IntegrityError

from obscura.core.errors import MigrationError
from obscura.db.base import Base
from obscura.infrastructure.database import create_engine_for
from obscura.infrastructure.migrations import (
    BASELINE_REVISION, migration_history, run_migrations,
)
from obscura.models.story import StoryRecord, StoryTagRecord  # noqa: F401


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'obscura.db'}"


@pytest.fixture
async def engine(database_url):
    engine = create_engine_for(database_url)
    yield engine
    await engine.dispose()


async def _table_names(engine) -> set[str]:
    async with engine.connect() as conn:
        return set(await conn.run_sync(lambda c: inspect(c).get_table_names()))


async def test_fresh_database_reports_pending(database_url):
    history = await migration_history(database_url)

    assert [(m.revision, m.state) for m in history] == [
        (BASELINE_REVISION, "Pending"),
    ]


async def test_upgrade_creates_schema_and_records_history(database_url, engine):
    await run_migrations(database_url)

    assert {"story", "story_tags"} <= await _table_names(engine)
    history = await migration_history(database_url)
    assert len(history) == 1
    assert history[0].revision == "001_create_story_schema"
    assert history[0].description == "create story schema"
    assert history[0].state == "Success"


async def test_running_twice_is_a_no_op(database_url):
    await run_migrations(database_url)
    await run_migrations(database_url)

    history = await migration_history(database_url)
    assert [m.revision for m in history].count(BASELINE_REVISION) == 1
    assert all(m.state == "Success" for m in history)


async def test_story_table_has_expected_columns(database_url, engine):
    await run_migrations(database_url)

    async with engine.connect() as conn:
        columns = await conn.run_sync(
            lambda c: inspect(c).get_columns("story"),
        )
    assert {c["name"] for c in columns} == {
        "id", "title", "content", "author", "created_at",
    }
    assert all(not c["nullable"] for c in columns)


async def test_story_tables_are_indexed(database_url, engine):
    await run_migrations(database_url)

    async with engine.connect() as conn:
        count = (await conn.execute(text(
            "SELECT COUNT(*) FROM sqlite_master "
            "WHERE type = 'index' AND tbl_name IN ('story', 'story_tags')"
        ))).scalar_one()
    assert count >= 4


async def test_tags_cascade_on_story_delete(database_url, engine):
    await run_migrations(database_url)

    async with engine.begin() as conn:
        await conn.execute(text(
            "INSERT INTO story (id, title, content, author, created_at) "
            "VALUES (1, 'Cascade', 'Body', 'Ada', '2025-01-01 00:00:00')"
        ))
        await conn.execute(text(
            "INSERT INTO story_tags (story_id, tags_order, tags) "
            "VALUES (1, 0, 'a'), (1, 1, 'b')"
        ))
        await conn.execute(text("DELETE FROM story WHERE id = 1"))
        remaining = (await conn.execute(
            text("SELECT COUNT(*) FROM story_tags"),
        )).scalar_one()
    assert remaining == 0


async def test_blank_title_rejected_by_check_constraint(database_url, engine):
    await run_migrations(database_url)

    with pytest.raises(IntegrityError):
        async with engine.begin() as conn:
            await conn.execute(text(
                "INSERT INTO story (title, content, author, created_at) "
                "VALUES ('   ', 'Body', 'Ada', '2025-01-01 00:00:00')"
            ))


async def test_existing_schema_is_stamped_at_baseline(database_url, engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(text(
            "INSERT INTO story (title, content, author, created_at) "
            "VALUES ('Kept', 'Body', 'Ada', '2025-01-01 00:00:00')"
        ))

    await run_migrations(database_url, baseline_on_migrate=True)

    history = await migration_history(database_url)
    assert history[0].state == "Success"
    async with engine.connect() as conn:
        titles = (await conn.execute(text("SELECT title FROM story"))).scalars().all()
    assert titles == ["Kept"]


async def test_unrelated_tables_are_left_alone(database_url, engine):
    async with engine.begin() as conn:
        await conn.execute(text("CREATE TABLE legacy (id INTEGER PRIMARY KEY)"))

    await run_migrations(database_url, baseline_on_migrate=True)

    assert {"legacy", "story", "story_tags"} <= await _table_names(engine)


async def test_unversioned_database_fails_without_baseline(database_url, engine):
    async with engine.begin() as conn:
        await conn.execute(text("CREATE TABLE legacy (id INTEGER PRIMARY KEY)"))

    with pytest.raises(MigrationError):
        await run_migrations(database_url, baseline_on_migrate=False)

    assert "story" not in await _table_names(engine)
