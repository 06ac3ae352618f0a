"""Migration Runner — applies the Alembic revisions at startup and reports history.

Invariants:
    - run_migrations() is idempotent: a second run against the same database is a no-op
    - Alembic shares the runner's connection (config.attributes["connection"]),
      so the whole upgrade is one transaction
    - Startup migrates over the session manager's own engine, so an in-memory
      SQLite database is the same one the app then serves
    - Any failure surfaces as MigrationError; startup treats it as fatal

Design Decisions:
    - Scripts ship inside the package (obscura/migrations) so an installed wheel
      can migrate without the repository checkout
    - baseline-on-migrate: a database that already holds the story tables but has
      no alembic_version table is stamped at the baseline revision instead of
      being re-created; unrelated pre-existing tables are left alone
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from alembic.util import CommandError
from sqlalchemy import inspect
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from obscura.core.errors import MigrationError
from obscura.infrastructure.database import create_engine_for

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"
BASELINE_REVISION = "001_create_story_schema"
BASELINE_TABLES = {"story", "story_tags"}
VERSION_TABLE = "alembic_version"


@dataclass(frozen=True)
class MigrationInfo:
    """One revision as seen from the target database."""
    revision: str
    description: str
    state: str  # "Success" | "Pending"


def build_alembic_config(connection: Connection | None = None) -> Config:
    """Alembic config pointing at the packaged scripts, optionally bound to a connection."""
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.attributes["configure_logger"] = False
    if connection is not None:
        cfg.attributes["connection"] = connection
    return cfg


def _upgrade(connection: Connection, baseline_on_migrate: bool) -> None:
    cfg = build_alembic_config(connection)
    tables = set(inspect(connection).get_table_names())
    if tables and VERSION_TABLE not in tables:
        if not baseline_on_migrate:
            raise MigrationError(
                "database is not empty and has no migration history "
                "(enable baseline-on-migrate)",
            )
        if BASELINE_TABLES <= tables:
            logger.warning(
                "Existing schema found without migration history, stamping baseline",
                extra={"revision": BASELINE_REVISION},
            )
            command.stamp(cfg, BASELINE_REVISION)
    command.upgrade(cfg, "head")


def _history(connection: Connection) -> list[MigrationInfo]:
    script = ScriptDirectory.from_config(build_alembic_config())
    heads = MigrationContext.configure(connection).get_current_heads()
    applied: set[str] = set()
    for head in heads:
        applied.update(
            rev.revision for rev in script.iterate_revisions(head, "base")
        )
    return [
        MigrationInfo(
            revision=rev.revision,
            description=rev.doc,
            state="Success" if rev.revision in applied else "Pending",
        )
        for rev in reversed(list(script.walk_revisions()))
    ]


async def run_migrations(
    database_url: str | None = None,
    baseline_on_migrate: bool = True,
    engine: AsyncEngine | None = None,
) -> None:
    """Upgrade the database to the latest revision.

    When an engine is given it is used as-is and left open; an in-memory
    database only exists inside the engine that created it.
    """
    owned = engine is None
    if owned:
        engine = create_engine_for(database_url)
    try:
        async with engine.begin() as connection:
            await connection.run_sync(_upgrade, baseline_on_migrate)
    except (SQLAlchemyError, CommandError) as e:
        logger.error(f"Migration failed: {e}", exc_info=True)
        raise MigrationError(str(e)) from e
    finally:
        if owned:
            await engine.dispose()
    logger.info("Database schema up to date")


async def migration_history(database_url: str) -> list[MigrationInfo]:
    """List every known revision with its applied state."""
    engine = create_engine_for(database_url)
    try:
        async with engine.connect() as connection:
            return await connection.run_sync(_history)
    finally:
        await engine.dispose()
