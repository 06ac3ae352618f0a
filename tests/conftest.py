"""Root conftest — shared test configuration."""

import os

# Tests never touch a real PostgreSQL unless POSTGRES_TEST_URL is set
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
os.environ.setdefault("MIGRATE_ON_STARTUP", "false")
os.environ.setdefault("LOG_FORMAT", "text")
