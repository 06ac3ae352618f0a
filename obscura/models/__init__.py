"""ORM models — one module per table group, imported explicitly by migrations and tests."""
