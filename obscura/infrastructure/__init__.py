"""Infrastructure Layer — database sessions, migrations and logging.

Invariants:
    - Infrastructure never imports from core/ domain logic (errors excepted)
    - All SQLAlchemy and Alembic failures are mapped to typed ObscuraError subclasses
"""
