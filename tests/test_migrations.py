"""
The initial migration creates the same storage_slots table the ORM maps.
"""
from __future__ import annotations

import importlib.util
from pathlib import Path

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

MIGRATION = Path(__file__).resolve().parent.parent / "migrations" / "versions" / "0001_initial_schema.py"


def _load_migration():
    spec = importlib.util.spec_from_file_location("migration_0001", MIGRATION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_upgrade_and_downgrade():
    migration = _load_migration()
    engine = create_engine("sqlite://")
    with engine.begin() as conn:
        ctx = MigrationContext.configure(conn)
        with Operations.context(ctx):
            migration.upgrade()
        columns = {c["name"] for c in inspect(conn).get_columns("storage_slots")}
        assert columns == {"key", "value", "updated_at"}
        assert inspect(conn).get_pk_constraint("storage_slots")["constrained_columns"] == ["key"]

        with Operations.context(ctx):
            migration.downgrade()
        assert "storage_slots" not in inspect(conn).get_table_names()
