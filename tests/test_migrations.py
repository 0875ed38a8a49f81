"""Tests that the notification migration builds the expected schema."""

import importlib.util
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from backoffice.core import database as db_module

VERSIONS = Path(__file__).resolve().parents[1] / "backoffice" / "alembic" / "versions"


def _load_migration():
    path = next(VERSIONS.glob("*_create_notifications_tables.py"))
    spec = importlib.util.spec_from_file_location("create_notifications_tables", path)
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None
    spec.loader.exec_module(module)
    return module


def _run(engine, step):
    migration = _load_migration()
    with engine.begin() as conn:
        ctx = MigrationContext.configure(conn)
        with Operations.context(ctx):
            getattr(migration, step)()


@pytest.fixture
def engine():
    eng = create_engine("sqlite://")
    yield eng
    eng.dispose()


class TestNotificationsMigration:
    def test_revision_metadata(self):
        migration = _load_migration()
        assert migration.revision == "3f9c2b7a1d64"
        assert migration.down_revision is None

    def test_upgrade_creates_tables(self, engine):
        _run(engine, "upgrade")
        inspector = inspect(engine)
        assert {"notifications", "notification_preferences"} <= set(inspector.get_table_names())

        columns = {c["name"] for c in inspector.get_columns("notifications")}
        assert {
            "id",
            "user_id",
            "type",
            "title",
            "message",
            "entity_type",
            "entity_id",
            "read_at",
            "action_url",
            "metadata",
            "created_at",
            "deleted_at",
        } == columns

        index_names = {i["name"] for i in inspector.get_indexes("notifications")}
        assert {
            "idx_notifications_user_id",
            "idx_notifications_read",
            "idx_notifications_type",
            "idx_notifications_entity",
            "idx_notifications_created_at",
        } <= index_names

    def test_preference_unique_constraint(self, engine):
        _run(engine, "upgrade")
        uniques = inspect(engine).get_unique_constraints("notification_preferences")
        assert {
            "name": "notification_preferences_user_id_notification_type_key",
            "column_names": ["user_id", "notification_type"],
        } in [{"name": u["name"], "column_names": u["column_names"]} for u in uniques]

    def test_downgrade_drops_tables(self, engine):
        _run(engine, "upgrade")
        _run(engine, "downgrade")
        assert inspect(engine).get_table_names() == []


class TestInitDb:
    def test_init_db_creates_model_tables(self):
        db_module.Base.metadata.drop_all(bind=db_module.engine)
        db_module.init_db()
        tables = set(inspect(db_module.engine).get_table_names())
        assert {"notifications", "notification_preferences"} <= tables
