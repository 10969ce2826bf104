"""Tests for DatabaseManager."""

from cli.migrate import apply_pending
from db.manager import DatabaseManager


def test_connect_creates_database_file(test_config):
    manager = DatabaseManager(test_config)

    with manager.connect() as conn:
        foreign_keys = conn.execute("PRAGMA foreign_keys").fetchone()[0]

    assert manager.get_db_path().exists()
    assert foreign_keys == 1


def test_pending_migrations(test_config):
    manager = DatabaseManager(test_config)
    available = sorted(p.name for p in manager.get_migrations_dir().glob("*.sql"))

    assert available
    assert manager.pending_migrations() == available

    with manager.connect() as conn:
        applied = apply_pending(conn, manager.get_migrations_dir())

    assert applied == available
    assert manager.pending_migrations() == []


def test_apply_pending_is_idempotent(db_manager):
    with db_manager.connect() as conn:
        assert apply_pending(conn, db_manager.get_migrations_dir()) == []
