"""Shared pytest fixtures for all tests."""

import pytest

from config import Config
from cli.migrate import apply_pending
from db.manager import DatabaseManager
from services.base import Services


@pytest.fixture
def test_config(tmp_path):
    """Configuration pointing every path at a temporary directory."""
    return Config(
        base_dir=tmp_path / "dinari",
        db_data_dir=tmp_path / "dinari" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "dinari" / "logs",
        db_timeout=1.0,
        owner_id="user-1",
        timezone="UTC",
        claim_before_insert=True,
        receipts_enabled=False,
    )


@pytest.fixture
def db_manager(test_config):
    """DatabaseManager over a fresh database file with all migrations applied.

    Each ``connect()`` opens a new connection, the same way separate CLI
    invocations or trigger runs would.
    """
    manager = DatabaseManager(test_config)
    with manager.connect() as conn:
        apply_pending(conn, manager.get_migrations_dir())
    return manager


@pytest.fixture
def services(test_config, db_manager):
    """Services container over the migrated test database."""
    return Services(test_config, db_manager=db_manager)
