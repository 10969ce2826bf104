"""SQLite access for the ledger store."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import List

from config import Config, get_migrations_dir


class DatabaseManager:
    """Opens connections to the configured database file.

    Every connection waits at most ``config.db_timeout`` seconds on a locked
    database and enforces foreign keys.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        self.config = config

    @contextmanager
    def connect(self):
        """Yield a connection that is closed on exit.

        Callers commit their own writes; anything left uncommitted is lost.

        Raises:
            sqlite3.OperationalError: If the file cannot be opened or stays
                locked past the timeout.
        """
        db_path = self.get_db_path()
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path, timeout=self.config.db_timeout)
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            yield conn
        finally:
            conn.close()

    def get_db_path(self) -> Path:
        return self.config.db_path

    def get_migrations_dir(self) -> Path:
        return get_migrations_dir()

    def pending_migrations(self) -> List[str]:
        """Names of migration files not yet applied to the database.

        A database file that does not exist yet has every migration pending.
        """
        available = sorted(p.name for p in self.get_migrations_dir().glob("*.sql"))
        if not self.get_db_path().exists():
            return available

        with self.connect() as conn:
            cursor = conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'schema_migrations'"
            )
            if cursor.fetchone() is None:
                return available
            applied = {
                row[0]
                for row in conn.execute("SELECT migration_file FROM schema_migrations")
            }

        return [name for name in available if name not in applied]
