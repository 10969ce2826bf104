#!/usr/bin/env python3

from pathlib import Path
from typing import List
from logger import get_logger

logger = get_logger()


def init_schema_migrations_table(conn):
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schema_migrations (
            migration_file TEXT PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.commit()


def get_applied_migrations(conn) -> set:
    cursor = conn.execute("SELECT migration_file FROM schema_migrations")
    return {row[0] for row in cursor.fetchall()}


def get_available_migrations(migrations_dir: Path) -> List[str]:
    if not migrations_dir.exists():
        return []
    return sorted(path.name for path in migrations_dir.glob("*.sql"))


def apply_pending(conn, migrations_dir: Path) -> List[str]:
    """Apply every migration in ``migrations_dir`` not yet recorded on ``conn``.

    Each migration is recorded in schema_migrations right after it runs.

    Returns:
        Names of the migrations that were applied, in order.

    Raises:
        sqlite3.Error: If a migration fails. Earlier migrations stay applied.
    """
    init_schema_migrations_table(conn)
    applied = get_applied_migrations(conn)
    pending = [m for m in get_available_migrations(migrations_dir) if m not in applied]

    for migration_file in pending:
        sql = (migrations_dir / migration_file).read_text()
        try:
            conn.executescript(sql)
            conn.execute(
                "INSERT INTO schema_migrations (migration_file) VALUES (?)",
                (migration_file,),
            )
            conn.commit()
            logger.info(f"Applied migration: {migration_file}")
        except Exception as e:
            conn.rollback()
            logger.error(f"Error applying migration {migration_file}: {e}")
            raise

    return pending


def cmd_status(args, db_manager):
    """Show which migrations are applied and which are pending."""
    available = get_available_migrations(db_manager.get_migrations_dir())
    if not available:
        logger.info("No migrations found.")
        return

    if not db_manager.get_db_path().exists():
        logger.info(
            f"Database does not exist yet; all {len(available)} migration(s) pending. "
            "Run 'python -m cli migrate apply' to create it."
        )
        return

    pending = set(db_manager.pending_migrations())
    for migration in available:
        logger.info(f"  {'PENDING' if migration in pending else 'applied':<8} {migration}")
    logger.info(f"{len(available) - len(pending)} applied, {len(pending)} pending")


def cmd_apply(args, db_manager):
    """Apply pending migrations."""
    with db_manager.connect() as conn:
        applied = apply_pending(conn, db_manager.get_migrations_dir())

    if applied:
        logger.info(f"Successfully applied {len(applied)} migration(s).")
    else:
        logger.info("No pending migrations.")


def setup_parser(subparsers):
    """Setup migrate subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "migrate",
        help="Database migrations",
        description="Manage database schema migrations",
    )

    migrate_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available migration commands",
        dest="subcommand",
        required=True,
    )

    status_parser = migrate_subparsers.add_parser(
        "status", help="Show migration status"
    )
    status_parser.set_defaults(func=cmd_status)

    apply_parser = migrate_subparsers.add_parser(
        "apply", help="Apply pending migrations"
    )
    apply_parser.set_defaults(func=cmd_apply)
