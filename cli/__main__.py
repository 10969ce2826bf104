#!/usr/bin/env python3
"""
Dinari CLI - command-line interface for the Dinari wallet.

Usage:
    python -m cli [--owner USER_ID] <command> <subcommand> [options]

Commands:
    transactions Record and review transactions
    budgets      Monthly category budgets
    recurring    Recurring transactions and the scheduled processor
    migrate      Database migrations

Examples:
    python -m cli transactions add "Makan siang" 45000 --type expense --category Makanan
    python -m cli budgets set Makanan 500000 --month 3 --year 2025
    python -m cli budgets status
    python -m cli recurring process
    python -m cli migrate apply
"""

import sys
import argparse
from cli import budgets, migrate, recurring, transactions
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from errors import OwnershipError, ValidationError
from logger import setup_logging

_OWNER_COMMANDS = ("transactions", "budgets", "recurring")


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Dinari - Personal finance tracking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--owner",
        help="Acting user ID (defaults to session.owner_id from the config file)",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    transactions.setup_parser(subparsers)
    budgets.setup_parser(subparsers)
    recurring.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    try:
        config = load_config()
        if args.owner:
            config.owner_id = args.owner

        # The trigger prints JSON on stdout; keep console logging on stderr only
        setup_logging(config)

        if args.command in _OWNER_COMMANDS:
            pending = DatabaseManager(config).pending_migrations()
            if pending:
                print(
                    f"Database has {len(pending)} pending migration(s). "
                    "Run 'python -m cli migrate apply' first."
                )
                sys.exit(1)
            services = Services(config)
            args.func(args, services)
        elif args.command == "migrate":
            # Migrate commands need db_manager for raw database operations
            args.func(args, DatabaseManager(config))
        else:
            args.func(args)
    except ValidationError as e:
        print("Invalid input:")
        for field, message in e.errors.items():
            print(f"  {field}: {message}")
        sys.exit(2)
    except OwnershipError as e:
        print(f"Access denied: {e}")
        sys.exit(3)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
