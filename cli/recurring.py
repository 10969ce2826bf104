#!/usr/bin/env python3

import sys
import json
from cli.common import format_amount, parse_date, require_owner
from models.categories import EXPENSE, FREQUENCIES, MONTHLY, TRANSACTION_TYPES
from recurrence import run_trigger
from logger import get_logger

logger = get_logger()


def cmd_process(args, services):
    """Run the recurring transaction processor once.

    Meant to be called by a scheduler (cron, systemd timer) about once a day.
    Prints the result as JSON and exits non-zero if the pass could not run.
    """
    result = run_trigger(services, as_of=args.as_of)
    print(json.dumps(result))

    if not result["success"]:
        sys.exit(1)


def cmd_list(args, services):
    """List recurring definitions, soonest due first."""
    owner_id = require_owner(services)

    definitions = services.recurring.find_by_owner(owner_id)
    if not definitions:
        logger.info("No recurring transactions found.")
        return

    logger.info("\nRecurring transactions:")
    logger.info("=" * 80)
    for d in definitions:
        state = "active" if d.is_active else "paused"
        logger.info(f"ID: {d.id}")
        logger.info(f"  {d.title}: {format_amount(d.amount)} ({d.type}, {d.category or '-'})")
        logger.info(f"  {d.frequency}, next run {d.next_run_date}, {state}")
        if d.last_run_date:
            logger.info(f"  last run {d.last_run_date}")
        logger.info("-" * 80)


def cmd_create(args, services):
    """Create a recurring definition."""
    owner_id = require_owner(services)

    definition = services.recurring.create(
        owner_id,
        title=args.title,
        amount=args.amount,
        type=args.type,
        frequency=args.frequency,
        next_run_date=args.next_run_date,
        category=args.category,
        notes=args.notes,
    )
    logger.info(f"✓ Recurring transaction created with ID: {definition.id}")
    logger.info(f"  First run on {definition.next_run_date} ({definition.frequency})")


def cmd_edit(args, services):
    """Edit a recurring definition."""
    owner_id = require_owner(services)

    changes = {
        field: value
        for field, value in (
            ("title", args.title),
            ("amount", args.amount),
            ("type", args.type),
            ("category", args.category),
            ("frequency", args.frequency),
            ("next_run_date", args.next_run_date),
            ("notes", args.notes),
        )
        if value is not None
    }
    if not changes:
        logger.error("Nothing to update.")
        sys.exit(1)

    definition = services.recurring.update(owner_id, args.recurring_id, **changes)
    logger.info(f"✓ Recurring transaction {definition.id} updated")


def cmd_toggle(args, services):
    """Pause or resume a recurring definition."""
    owner_id = require_owner(services)

    definition = services.recurring.set_active(
        owner_id, args.recurring_id, args.state == "on"
    )
    state = "resumed" if definition.is_active else "paused"
    logger.info(f"✓ Recurring transaction '{definition.title}' {state}")


def cmd_delete(args, services):
    """Delete a recurring definition."""
    owner_id = require_owner(services)

    if not services.recurring.delete(owner_id, args.recurring_id):
        logger.error(f"Recurring transaction with ID '{args.recurring_id}' not found.")
        sys.exit(1)
    logger.info("✓ Recurring transaction deleted")


def setup_parser(subparsers):
    """Setup recurring subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "recurring",
        help="Recurring transactions",
        description="Manage recurring transactions and run the scheduled processor",
    )

    recurring_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available recurring commands",
        dest="subcommand",
        required=True,
    )

    # recurring process
    process_parser = recurring_subparsers.add_parser(
        "process", help="Create transactions for all due recurring definitions"
    )
    process_parser.add_argument(
        "--as-of", type=parse_date, help="Reference date (default: today)"
    )
    process_parser.set_defaults(func=cmd_process)

    # recurring list
    list_parser = recurring_subparsers.add_parser("list", help="List recurring transactions")
    list_parser.set_defaults(func=cmd_list)

    # recurring create
    create_parser = recurring_subparsers.add_parser(
        "create", help="Create a recurring transaction"
    )
    create_parser.add_argument("title")
    create_parser.add_argument("amount")
    create_parser.add_argument("--type", choices=TRANSACTION_TYPES, default=EXPENSE)
    create_parser.add_argument("--frequency", choices=FREQUENCIES, default=MONTHLY)
    create_parser.add_argument(
        "--next-run-date", type=parse_date, required=True, help="First run (YYYY-MM-DD)"
    )
    create_parser.add_argument("--category")
    create_parser.add_argument("--notes")
    create_parser.set_defaults(func=cmd_create)

    # recurring edit
    edit_parser = recurring_subparsers.add_parser("edit", help="Edit a recurring transaction")
    edit_parser.add_argument("recurring_id")
    edit_parser.add_argument("--title")
    edit_parser.add_argument("--amount")
    edit_parser.add_argument("--type", choices=TRANSACTION_TYPES)
    edit_parser.add_argument("--frequency", choices=FREQUENCIES)
    edit_parser.add_argument("--next-run-date", type=parse_date)
    edit_parser.add_argument("--category")
    edit_parser.add_argument("--notes")
    edit_parser.set_defaults(func=cmd_edit)

    # recurring toggle
    toggle_parser = recurring_subparsers.add_parser(
        "toggle", help="Pause (off) or resume (on) a recurring transaction"
    )
    toggle_parser.add_argument("recurring_id")
    toggle_parser.add_argument("state", choices=("on", "off"))
    toggle_parser.set_defaults(func=cmd_toggle)

    # recurring delete
    delete_parser = recurring_subparsers.add_parser(
        "delete", help="Delete a recurring transaction"
    )
    delete_parser.add_argument("recurring_id")
    delete_parser.set_defaults(func=cmd_delete)
