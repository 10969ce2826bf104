#!/usr/bin/env python3

import sys
import json
from pathlib import Path
from cli.common import (
    format_amount,
    parse_date,
    parse_datetime,
    require_owner,
)
from models.categories import ALL_CATEGORIES, TRANSACTION_TYPES, EXPENSE
from receipts.scanner import scan_receipt_file
from recurrence import today_in
from tools.transactions import (
    PERIODS,
    category_breakdown,
    filter_transactions,
    monthly_trend,
    summarize,
)
from logger import get_logger

logger = get_logger()


def cmd_add(args, services):
    """Record a new transaction."""
    owner_id = require_owner(services)

    transaction = services.transactions.add(
        owner_id,
        title=args.title,
        amount=args.amount,
        type=args.type,
        category=args.category,
        date=args.date,
        notes=args.notes,
    )

    logger.info(f"✓ Transaction recorded with ID: {transaction.id}")
    logger.info(f"  {transaction.title}: {format_amount(transaction.amount)} ({transaction.type})")


def cmd_list(args, services):
    """List transactions, newest first, with the history filters."""
    owner_id = require_owner(services)

    transactions = filter_transactions(
        services.transactions.find_by_owner(owner_id),
        category=args.category,
        period=args.period,
        start=args.start_date,
        end=args.end_date,
        today=today_in(services.config.timezone),
    )

    if not transactions:
        logger.info("No transactions found.")
        return

    shown = transactions[: args.limit] if args.limit else transactions
    for t in shown:
        sign = "+" if t.type == "income" else "-"
        auto = " [auto]" if t.is_auto_generated else ""
        logger.info(
            f"{t.date.strftime('%Y-%m-%d %H:%M')}  {sign}{format_amount(t.amount):>14}  "
            f"{(t.category or '-'):<10} {t.title}{auto}  ({t.id})"
        )

    logger.info(f"\nTotal transactions: {len(transactions)}")


def cmd_edit(args, services):
    """Edit fields of an existing transaction."""
    owner_id = require_owner(services)

    changes = {
        field: value
        for field, value in (
            ("title", args.title),
            ("amount", args.amount),
            ("type", args.type),
            ("category", args.category),
            ("date", args.date),
            ("notes", args.notes),
        )
        if value is not None
    }
    if not changes:
        logger.error("Nothing to update.")
        sys.exit(1)

    transaction = services.transactions.update(owner_id, args.transaction_id, **changes)
    logger.info(f"✓ Transaction {transaction.id} updated")


def cmd_delete(args, services):
    """Delete one transaction."""
    owner_id = require_owner(services)

    if not services.transactions.delete(owner_id, args.transaction_id):
        logger.error(f"Transaction with ID '{args.transaction_id}' not found.")
        sys.exit(1)
    logger.info("✓ Transaction deleted")


def cmd_delete_all(args, services):
    """Delete every transaction of the current user."""
    owner_id = require_owner(services)

    if not args.yes:
        response = input("This will delete ALL your transactions. Continue? (yes/no): ")
        if response.lower() != "yes":
            logger.info("Cancelled.")
            return

    count = services.transactions.delete_all(owner_id)
    logger.info(f"✓ Deleted {count} transaction(s)")


def cmd_summary(args, services):
    """Show balance, income and expense totals."""
    owner_id = require_owner(services)

    summary = summarize(services.transactions.find_by_owner(owner_id))

    logger.info(f"Balance: {format_amount(summary.balance)}")
    logger.info(f"Income:  {format_amount(summary.income)}")
    logger.info(f"Expense: {format_amount(summary.expense)}")


def cmd_trend(args, services):
    """Show income, expense and net for each month of a year."""
    owner_id = require_owner(services)
    year = args.year or today_in(services.config.timezone).year

    points = monthly_trend(services.transactions.find_by_owner(owner_id), year)

    logger.info(f"{'Month':<8} {'Income':>15} {'Expense':>15} {'Net':>15}")
    for point in points:
        logger.info(
            f"{point.label:<8} {format_amount(point.income):>15} "
            f"{format_amount(point.expense):>15} {format_amount(point.balance):>15}"
        )


def cmd_breakdown(args, services):
    """Show totals per category for one transaction type."""
    owner_id = require_owner(services)

    transactions = filter_transactions(
        services.transactions.find_by_owner(owner_id),
        period=args.period,
        today=today_in(services.config.timezone),
    )
    shares = category_breakdown(transactions, args.type)

    if not shares:
        logger.info("No transactions found.")
        return

    for share in shares:
        logger.info(
            f"{share.category:<10} {format_amount(share.total):>15} "
            f"{share.percentage:6.1f}%  ({share.transaction_count})"
        )


def cmd_scan_receipt(args, services):
    """Scan a receipt image and print the suggested amount."""
    path = Path(args.image)
    if not path.exists():
        logger.error(f"File not found: {args.image}")
        sys.exit(1)

    scan = scan_receipt_file(path, services.config)
    print(json.dumps(scan.to_dict(), indent=2))

    if not scan.success:
        sys.exit(1)


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Record and review transactions",
        description="Record, edit, list and summarize transactions",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    # transactions add
    add_parser = transactions_subparsers.add_parser("add", help="Record a transaction")
    add_parser.add_argument("title", help="Short description")
    add_parser.add_argument("amount", help="Positive amount")
    add_parser.add_argument("--type", choices=TRANSACTION_TYPES, default=EXPENSE)
    add_parser.add_argument("--category", help="Category for the transaction type")
    add_parser.add_argument(
        "--date", type=parse_datetime, help="When it happened (default: now)"
    )
    add_parser.add_argument("--notes", help="Optional notes")
    add_parser.set_defaults(func=cmd_add)

    # transactions list
    list_parser = transactions_subparsers.add_parser("list", help="List transactions")
    list_parser.add_argument("--category", choices=ALL_CATEGORIES)
    list_parser.add_argument("--period", choices=PERIODS, default="all")
    list_parser.add_argument("--start-date", type=parse_date, help="For --period custom")
    list_parser.add_argument("--end-date", type=parse_date, help="For --period custom")
    list_parser.add_argument("--limit", type=int, default=20, help="0 shows all")
    list_parser.set_defaults(func=cmd_list)

    # transactions edit
    edit_parser = transactions_subparsers.add_parser("edit", help="Edit a transaction")
    edit_parser.add_argument("transaction_id")
    edit_parser.add_argument("--title")
    edit_parser.add_argument("--amount")
    edit_parser.add_argument("--type", choices=TRANSACTION_TYPES)
    edit_parser.add_argument("--category")
    edit_parser.add_argument("--date", type=parse_datetime)
    edit_parser.add_argument("--notes")
    edit_parser.set_defaults(func=cmd_edit)

    # transactions delete
    delete_parser = transactions_subparsers.add_parser(
        "delete", help="Delete a transaction"
    )
    delete_parser.add_argument("transaction_id")
    delete_parser.set_defaults(func=cmd_delete)

    # transactions delete-all
    delete_all_parser = transactions_subparsers.add_parser(
        "delete-all", help="Delete all of your transactions"
    )
    delete_all_parser.add_argument("--yes", action="store_true", help="Skip confirmation")
    delete_all_parser.set_defaults(func=cmd_delete_all)

    # transactions summary
    summary_parser = transactions_subparsers.add_parser(
        "summary", help="Show balance, income and expense"
    )
    summary_parser.set_defaults(func=cmd_summary)

    # transactions trend
    trend_parser = transactions_subparsers.add_parser(
        "trend", help="Show monthly totals for a year"
    )
    trend_parser.add_argument("--year", type=int, help="Defaults to the current year")
    trend_parser.set_defaults(func=cmd_trend)

    # transactions breakdown
    breakdown_parser = transactions_subparsers.add_parser(
        "breakdown", help="Show totals per category"
    )
    breakdown_parser.add_argument("--type", choices=TRANSACTION_TYPES, default=EXPENSE)
    breakdown_parser.add_argument("--period", choices=PERIODS, default="month")
    breakdown_parser.set_defaults(func=cmd_breakdown)

    # transactions scan-receipt
    scan_parser = transactions_subparsers.add_parser(
        "scan-receipt", help="Suggest an amount from a receipt photo"
    )
    scan_parser.add_argument("image", help="Path to the receipt image")
    scan_parser.set_defaults(func=cmd_scan_receipt)
