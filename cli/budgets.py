#!/usr/bin/env python3

import sys
from cli.common import current_period, format_amount, require_owner
from models.categories import BUDGET_CATEGORIES
from tools.alerts import EXCEEDED, evaluate_alerts
from tools.budgets import aggregate, budget_overview
from logger import get_logger

logger = get_logger()


def cmd_set(args, services):
    """Create or update the budget of a category for a month."""
    owner_id = require_owner(services)
    month, year = current_period(args.month, args.year, services.config.timezone)

    budget = services.budgets.save(owner_id, args.category, args.amount, month, year)

    logger.info(
        f"✓ Budget saved: {budget.category} {budget.year:04d}/{budget.month:02d} "
        f"= {format_amount(budget.amount)}"
    )


def cmd_list(args, services):
    """List budgets of a month with spending against each."""
    owner_id = require_owner(services)
    month, year = current_period(args.month, args.year, services.config.timezone)

    statuses = budget_overview(services, owner_id, month, year)
    if not statuses:
        logger.info(f"No budgets for {year:04d}/{month:02d}.")
        return

    logger.info(f"Budgets for {year:04d}/{month:02d}:")
    logger.info("=" * 80)
    for status in statuses:
        logger.info(
            f"{status.budget.category:<10} budget {format_amount(status.budget.amount):>14}  "
            f"spent {format_amount(status.spent):>14}  "
            f"left {format_amount(status.remaining):>14}  {status.percentage:6.1f}%"
        )
        logger.info(f"  ID: {status.budget.id}")


def cmd_delete(args, services):
    """Delete a budget."""
    owner_id = require_owner(services)

    if not services.budgets.delete(owner_id, args.budget_id):
        logger.error(f"Budget with ID '{args.budget_id}' not found.")
        sys.exit(1)
    logger.info("✓ Budget deleted")


def cmd_status(args, services):
    """Show spending per category for a month and any budget alerts."""
    owner_id = require_owner(services)
    month, year = current_period(args.month, args.year, services.config.timezone)

    spending = aggregate(services, owner_id, month, year)
    if not spending:
        logger.info(f"No expenses for {year:04d}/{month:02d}.")
        return

    logger.info(f"Spending for {year:04d}/{month:02d}:")
    logger.info("=" * 80)
    for item in spending:
        budget_text = (
            f"{item.budget_percentage:6.1f}% of {format_amount(item.budget)}"
            if item.budget_percentage is not None
            else "no budget"
        )
        logger.info(f"{item.category:<10} {format_amount(item.total):>14}  {budget_text}")

    # A CLI invocation is one session, so every alert is new here
    alerts, _ = evaluate_alerts(spending)
    for alert in alerts:
        if alert.severity == EXCEEDED:
            logger.error(alert.message)
        else:
            logger.warning(alert.message)


def _add_period_arguments(parser):
    parser.add_argument("--month", type=int, help="Month 1-12 (default: current)")
    parser.add_argument("--year", type=int, help="Year (default: current)")


def setup_parser(subparsers):
    """Setup budgets subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "budgets",
        help="Monthly category budgets",
        description="Set monthly spending targets and compare them with actual spending",
    )

    budgets_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available budget commands",
        dest="subcommand",
        required=True,
    )

    # budgets set
    set_parser = budgets_subparsers.add_parser("set", help="Create or update a budget")
    set_parser.add_argument("category", choices=BUDGET_CATEGORIES)
    set_parser.add_argument("amount", help="Positive amount")
    _add_period_arguments(set_parser)
    set_parser.set_defaults(func=cmd_set)

    # budgets list
    list_parser = budgets_subparsers.add_parser("list", help="List budgets of a month")
    _add_period_arguments(list_parser)
    list_parser.set_defaults(func=cmd_list)

    # budgets delete
    delete_parser = budgets_subparsers.add_parser("delete", help="Delete a budget")
    delete_parser.add_argument("budget_id")
    delete_parser.set_defaults(func=cmd_delete)

    # budgets status
    status_parser = budgets_subparsers.add_parser(
        "status", help="Show spending per category and budget alerts"
    )
    _add_period_arguments(status_parser)
    status_parser.set_defaults(func=cmd_status)
