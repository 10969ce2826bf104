"""Helpers shared by the CLI command modules."""

import sys
from datetime import date, datetime

from recurrence import today_in
from logger import get_logger

logger = get_logger()


def require_owner(services) -> str:
    """Get the acting user ID or exit if none is configured."""
    owner_id = services.owner_id
    if not owner_id:
        logger.error(
            "No user selected. Pass --owner or set session.owner_id in ~/.config/dinari.toml"
        )
        sys.exit(1)
    return owner_id


def parse_date(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD")


def parse_datetime(value: str) -> datetime:
    """argparse type for ISO timestamps.

    Values without an offset stay naive; the transaction service reads them
    in the configured timezone.
    """
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Invalid timestamp '{value}', expected ISO format")


def current_period(month, year, timezone: str = "UTC", now=None):
    """Fill in the current month/year for options that were not given.

    "Current" is taken in the operating timezone, the same calendar the
    recurrence trigger uses.
    """
    today = today_in(timezone, now)
    return (month or today.month, year or today.year)


def format_amount(amount) -> str:
    """Format an amount with thousands separators, dropping .00."""
    if amount == amount.to_integral_value():
        return f"{amount:,.0f}"
    return f"{amount:,.2f}"
