"""Helper utilities for tests."""

from datetime import date, datetime, timezone
from decimal import Decimal

OWNER = "user-1"
OTHER_OWNER = "user-2"


def at(year: int, month: int, day: int, hour: int = 12) -> datetime:
    """Build a UTC timestamp."""
    return datetime(year, month, day, hour, 0, tzinfo=timezone.utc)


def add_expense(services, amount, category=None, when=None, owner=OWNER, title="Belanja"):
    """Record an expense and return it."""
    return services.transactions.add(
        owner,
        title=title,
        amount=Decimal(str(amount)),
        type="expense",
        category=category,
        date=when or at(2025, 3, 10),
    )


def add_income(services, amount, category="Gaji", when=None, owner=OWNER, title="Gaji"):
    """Record an income and return it."""
    return services.transactions.add(
        owner,
        title=title,
        amount=Decimal(str(amount)),
        type="income",
        category=category,
        date=when or at(2025, 3, 1),
    )


def add_recurring(
    services,
    title="Langganan",
    frequency="daily",
    next_run_date=date(2025, 3, 1),
    owner=OWNER,
    amount="50000",
    notes=None,
):
    """Create a recurring definition and return it."""
    return services.recurring.create(
        owner,
        title=title,
        amount=amount,
        type="expense",
        frequency=frequency,
        next_run_date=next_run_date,
        category="Tagihan",
        notes=notes,
    )
