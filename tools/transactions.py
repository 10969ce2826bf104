"""Transaction analysis tools.

These work on plain lists of transactions so they can summarize whatever a
caller has already loaded (usually ``services.transactions.find_by_owner``).
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from models.categories import DEFAULT_CATEGORY, EXPENSE, INCOME
from models.transaction import Transaction

PERIODS = ("all", "today", "week", "month", "custom")


@dataclass
class Summary:
    balance: Decimal
    income: Decimal
    expense: Decimal

    def to_dict(self) -> dict:
        return {
            "balance": str(self.balance),
            "income": str(self.income),
            "expense": str(self.expense),
        }


@dataclass
class MonthlyPoint:
    year: int
    month: int
    income: Decimal
    expense: Decimal
    balance: Decimal  # income - expense for the month

    @property
    def label(self) -> str:
        return f"{self.year:04d}/{self.month:02d}"


@dataclass
class CategoryShare:
    category: str
    total: Decimal
    percentage: Decimal  # share of the type's total, 0-100
    transaction_count: int


def summarize(transactions: List[Transaction]) -> Summary:
    """Total income, expense and balance over a set of transactions.

    Returns:
        Summary where balance = income - expense.
    """
    income = Decimal("0")
    expense = Decimal("0")
    for transaction in transactions:
        if transaction.type == INCOME:
            income += transaction.amount
        elif transaction.type == EXPENSE:
            expense += transaction.amount

    return Summary(balance=income - expense, income=income, expense=expense)


def monthly_trend(transactions: List[Transaction], year: int) -> List[MonthlyPoint]:
    """Income, expense and net for each month of a year.

    Always returns 12 points in calendar order; months without transactions
    are zero.

    Example:
        [
            MonthlyPoint(year=2025, month=1, income=Decimal("0"),
                         expense=Decimal("0"), balance=Decimal("0")),
            ...
            MonthlyPoint(year=2025, month=3, income=Decimal("5000000"),
                         expense=Decimal("1200000"), balance=Decimal("3800000")),
            ...
        ]
    """
    by_month: Dict[int, List[Transaction]] = {month: [] for month in range(1, 13)}
    for transaction in transactions:
        if transaction.date.year == year:
            by_month[transaction.date.month].append(transaction)

    points = []
    for month in range(1, 13):
        summary = summarize(by_month[month])
        points.append(
            MonthlyPoint(
                year=year,
                month=month,
                income=summary.income,
                expense=summary.expense,
                balance=summary.balance,
            )
        )
    return points


def category_breakdown(
    transactions: List[Transaction], type: str = EXPENSE
) -> List[CategoryShare]:
    """Split the transactions of one type by category.

    Uncategorized transactions are counted under DEFAULT_CATEGORY.

    Returns:
        CategoryShare list, largest total first.
    """
    totals: Dict[str, Decimal] = {}
    counts: Dict[str, int] = {}
    for transaction in transactions:
        if transaction.type != type:
            continue
        category = transaction.category or DEFAULT_CATEGORY
        totals[category] = totals.get(category, Decimal("0")) + transaction.amount
        counts[category] = counts.get(category, 0) + 1

    grand_total = sum(totals.values(), Decimal("0"))

    shares = [
        CategoryShare(
            category=category,
            total=total,
            percentage=(total / grand_total * 100) if grand_total else Decimal("0"),
            transaction_count=counts[category],
        )
        for category, total in totals.items()
    ]
    shares.sort(key=lambda share: (-share.total, share.category))
    return shares


def filter_transactions(
    transactions: List[Transaction],
    *,
    category: Optional[str] = None,
    period: str = "all",
    start: Optional[date] = None,
    end: Optional[date] = None,
    today: Optional[date] = None,
) -> List[Transaction]:
    """Filter transactions the way the history view does.

    Args:
        transactions: Transactions to filter.
        category: Keep only this category (None keeps all).
        period: One of "all", "today", "week" (Monday-Sunday containing
            today), "month" (calendar month containing today) or "custom"
            (``start`` to ``end`` inclusive; ignored unless both are given).
        start: First day for "custom".
        end: Last day for "custom".
        today: Reference date, defaults to date.today().

    Returns:
        Matching transactions in their original order.

    Raises:
        ValueError: If the period is unknown.
    """
    if period not in PERIODS:
        raise ValueError(f"Unknown period: {period}")

    today = today or date.today()

    if period == "today":
        first, last = today, today
    elif period == "week":
        first = today - timedelta(days=today.weekday())
        last = first + timedelta(days=6)
    elif period == "month":
        first = today.replace(day=1)
        last = (first + timedelta(days=32)).replace(day=1) - timedelta(days=1)
    elif period == "custom" and start and end:
        first, last = start, end
    else:
        first, last = None, None

    result = []
    for transaction in transactions:
        if category is not None and transaction.category != category:
            continue
        if first is not None and not first <= transaction.date.date() <= last:
            continue
        result.append(transaction)
    return result
