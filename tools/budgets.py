"""Budget analysis tools."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional

from errors import BudgetIntegrityError
from models.budget import Budget
from models.categories import DEFAULT_CATEGORY, EXPENSE


@dataclass
class CategorySpend:
    """Actual spending of one category in one month, against its budget."""

    category: str
    total: Decimal
    transaction_count: int
    budget: Optional[Decimal] = None
    budget_percentage: Optional[Decimal] = None

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "total": str(self.total),
            "transaction_count": self.transaction_count,
            "budget": str(self.budget) if self.budget is not None else None,
            "budget_percentage": (
                str(self.budget_percentage)
                if self.budget_percentage is not None
                else None
            ),
        }


@dataclass
class BudgetStatus:
    """A configured budget with what has been spent against it so far."""

    budget: Budget
    spent: Decimal
    remaining: Decimal
    percentage: Decimal


def budget_percentage(total: Decimal, budget: Budget) -> Decimal:
    """Get spending as a percentage of a budget.

    Raises:
        BudgetIntegrityError: If the budget amount is zero or negative.
    """
    if budget.amount <= 0:
        raise BudgetIntegrityError(
            f"Budget {budget.id} for '{budget.category}' "
            f"{budget.year:04d}/{budget.month:02d} has non-positive amount {budget.amount}"
        )
    return total / budget.amount * 100


def _expense_totals(services, owner_id: str, month: int, year: int) -> Dict[str, list]:
    """Sum an owner's expenses for a month by category.

    Returns:
        Mapping of category to [total, count]. Uncategorized expenses are
        counted under DEFAULT_CATEGORY.
    """
    expenses = services.transactions.get_transactions_by_month(
        owner_id, year, month, type=EXPENSE
    )

    totals: Dict[str, list] = {}
    for transaction in expenses:
        category = transaction.category or DEFAULT_CATEGORY
        if category not in totals:
            totals[category] = [Decimal("0"), 0]
        totals[category][0] += transaction.amount
        totals[category][1] += 1
    return totals


def aggregate(services, owner_id: str, month: int, year: int) -> List[CategorySpend]:
    """Roll up an owner's expenses for a month per category, against budgets.

    Args:
        services: Services container with transaction and budget services.
        owner_id: Owner whose data is aggregated.
        month: Month (1-12).
        year: Year.

    Returns:
        One CategorySpend per category with spending, largest total first
        (ties broken by category name). ``budget_percentage`` is None for
        categories without a budget.

    Raises:
        BudgetIntegrityError: If a matching budget has a non-positive amount.

    Example:
        [
            CategorySpend(category="Makanan", total=Decimal("450000"),
                          transaction_count=12, budget=Decimal("500000"),
                          budget_percentage=Decimal("90")),
            CategorySpend(category="Transport", total=Decimal("120000"),
                          transaction_count=4, budget=None,
                          budget_percentage=None),
        ]
    """
    totals = _expense_totals(services, owner_id, month, year)
    budgets = {
        budget.category: budget
        for budget in services.budgets.find_for_month(owner_id, month, year)
    }

    result = []
    for category, (total, count) in totals.items():
        budget = budgets.get(category)
        result.append(
            CategorySpend(
                category=category,
                total=total,
                transaction_count=count,
                budget=budget.amount if budget else None,
                budget_percentage=budget_percentage(total, budget) if budget else None,
            )
        )

    result.sort(key=lambda spend: (-spend.total, spend.category))
    return result


def budget_overview(services, owner_id: str, month: int, year: int) -> List[BudgetStatus]:
    """Get every budget of a month with its spending, including unused budgets.

    Returns:
        BudgetStatus list ordered by category. ``remaining`` goes negative
        once a budget is exceeded.

    Raises:
        BudgetIntegrityError: If a budget has a non-positive amount.
    """
    totals = _expense_totals(services, owner_id, month, year)

    statuses = []
    for budget in services.budgets.find_for_month(owner_id, month, year):
        spent = totals.get(budget.category, [Decimal("0"), 0])[0]
        statuses.append(
            BudgetStatus(
                budget=budget,
                spent=spent,
                remaining=budget.amount - spent,
                percentage=budget_percentage(spent, budget),
            )
        )
    return statuses
