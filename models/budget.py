"""Budget model: a monthly spending target for one expense category."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Budget:
    """Represents a per-owner, per-category spending target for one month.

    Attributes:
        id: Unique identifier (uuid4 hex).
        user_id: Owner of the budget.
        category: Expense category the target applies to.
        amount: Target amount, always positive.
        month: Calendar month (1-12).
        year: Calendar year.
    """

    id: str
    user_id: str
    category: str
    amount: Decimal
    month: int
    year: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert budget to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "category": self.category,
            "amount": str(self.amount),
            "month": self.month,
            "year": self.year,
        }
