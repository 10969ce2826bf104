from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class RecurringTransaction:
    """Template that the recurrence engine turns into transactions on a schedule."""

    id: str
    user_id: str
    title: str
    amount: Decimal  # always positive
    type: str  # 'income' or 'expense'
    category: Optional[str]
    frequency: str  # 'daily', 'weekly' or 'monthly'
    next_run_date: date  # calendar date, no time component
    last_run_date: Optional[date] = None
    is_active: bool = True
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert definition to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "amount": str(self.amount),
            "type": self.type,
            "category": self.category,
            "frequency": self.frequency,
            "next_run_date": self.next_run_date.isoformat(),
            "last_run_date": (
                self.last_run_date.isoformat() if self.last_run_date else None
            ),
            "is_active": self.is_active,
            "notes": self.notes,
        }
