from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional
import uuid

from models.categories import AUTO_GENERATED_MARKER


@dataclass
class Transaction:
    id: str  # uuid4 hex
    user_id: str  # owner, never changes after creation
    title: str
    amount: Decimal  # always positive
    type: str  # 'income' or 'expense'
    category: Optional[str]
    date: datetime  # occurred-at instant
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def new(
        cls,
        user_id: str,
        title: str,
        amount: Decimal,
        type: str,
        category: Optional[str] = None,
        date: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> "Transaction":
        """Create a Transaction with a fresh ID and timestamps."""
        now = datetime.now().astimezone()
        return cls(
            id=uuid.uuid4().hex,
            user_id=user_id,
            title=title,
            amount=amount,
            type=type,
            category=category,
            date=date or now,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_auto_generated(self) -> bool:
        """Whether the recurrence engine produced this transaction."""
        if not self.notes:
            return False
        return self.notes == AUTO_GENERATED_MARKER or self.notes.endswith(
            f"({AUTO_GENERATED_MARKER})"
        )

    def to_dict(self) -> dict:
        """Convert transaction to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "amount": str(self.amount),
            "type": self.type,
            "category": self.category,
            "date": self.date.isoformat(),
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
