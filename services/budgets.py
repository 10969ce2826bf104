"""Budget service for database operations."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from models.budget import Budget
from models.validation import validate_budget
from services.ownership import ensure_owner

_BUDGET_FIELDS = "id, user_id, category, amount, month, year, created_at, updated_at"


class BudgetService:
    """Service for managing monthly category budgets."""

    def __init__(self, db_manager):
        self.db_manager = db_manager

    def save(
        self, user_id: str, category: str, amount, month: int, year: int
    ) -> Budget:
        """Create or update the budget for (owner, category, month, year).

        Saving a key that already exists replaces its amount in place.

        Args:
            user_id: Owner of the budget.
            category: Expense category.
            amount: Positive target amount.
            month: Month (1-12).
            year: Year.

        Returns:
            The stored Budget.

        Raises:
            ValidationError: If any field is invalid. Nothing is written.
        """
        cleaned = validate_budget(category, amount, month, year)
        now = datetime.now().astimezone().isoformat()

        with self.db_manager.connect() as conn:
            conn.execute(
                """
                INSERT INTO budgets (id, user_id, category, amount, month, year,
                                     created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (user_id, category, month, year)
                DO UPDATE SET amount = excluded.amount, updated_at = excluded.updated_at
                """,
                (
                    uuid.uuid4().hex,
                    user_id,
                    cleaned["category"],
                    str(cleaned["amount"]),
                    month,
                    year,
                    now,
                    now,
                ),
            )
            conn.commit()

        return self.find(user_id, category, month, year)

    def find(
        self, user_id: str, category: str, month: int, year: int
    ) -> Optional[Budget]:
        """Get the budget for one category and month.

        Returns:
            Budget object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_BUDGET_FIELDS} FROM budgets
                WHERE user_id = ? AND category = ? AND month = ? AND year = ?
                """,
                (user_id, category, month, year),
            )
            row = cursor.fetchone()

        if row:
            return self._row_to_budget(row)
        return None

    def find_by_id(self, user_id: str, budget_id: str) -> Optional[Budget]:
        """Get a budget by ID.

        Raises:
            OwnershipError: If the budget belongs to another owner.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_BUDGET_FIELDS} FROM budgets WHERE id = ?", (budget_id,)
            )
            row = cursor.fetchone()

        if row is None:
            return None

        budget = self._row_to_budget(row)
        ensure_owner("Budget", budget_id, budget.user_id, user_id)
        return budget

    def find_for_month(self, user_id: str, month: int, year: int) -> List[Budget]:
        """Get all of an owner's budgets for a month, ordered by category."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_BUDGET_FIELDS} FROM budgets
                WHERE user_id = ? AND month = ? AND year = ?
                ORDER BY category
                """,
                (user_id, month, year),
            )
            rows = cursor.fetchall()

        return [self._row_to_budget(row) for row in rows]

    def find_by_owner(self, user_id: str) -> List[Budget]:
        """Get all of an owner's budgets, most recent period first."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_BUDGET_FIELDS} FROM budgets
                WHERE user_id = ?
                ORDER BY year DESC, month DESC, category
                """,
                (user_id,),
            )
            rows = cursor.fetchall()

        return [self._row_to_budget(row) for row in rows]

    def delete(self, user_id: str, budget_id: str) -> bool:
        """Delete a budget by ID.

        Returns:
            True if the budget was deleted, False if not found.

        Raises:
            OwnershipError: If the budget belongs to another owner.
        """
        if self.find_by_id(user_id, budget_id) is None:
            return False

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM budgets WHERE id = ? AND user_id = ?",
                (budget_id, user_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def _row_to_budget(self, row: tuple) -> Budget:
        return Budget(
            id=row[0],
            user_id=row[1],
            category=row[2],
            amount=Decimal(row[3]),
            month=row[4],
            year=row[5],
            created_at=datetime.fromisoformat(row[6]),
            updated_at=datetime.fromisoformat(row[7]),
        )
