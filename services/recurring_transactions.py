"""Recurring transaction service for database operations."""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from errors import NotFoundError
from models.recurring_transaction import RecurringTransaction
from models.validation import validate_recurring
from services.ownership import ensure_owner

_RECURRING_FIELDS = """id, user_id, title, amount, transaction_type, category, frequency,
       next_run_date, last_run_date, is_active, notes, created_at, updated_at"""

_RECURRING_INSERT_PLACEHOLDERS = (
    f"({', '.join(['?'] * len(_RECURRING_FIELDS.split(',')))})"
)

_EDITABLE_FIELDS = (
    "title",
    "amount",
    "type",
    "category",
    "frequency",
    "next_run_date",
    "notes",
)


class RecurringTransactionService:
    """Service for managing recurring transaction definitions.

    Owner-facing methods take the acting ``user_id`` and reject records owned
    by someone else. The scheduling methods (``find_due``, ``claim``,
    ``release``, ``advance``) run on behalf of the trigger across all owners
    and scope every write by the ``user_id`` of the row they were given.
    """

    def __init__(self, db_manager):
        self.db_manager = db_manager

    def create(
        self,
        user_id: str,
        title: str,
        amount,
        type: str,
        frequency: str,
        next_run_date,
        category: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> RecurringTransaction:
        """Validate input and store a new, active recurring definition.

        Raises:
            ValidationError: If any field is invalid. Nothing is written.
        """
        cleaned = validate_recurring(
            title, amount, type, frequency, next_run_date, category, notes
        )
        now = datetime.now().astimezone()
        definition = RecurringTransaction(
            id=uuid.uuid4().hex,
            user_id=user_id,
            title=cleaned["title"],
            amount=cleaned["amount"],
            type=cleaned["type"],
            category=cleaned["category"],
            frequency=cleaned["frequency"],
            next_run_date=cleaned["next_run_date"],
            last_run_date=None,
            is_active=True,
            notes=cleaned["notes"],
            created_at=now,
            updated_at=now,
        )

        with self.db_manager.connect() as conn:
            conn.execute(
                f"""
                INSERT INTO recurring_transactions ({_RECURRING_FIELDS})
                VALUES {_RECURRING_INSERT_PLACEHOLDERS}
                """,
                (
                    definition.id,
                    definition.user_id,
                    definition.title,
                    str(definition.amount),
                    definition.type,
                    definition.category,
                    definition.frequency,
                    definition.next_run_date.isoformat(),
                    None,
                    1,
                    definition.notes,
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
            conn.commit()

        return definition

    def find(self, user_id: str, recurring_id: str) -> Optional[RecurringTransaction]:
        """Get a recurring definition by ID.

        Returns:
            RecurringTransaction if found, None otherwise.

        Raises:
            OwnershipError: If the definition belongs to another owner.
        """
        definition = self._find_any(recurring_id)
        if definition is None:
            return None

        ensure_owner("RecurringTransaction", recurring_id, definition.user_id, user_id)
        return definition

    def find_by_owner(self, user_id: str) -> List[RecurringTransaction]:
        """Get an owner's recurring definitions, soonest due first."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_RECURRING_FIELDS}
                FROM recurring_transactions
                WHERE user_id = ?
                ORDER BY next_run_date, id
                """,
                (user_id,),
            )
            rows = cursor.fetchall()

        return [self._row_to_recurring(row) for row in rows]

    def update(self, owner_id: str, recurring_id: str, **changes) -> RecurringTransaction:
        """Apply a user edit to a recurring definition.

        Args:
            owner_id: The acting identity. Ownership itself cannot be edited.
            recurring_id: Definition to edit.
            **changes: Any of title, amount, type, category, frequency,
                next_run_date, notes.

        Raises:
            ValueError: If an unsupported field is given.
            ValidationError: If the edited definition would be invalid.
            NotFoundError: If the definition does not exist.
            OwnershipError: If the definition belongs to another owner.
        """
        invalid_fields = set(changes) - set(_EDITABLE_FIELDS)
        if invalid_fields:
            raise ValueError(f"Unsupported field names: {invalid_fields}")

        definition = self._require(owner_id, recurring_id)

        merged = {field: getattr(definition, field) for field in _EDITABLE_FIELDS}
        merged.update(changes)
        cleaned = validate_recurring(
            merged["title"],
            merged["amount"],
            merged["type"],
            merged["frequency"],
            merged["next_run_date"],
            merged["category"],
            merged["notes"],
        )

        for field, value in cleaned.items():
            setattr(definition, field, value)
        definition.updated_at = datetime.now().astimezone()

        with self.db_manager.connect() as conn:
            conn.execute(
                """
                UPDATE recurring_transactions
                SET title = ?, amount = ?, transaction_type = ?, category = ?,
                    frequency = ?, next_run_date = ?, notes = ?, updated_at = ?
                WHERE id = ? AND user_id = ?
                """,
                (
                    definition.title,
                    str(definition.amount),
                    definition.type,
                    definition.category,
                    definition.frequency,
                    definition.next_run_date.isoformat(),
                    definition.notes,
                    definition.updated_at.isoformat(),
                    definition.id,
                    owner_id,
                ),
            )
            conn.commit()

        return definition

    def set_active(
        self, user_id: str, recurring_id: str, is_active: bool
    ) -> RecurringTransaction:
        """Pause or resume a recurring definition.

        Raises:
            NotFoundError: If the definition does not exist.
            OwnershipError: If the definition belongs to another owner.
        """
        definition = self._require(user_id, recurring_id)
        definition.is_active = bool(is_active)
        definition.updated_at = datetime.now().astimezone()

        with self.db_manager.connect() as conn:
            conn.execute(
                """
                UPDATE recurring_transactions SET is_active = ?, updated_at = ?
                WHERE id = ? AND user_id = ?
                """,
                (
                    1 if definition.is_active else 0,
                    definition.updated_at.isoformat(),
                    recurring_id,
                    user_id,
                ),
            )
            conn.commit()

        return definition

    def delete(self, user_id: str, recurring_id: str) -> bool:
        """Delete a recurring definition.

        Returns:
            True if deleted, False if not found.

        Raises:
            OwnershipError: If the definition belongs to another owner.
        """
        if self.find(user_id, recurring_id) is None:
            return False

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM recurring_transactions WHERE id = ? AND user_id = ?",
                (recurring_id, user_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def find_due(self, as_of: date) -> List[RecurringTransaction]:
        """Get every active definition due on or before a date, across all owners.

        Overdue definitions are included no matter how far behind they are.

        Args:
            as_of: Reference calendar date.

        Returns:
            List of RecurringTransaction objects ordered by next_run_date.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_RECURRING_FIELDS}
                FROM recurring_transactions
                WHERE is_active = 1 AND next_run_date <= ?
                ORDER BY next_run_date, id
                """,
                (as_of.isoformat(),),
            )
            rows = cursor.fetchall()

        return [self._row_to_recurring(row) for row in rows]

    def claim(
        self,
        definition: RecurringTransaction,
        next_run_date: date,
        last_run_date: date,
    ) -> bool:
        """Move a definition's schedule forward only if nobody else has.

        The update only applies while the stored next_run_date still equals
        the value on ``definition`` and the definition is still active.

        Returns:
            True if this caller won the claim, False otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                UPDATE recurring_transactions
                SET next_run_date = ?, last_run_date = ?
                WHERE id = ? AND user_id = ? AND next_run_date = ? AND is_active = 1
                """,
                (
                    next_run_date.isoformat(),
                    last_run_date.isoformat(),
                    definition.id,
                    definition.user_id,
                    definition.next_run_date.isoformat(),
                ),
            )
            conn.commit()
            return cursor.rowcount == 1

    def release(self, definition: RecurringTransaction, claimed_next_run_date: date) -> bool:
        """Undo a claim so the definition stays due.

        Only reverts if the stored schedule is still the one this caller claimed.

        Args:
            definition: The definition as it was read before claiming.
            claimed_next_run_date: The next_run_date written by ``claim``.

        Returns:
            True if the schedule was restored.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                UPDATE recurring_transactions
                SET next_run_date = ?, last_run_date = ?
                WHERE id = ? AND user_id = ? AND next_run_date = ?
                """,
                (
                    definition.next_run_date.isoformat(),
                    (
                        definition.last_run_date.isoformat()
                        if definition.last_run_date
                        else None
                    ),
                    definition.id,
                    definition.user_id,
                    claimed_next_run_date.isoformat(),
                ),
            )
            conn.commit()
            return cursor.rowcount == 1

    def advance(
        self,
        definition: RecurringTransaction,
        next_run_date: date,
        last_run_date: date,
    ) -> bool:
        """Unconditionally record a completed run on a definition.

        Returns:
            True if the definition was updated.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                UPDATE recurring_transactions
                SET next_run_date = ?, last_run_date = ?
                WHERE id = ? AND user_id = ?
                """,
                (
                    next_run_date.isoformat(),
                    last_run_date.isoformat(),
                    definition.id,
                    definition.user_id,
                ),
            )
            conn.commit()
            return cursor.rowcount == 1

    def _require(self, user_id: str, recurring_id: str) -> RecurringTransaction:
        definition = self.find(user_id, recurring_id)
        if definition is None:
            raise NotFoundError(f"Recurring transaction {recurring_id} not found")
        return definition

    def _find_any(self, recurring_id: str) -> Optional[RecurringTransaction]:
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_RECURRING_FIELDS} FROM recurring_transactions WHERE id = ?",
                (recurring_id,),
            )
            row = cursor.fetchone()

        if row:
            return self._row_to_recurring(row)
        return None

    def _row_to_recurring(self, row: tuple) -> RecurringTransaction:
        """Convert a database row to a RecurringTransaction object."""
        return RecurringTransaction(
            id=row[0],
            user_id=row[1],
            title=row[2],
            amount=Decimal(row[3]),
            type=row[4],
            category=row[5],
            frequency=row[6],
            next_run_date=date.fromisoformat(row[7]),
            last_run_date=date.fromisoformat(row[8]) if row[8] else None,
            is_active=bool(row[9]),
            notes=row[10],
            created_at=datetime.fromisoformat(row[11]),
            updated_at=datetime.fromisoformat(row[12]),
        )
