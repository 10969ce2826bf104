"""Transaction service for database operations."""

import calendar
from datetime import date, datetime
from decimal import Decimal
from dateutil import tz
from typing import List, Optional

from errors import NotFoundError
from models.transaction import Transaction
from models.validation import validate_transaction
from services.ownership import ensure_owner

# SQL Query Constants
_TRANSACTION_FIELDS = """id, user_id, title, amount, transaction_type, category,
       date, notes, created_at, updated_at"""

# Automatically generate placeholders from field count
_TRANSACTION_INSERT_PLACEHOLDERS = (
    f"({', '.join(['?'] * len(_TRANSACTION_FIELDS.split(',')))})"
)

# Fields a user may edit after creation. user_id is deliberately absent.
_EDITABLE_FIELDS = ("title", "amount", "type", "category", "date", "notes")


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db_manager, timezone: str = "UTC"):
        """Initialize the transaction service.

        Args:
            db_manager: Database manager instance for database operations.
            timezone: Operating timezone. Every stored occurred-at timestamp
                is converted to it, so dates compare and bucket by month
                consistently whichever path recorded them.
        """
        self.db_manager = db_manager
        self.timezone = timezone

    def add(
        self,
        user_id: str,
        title: str,
        amount,
        type: str,
        category: Optional[str] = None,
        date: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> Transaction:
        """Validate user input and record a new transaction.

        Args:
            user_id: Owner of the new transaction.
            title: Short description (1-100 characters).
            amount: Positive amount; strings and numbers are accepted.
            type: 'income' or 'expense'.
            category: Optional category from the list for the type.
            date: When the transaction happened (defaults to now).
            notes: Optional notes (at most 500 characters).

        Returns:
            The stored Transaction.

        Raises:
            ValidationError: If any field is invalid. Nothing is written.
        """
        cleaned = validate_transaction(title, amount, type, category, notes)
        transaction = Transaction.new(
            user_id=user_id,
            title=cleaned["title"],
            amount=cleaned["amount"],
            type=cleaned["type"],
            category=cleaned["category"],
            date=date,
            notes=cleaned["notes"],
        )
        return self.create(transaction)

    def create(self, transaction: Transaction) -> Transaction:
        """Insert an already validated transaction.

        Args:
            transaction: Transaction object to insert.

        Returns:
            The same Transaction object.

        Raises:
            sqlite3.Error: If the insert fails (e.g., duplicate ID, locked database).
        """
        transaction.date = self._localize(transaction.date)
        with self.db_manager.connect() as conn:
            conn.execute(
                f"""
                INSERT INTO transactions ({_TRANSACTION_FIELDS})
                VALUES {_TRANSACTION_INSERT_PLACEHOLDERS}
                """,
                self._transaction_to_row(transaction),
            )
            conn.commit()

        return transaction

    def find(self, user_id: str, transaction_id: str) -> Optional[Transaction]:
        """Get a single transaction by ID.

        Args:
            user_id: The acting identity.
            transaction_id: The transaction ID.

        Returns:
            Transaction object if found, None otherwise.

        Raises:
            OwnershipError: If the transaction belongs to another owner.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_TRANSACTION_FIELDS} FROM transactions WHERE id = ?",
                (transaction_id,),
            )
            row = cursor.fetchone()

        if row is None:
            return None

        transaction = self._row_to_transaction(row)
        ensure_owner("Transaction", transaction_id, transaction.user_id, user_id)
        return transaction

    def find_by_owner(self, user_id: str) -> List[Transaction]:
        """Get all transactions for an owner, newest first."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_TRANSACTION_FIELDS}
                FROM transactions
                WHERE user_id = ?
                ORDER BY date DESC, id
                """,
                (user_id,),
            )
            rows = cursor.fetchall()

        return [self._row_to_transaction(row) for row in rows]

    def get_transactions_by_date_range(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
        *,
        type: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[Transaction]:
        """Get an owner's transactions whose calendar date is within a range.

        The calendar date is the date part of the recorded occurred-at
        timestamp, so a transaction keeps the day it was recorded on.

        Args:
            user_id: Owner to filter by.
            start_date: First day (inclusive).
            end_date: Last day (inclusive).
            type: Optional 'income' or 'expense' filter.
            category: Optional category filter.

        Returns:
            List of Transaction objects ordered by date (newest first).
        """
        query = f"""
            SELECT {_TRANSACTION_FIELDS}
            FROM transactions
            WHERE user_id = ?
              AND substr(date, 1, 10) >= ? AND substr(date, 1, 10) <= ?
        """

        params = [user_id, start_date.isoformat(), end_date.isoformat()]

        if type is not None:
            query += " AND transaction_type = ?"
            params.append(type)

        if category is not None:
            query += " AND category = ?"
            params.append(category)

        query += " ORDER BY date DESC, id"

        with self.db_manager.connect() as conn:
            cursor = conn.execute(query, params)
            rows = cursor.fetchall()

        return [self._row_to_transaction(row) for row in rows]

    def get_transactions_by_month(
        self,
        user_id: str,
        year: int,
        month: int,
        *,
        type: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[Transaction]:
        """Get an owner's transactions for a specific month.

        Args:
            user_id: Owner to filter by.
            year: Year (e.g., 2025).
            month: Month (1-12).
            type: Optional 'income' or 'expense' filter.
            category: Optional category filter.

        Returns:
            List of Transaction objects ordered by date (newest first).
        """
        last_day = calendar.monthrange(year, month)[1]
        return self.get_transactions_by_date_range(
            user_id,
            date(year, month, 1),
            date(year, month, last_day),
            type=type,
            category=category,
        )

    def update(self, owner_id: str, transaction_id: str, **changes) -> Transaction:
        """Apply a user edit to a transaction.

        Args:
            owner_id: The acting identity. Ownership itself cannot be edited.
            transaction_id: The transaction to edit.
            **changes: Any of title, amount, type, category, date, notes.

        Returns:
            The updated Transaction.

        Raises:
            ValueError: If an unsupported field is given.
            ValidationError: If the edited transaction would be invalid.
            NotFoundError: If the transaction does not exist.
            OwnershipError: If the transaction belongs to another owner.
        """
        invalid_fields = set(changes) - set(_EDITABLE_FIELDS)
        if invalid_fields:
            raise ValueError(f"Unsupported field names: {invalid_fields}")

        transaction = self.find(owner_id, transaction_id)
        if transaction is None:
            raise NotFoundError(f"Transaction {transaction_id} not found")

        merged = {field: getattr(transaction, field) for field in _EDITABLE_FIELDS}
        merged.update(changes)
        cleaned = validate_transaction(
            merged["title"],
            merged["amount"],
            merged["type"],
            merged["category"],
            merged["notes"],
        )

        transaction.title = cleaned["title"]
        transaction.amount = cleaned["amount"]
        transaction.type = cleaned["type"]
        transaction.category = cleaned["category"]
        transaction.notes = cleaned["notes"]
        transaction.date = self._localize(merged["date"])
        transaction.updated_at = datetime.now().astimezone()

        with self.db_manager.connect() as conn:
            conn.execute(
                """
                UPDATE transactions
                SET title = ?, amount = ?, transaction_type = ?, category = ?,
                    date = ?, notes = ?, updated_at = ?
                WHERE id = ? AND user_id = ?
                """,
                (
                    transaction.title,
                    str(transaction.amount),
                    transaction.type,
                    transaction.category,
                    transaction.date.isoformat(),
                    transaction.notes,
                    transaction.updated_at.isoformat(),
                    transaction.id,
                    owner_id,
                ),
            )
            conn.commit()

        return transaction

    def delete(self, user_id: str, transaction_id: str) -> bool:
        """Delete a transaction by ID.

        Returns:
            True if the transaction was deleted, False if not found.

        Raises:
            OwnershipError: If the transaction belongs to another owner.
        """
        if self.find(user_id, transaction_id) is None:
            return False

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM transactions WHERE id = ? AND user_id = ?",
                (transaction_id, user_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def delete_all(self, user_id: str) -> int:
        """Delete every transaction of an owner.

        Returns:
            Number of deleted transactions.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM transactions WHERE user_id = ?", (user_id,)
            )
            conn.commit()
            return cursor.rowcount

    def _localize(self, value: datetime) -> datetime:
        """Express an occurred-at timestamp in the operating timezone.

        Naive values are taken to already be in that timezone.

        Raises:
            ValueError: If the operating timezone is unknown.
        """
        zone = tz.gettz(self.timezone)
        if zone is None:
            raise ValueError(f"Unknown timezone: {self.timezone}")
        if value.tzinfo is None:
            return value.replace(tzinfo=zone)
        return value.astimezone(zone)

    def _transaction_to_row(self, transaction: Transaction) -> tuple:
        return (
            transaction.id,
            transaction.user_id,
            transaction.title,
            str(transaction.amount),
            transaction.type,
            transaction.category,
            transaction.date.isoformat(),
            transaction.notes,
            (transaction.created_at or transaction.date).isoformat(),
            (transaction.updated_at or transaction.date).isoformat(),
        )

    def _row_to_transaction(self, row: tuple) -> Transaction:
        """Convert a database row to a Transaction object."""
        return Transaction(
            id=row[0],
            user_id=row[1],
            title=row[2],
            amount=Decimal(row[3]),
            type=row[4],
            category=row[5],
            date=datetime.fromisoformat(row[6]),
            notes=row[7],
            created_at=datetime.fromisoformat(row[8]),
            updated_at=datetime.fromisoformat(row[9]),
        )
