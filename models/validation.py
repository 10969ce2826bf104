"""Input validation for ledger records.

Every check collects its message under the field name so callers can show
errors field by field. Nothing here touches the database.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

from errors import ValidationError
from models.categories import (
    BUDGET_CATEGORIES,
    FREQUENCIES,
    TRANSACTION_TYPES,
    categories_for,
)

TITLE_MAX_LENGTH = 100
NOTES_MAX_LENGTH = 500


def parse_amount(value) -> Optional[Decimal]:
    """Convert user input to a Decimal amount, or None if it is not a number."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # go through str() so 0.1 stays 0.1
        value = str(value)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def _check_amount(errors: Dict[str, str], value) -> Optional[Decimal]:
    amount = parse_amount(value)
    if amount is None:
        errors["amount"] = "Amount must be a number"
    elif amount <= 0:
        errors["amount"] = "Amount must be greater than 0"
    return amount


def _check_common(
    errors: Dict[str, str],
    title: str,
    amount,
    transaction_type: str,
    category: Optional[str],
    notes: Optional[str],
) -> dict:
    cleaned = {}

    title = (title or "").strip()
    if not title:
        errors["title"] = "Title is required"
    elif len(title) > TITLE_MAX_LENGTH:
        errors["title"] = f"Title must be at most {TITLE_MAX_LENGTH} characters"
    cleaned["title"] = title

    cleaned["amount"] = _check_amount(errors, amount)

    if transaction_type not in TRANSACTION_TYPES:
        errors["type"] = f"Type must be one of: {', '.join(TRANSACTION_TYPES)}"
    cleaned["type"] = transaction_type

    category = category or None
    if category is not None and transaction_type in TRANSACTION_TYPES:
        allowed = categories_for(transaction_type)
        if category not in allowed:
            errors["category"] = (
                f"Category '{category}' is not valid for {transaction_type}; "
                f"expected one of: {', '.join(allowed)}"
            )
    cleaned["category"] = category

    notes = notes or None
    if notes is not None and len(notes) > NOTES_MAX_LENGTH:
        errors["notes"] = f"Notes must be at most {NOTES_MAX_LENGTH} characters"
    cleaned["notes"] = notes

    return cleaned


def validate_transaction(
    title: str,
    amount,
    transaction_type: str,
    category: Optional[str] = None,
    notes: Optional[str] = None,
) -> dict:
    """Validate transaction input.

    Returns:
        Dictionary of cleaned values (title trimmed, amount as Decimal,
        empty category/notes normalized to None).

    Raises:
        ValidationError: If any field is invalid.
    """
    errors: Dict[str, str] = {}
    cleaned = _check_common(errors, title, amount, transaction_type, category, notes)
    if errors:
        raise ValidationError(errors)
    return cleaned


def validate_recurring(
    title: str,
    amount,
    transaction_type: str,
    frequency: str,
    next_run_date,
    category: Optional[str] = None,
    notes: Optional[str] = None,
) -> dict:
    """Validate recurring definition input.

    Raises:
        ValidationError: If any field is invalid.
    """
    errors: Dict[str, str] = {}
    cleaned = _check_common(errors, title, amount, transaction_type, category, notes)

    if frequency not in FREQUENCIES:
        errors["frequency"] = f"Frequency must be one of: {', '.join(FREQUENCIES)}"
    cleaned["frequency"] = frequency

    if isinstance(next_run_date, str):
        try:
            next_run_date = date.fromisoformat(next_run_date)
        except ValueError:
            next_run_date = None
    if not isinstance(next_run_date, date):
        errors["next_run_date"] = "Next run date must be a valid date (YYYY-MM-DD)"
    cleaned["next_run_date"] = next_run_date

    if errors:
        raise ValidationError(errors)
    return cleaned


def validate_budget(category: str, amount, month: int, year: int) -> dict:
    """Validate budget input.

    Raises:
        ValidationError: If any field is invalid.
    """
    errors: Dict[str, str] = {}

    if category not in BUDGET_CATEGORIES:
        errors["category"] = (
            f"Category must be one of: {', '.join(BUDGET_CATEGORIES)}"
        )

    cleaned_amount = _check_amount(errors, amount)

    if not isinstance(month, int) or not 1 <= month <= 12:
        errors["month"] = "Month must be between 1 and 12"

    if not isinstance(year, int) or not 1 <= year <= 9999:
        errors["year"] = "Year must be a valid calendar year"

    if errors:
        raise ValidationError(errors)

    return {"category": category, "amount": cleaned_amount, "month": month, "year": year}
