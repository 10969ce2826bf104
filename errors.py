"""Exception types shared by services and tools."""

from typing import Dict


class ValidationError(ValueError):
    """Input was rejected before touching the store.

    Args:
        errors: Mapping of field name to a human readable message.
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        details = "; ".join(f"{field}: {msg}" for field, msg in self.errors.items())
        super().__init__(f"Invalid input ({details})")


class NotFoundError(LookupError):
    """The requested record does not exist."""


class OwnershipError(PermissionError):
    """The record exists but belongs to a different owner."""

    def __init__(self, record_type: str, record_id, owner_id: str):
        self.record_type = record_type
        self.record_id = record_id
        self.owner_id = owner_id
        super().__init__(
            f"{record_type} {record_id} is not owned by '{owner_id}'"
        )


class BudgetIntegrityError(ValueError):
    """A stored budget has a non-positive amount and cannot be used as a divisor."""
