"""Owner scoping helpers shared by the services."""

from errors import OwnershipError


def ensure_owner(record_type: str, record_id, record_owner: str, owner_id: str) -> None:
    """Reject access to a record that belongs to someone else.

    Args:
        record_type: Name used in the error message (e.g. "Transaction").
        record_id: ID of the record being accessed.
        record_owner: user_id stored on the record.
        owner_id: The acting identity.

    Raises:
        OwnershipError: If the acting identity does not own the record.
    """
    if not owner_id or record_owner != owner_id:
        raise OwnershipError(record_type, record_id, owner_id)
