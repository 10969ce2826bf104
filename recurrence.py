"""Recurrence engine: turns due recurring definitions into transactions.

An external scheduler calls ``run_trigger`` (via ``python -m cli recurring
process``) about once a day. Each pass:

1. selects every active definition whose next_run_date is on or before the
   reference date, however far behind it is,
2. creates one transaction per definition, stamped with the current instant,
3. moves next_run_date forward by exactly one cadence step from its
   current value and sets last_run_date to the reference date.

A definition that is several periods behind therefore needs several passes
to catch up; each pass creates at most one transaction per definition.

Failures are isolated per definition. A definition whose transaction could
not be stored keeps its schedule and is retried on the next pass.

Two orderings are supported, selected by ``Config.claim_before_insert``:

- claim first (default): the schedule is advanced with a conditional update
  before inserting, and restored if the insert fails. Overlapping passes
  cannot both create a transaction for the same occurrence; a crash between
  claim and insert loses that occurrence (at-most-once).
- advance after insert: the transaction is inserted first and the schedule
  advanced afterwards. A crash in between, or two overlapping passes, can
  create a duplicate (at-least-once).
"""

import sqlite3
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import tz
from dateutil.relativedelta import relativedelta

from models.categories import AUTO_GENERATED_MARKER, DAILY, MONTHLY, WEEKLY
from models.recurring_transaction import RecurringTransaction
from models.transaction import Transaction
from models.validation import NOTES_MAX_LENGTH
from logger import get_logger

logger = get_logger()

_CADENCE = {
    DAILY: relativedelta(days=1),
    WEEKLY: relativedelta(days=7),
    # relativedelta clamps to the last day of the target month:
    # Jan 31 -> Feb 28 (Feb 29 in leap years), Mar 31 -> Apr 30.
    MONTHLY: relativedelta(months=1),
}


@dataclass
class ProcessResult:
    """Outcome of one processing pass."""

    processed: int = 0
    errors: int = 0
    total: int = 0
    skipped: int = 0  # lost the claim to a concurrent pass
    as_of: Optional[date] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz.UTC))

    def to_dict(self) -> dict:
        return {
            "success": True,
            "processed": self.processed,
            "errors": self.errors,
            "total": self.total,
            "skipped": self.skipped,
            "as_of": self.as_of.isoformat() if self.as_of else None,
            "timestamp": self.timestamp.isoformat(),
        }


def next_run_date(current: date, frequency: str) -> date:
    """Compute the due date one cadence step after ``current``.

    Args:
        current: The definition's current next_run_date.
        frequency: 'daily', 'weekly' or 'monthly'.

    Returns:
        The following due date.

    Raises:
        ValueError: If the frequency is unknown.
    """
    if frequency not in _CADENCE:
        raise ValueError(f"Unknown frequency: {frequency}")
    return current + _CADENCE[frequency]


def today_in(timezone: str, now: Optional[datetime] = None) -> date:
    """Get the calendar date of ``now`` (default: the current instant) in a timezone.

    Raises:
        ValueError: If the timezone name is unknown.
    """
    zone = tz.gettz(timezone)
    if zone is None:
        raise ValueError(f"Unknown timezone: {timezone}")
    if now is None:
        return datetime.now(zone).date()
    if now.tzinfo is None:
        return now.date()
    return now.astimezone(zone).date()


def auto_generated_notes(notes: Optional[str]) -> str:
    """Mark notes as produced by the recurrence engine.

    The original notes are shortened if needed so the result still fits the
    notes length limit.
    """
    if not notes:
        return AUTO_GENERATED_MARKER
    suffix = f" ({AUTO_GENERATED_MARKER})"
    room = NOTES_MAX_LENGTH - len(suffix)
    return f"{notes[:room]}{suffix}"


def materialize(definition: RecurringTransaction, now: datetime) -> Transaction:
    """Build the transaction for one occurrence of a definition."""
    return Transaction.new(
        user_id=definition.user_id,
        title=definition.title,
        amount=definition.amount,
        type=definition.type,
        category=definition.category,
        date=now,
        notes=auto_generated_notes(definition.notes),
    )


def process_due(
    services,
    as_of: Optional[date] = None,
    now: Optional[datetime] = None,
    claim_before_insert: Optional[bool] = None,
) -> ProcessResult:
    """Process every recurring definition that is due.

    Args:
        services: Services container.
        as_of: Reference date. Defaults to today in ``config.timezone``.
        now: Instant stamped on created transactions. Defaults to the
            current time in ``config.timezone``.
        claim_before_insert: Override ``config.claim_before_insert``.

    Returns:
        ProcessResult with per-pass counts.

    Raises:
        sqlite3.Error: If due definitions cannot be read. Nothing is processed.
        ValueError: If the configured timezone is unknown.
    """
    config = services.config
    if now is None:
        now = datetime.now(tz.gettz(config.timezone) or tz.UTC)
    if as_of is None:
        as_of = today_in(config.timezone, now)
    if claim_before_insert is None:
        claim_before_insert = config.claim_before_insert

    logger.info(f"Processing recurring transactions due on or before {as_of}")

    candidates = services.recurring.find_due(as_of)
    result = ProcessResult(total=len(candidates), as_of=as_of)

    logger.info(f"Found {len(candidates)} recurring transaction(s) to process")

    for definition in candidates:
        try:
            following = next_run_date(definition.next_run_date, definition.frequency)
            transaction = materialize(definition, now)

            if claim_before_insert:
                if not services.recurring.claim(definition, following, as_of):
                    logger.info(
                        f"Skipping {definition.id}: already claimed by another run"
                    )
                    result.skipped += 1
                    continue
                try:
                    services.transactions.create(transaction)
                except Exception:
                    _release(services, definition, following)
                    raise
            else:
                services.transactions.create(transaction)
                if not services.recurring.advance(definition, following, as_of):
                    raise LookupError(
                        f"Recurring transaction {definition.id} disappeared "
                        "before its schedule could be advanced"
                    )

            result.processed += 1
            logger.info(
                f"Processed '{definition.title}' ({definition.id}), "
                f"next run {following}"
            )
        except Exception as e:
            result.errors += 1
            logger.error(f"Error processing recurring transaction {definition.id}: {e}")

    logger.info(
        f"Recurring pass complete: {result.processed} processed, "
        f"{result.errors} error(s), {result.skipped} skipped, {result.total} total"
    )
    return result


def _release(services, definition: RecurringTransaction, claimed: date) -> None:
    try:
        if not services.recurring.release(definition, claimed):
            logger.warning(f"Could not restore schedule of {definition.id}")
    except sqlite3.Error as e:
        logger.error(f"Failed to restore schedule of {definition.id}: {e}")


def run_trigger(
    services,
    as_of: Optional[date] = None,
    now: Optional[datetime] = None,
) -> dict:
    """Run one pass and shape the outcome for the scheduler.

    Returns:
        ``{"success": True, "processed", "errors", "total", ...}`` when the
        pass ran (errors > 0 means some definitions failed), or
        ``{"success": False, "error", "timestamp"}`` when it could not start.
    """
    try:
        return process_due(services, as_of=as_of, now=now).to_dict()
    except (sqlite3.Error, ValueError) as e:
        logger.error(f"Fatal error in recurring transaction processing: {e}")
        return {
            "success": False,
            "error": str(e),
            "timestamp": datetime.now(tz.UTC).isoformat(),
        }
