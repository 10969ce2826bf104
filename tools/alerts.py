"""Budget threshold alerts with repeat suppression.

Percentages are grouped into 10-point bands (83% -> 80). An alert fires the
first time a category is seen in a band at or above 80 and is not repeated
while the category stays in that band. Leaving the band forgets it, so
coming back later fires again.

The suppression state belongs to the caller (one per viewing session). It is
passed in and returned, never stored here, and can be thrown away at any time.
"""

import math
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Tuple

APPROACHING = "approaching"
EXCEEDED = "exceeded"

APPROACHING_BAND = 80
EXCEEDED_BAND = 100


@dataclass(frozen=True)
class AlertState:
    """(category, band) pairs that have already been alerted."""

    notified: FrozenSet[Tuple[str, int]] = frozenset()


@dataclass(frozen=True)
class BudgetAlert:
    category: str
    band: int
    percentage: float
    severity: str

    @property
    def message(self) -> str:
        if self.severity == EXCEEDED:
            return (
                f"Budget {self.category} exceeded: "
                f"{self.percentage:.0f}% of budget used"
            )
        return (
            f"Budget {self.category} almost used up: "
            f"{self.percentage:.0f}% of budget used"
        )


def band_for(percentage) -> int:
    """Floor a percentage to its 10-point band."""
    return int(math.floor(percentage / 10)) * 10


def severity_for(band: int) -> Optional[str]:
    """Get the alert severity of a band, or None below the alert threshold."""
    if band >= EXCEEDED_BAND:
        return EXCEEDED
    if band >= APPROACHING_BAND:
        return APPROACHING
    return None


def evaluate_alerts(
    spending: Iterable, state: Optional[AlertState] = None
) -> Tuple[List[BudgetAlert], AlertState]:
    """Decide which budget alerts are new since the previous evaluation.

    Args:
        spending: CategorySpend items (anything with ``category`` and
            ``budget_percentage``). Items without a budget are ignored.
        state: State returned by the previous call; None starts fresh.

    Returns:
        Tuple of (alerts to show now, state for the next call). The new state
        only keeps keys for categories currently at or above 80%.
    """
    previous = state.notified if state is not None else frozenset()

    alerts = []
    current_keys = set()
    for item in spending:
        if item.budget_percentage is None:
            continue

        band = band_for(item.budget_percentage)
        severity = severity_for(band)
        if severity is None:
            continue

        key = (item.category, band)
        current_keys.add(key)
        if key not in previous:
            alerts.append(
                BudgetAlert(
                    category=item.category,
                    band=band,
                    percentage=float(item.budget_percentage),
                    severity=severity,
                )
            )

    # Keys outside the current bands are dropped so re-entry fires again
    return alerts, AlertState(notified=frozenset(current_keys))
