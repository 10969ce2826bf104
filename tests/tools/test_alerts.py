"""Tests for budget alert de-duplication."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from tools.alerts import (
    APPROACHING,
    EXCEEDED,
    AlertState,
    band_for,
    evaluate_alerts,
)


@dataclass
class Spend:
    category: str
    budget_percentage: Optional[Decimal]


def spend(category, percentage):
    return Spend(category, None if percentage is None else Decimal(str(percentage)))


class TestBandFor:
    def test_floors_to_ten(self):
        assert band_for(Decimal("83")) == 80
        assert band_for(Decimal("89.99")) == 80
        assert band_for(Decimal("90")) == 90
        assert band_for(Decimal("112.5")) == 110
        assert band_for(7.5) == 0


class TestEvaluateAlerts:
    """Tests for evaluate_alerts."""

    def test_band_sequence(self):
        alerts, state = evaluate_alerts([spend("Makanan", 83)])
        assert [(a.category, a.band, a.severity) for a in alerts] == [
            ("Makanan", 80, APPROACHING)
        ]

        # Same band again: nothing new
        alerts, state = evaluate_alerts([spend("Makanan", 87)], state)
        assert alerts == []
        alerts, state = evaluate_alerts([spend("Makanan", 89)], state)
        assert alerts == []

        # New band fires again
        alerts, state = evaluate_alerts([spend("Makanan", 95)], state)
        assert [(a.band, a.severity) for a in alerts] == [(90, APPROACHING)]

        # Dropping below 80 clears the category
        alerts, state = evaluate_alerts([spend("Makanan", 50)], state)
        assert alerts == []
        assert state.notified == frozenset()

        alerts, state = evaluate_alerts([spend("Makanan", 83)], state)
        assert [(a.band, a.severity) for a in alerts] == [(80, APPROACHING)]

    def test_exceeded(self):
        alerts, state = evaluate_alerts([spend("Makanan", "112.5")])

        [alert] = alerts
        assert alert.severity == EXCEEDED
        assert alert.band == 110
        assert alert.percentage == 112.5
        assert "exceeded" in alert.message
        assert state.notified == frozenset({("Makanan", 110)})

    def test_exactly_hundred_is_exceeded(self):
        [alert], _ = evaluate_alerts([spend("Makanan", 100)])

        assert alert.severity == EXCEEDED

    def test_below_threshold_and_unbudgeted_are_ignored(self):
        alerts, state = evaluate_alerts([spend("Makanan", "79.9"), spend("Hiburan", None)])

        assert alerts == []
        assert state == AlertState()

    def test_categories_tracked_independently(self):
        _, state = evaluate_alerts([spend("Makanan", 85), spend("Transport", 120)])

        alerts, state = evaluate_alerts(
            [spend("Makanan", 85), spend("Transport", 40), spend("Belanja", 91)], state
        )

        assert [(a.category, a.band) for a in alerts] == [("Belanja", 90)]
        assert state.notified == frozenset({("Makanan", 80), ("Belanja", 90)})

    def test_category_missing_from_latest_evaluation_is_forgotten(self):
        _, state = evaluate_alerts([spend("Makanan", 85)])

        _, state = evaluate_alerts([], state)
        alerts, _ = evaluate_alerts([spend("Makanan", 85)], state)

        assert len(alerts) == 1

    def test_input_state_is_not_modified(self):
        _, state = evaluate_alerts([spend("Makanan", 85)])

        evaluate_alerts([spend("Transport", 95)], state)

        assert state.notified == frozenset({("Makanan", 80)})

    def test_fresh_state_fires_again(self):
        evaluate_alerts([spend("Makanan", 85)])

        alerts, _ = evaluate_alerts([spend("Makanan", 85)], None)

        assert len(alerts) == 1
