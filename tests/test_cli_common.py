"""Tests for CLI helpers."""

from datetime import date, datetime, timezone

import pytest

from cli.common import current_period, parse_date, parse_datetime

LATE_MARCH_UTC = datetime(2025, 3, 31, 20, 0, tzinfo=timezone.utc)


class TestCurrentPeriod:
    def test_uses_configured_timezone(self):
        assert current_period(None, None, "UTC", now=LATE_MARCH_UTC) == (3, 2025)
        assert current_period(None, None, "Asia/Jakarta", now=LATE_MARCH_UTC) == (4, 2025)

    def test_explicit_values_win(self):
        assert current_period(12, 2024, "Asia/Jakarta", now=LATE_MARCH_UTC) == (12, 2024)

    def test_partial(self):
        assert current_period(None, 2024, "Asia/Jakarta", now=LATE_MARCH_UTC) == (4, 2024)

    def test_unknown_timezone(self):
        with pytest.raises(ValueError):
            current_period(None, None, "Mars/Olympus", now=LATE_MARCH_UTC)


class TestParsing:
    def test_parse_date(self):
        assert parse_date("2025-03-01") == date(2025, 3, 1)

    def test_parse_date_invalid(self):
        with pytest.raises(ValueError):
            parse_date("01/03/2025")

    def test_naive_timestamp_stays_naive(self):
        parsed = parse_datetime("2025-03-10T09:30")

        assert parsed == datetime(2025, 3, 10, 9, 30)
        assert parsed.tzinfo is None

    def test_offset_is_kept(self):
        assert parse_datetime("2025-03-10T09:30:00+07:00").utcoffset().total_seconds() == 7 * 3600
