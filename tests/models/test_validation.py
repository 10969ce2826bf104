"""Tests for ledger input validation."""

from datetime import date
from decimal import Decimal

import pytest

from errors import ValidationError
from models.validation import (
    parse_amount,
    validate_budget,
    validate_recurring,
    validate_transaction,
)


class TestParseAmount:
    def test_values(self):
        assert parse_amount("45000") == Decimal("45000")
        assert parse_amount(" 12.50 ") == Decimal("12.50")
        assert parse_amount(0.1) == Decimal("0.1")
        assert parse_amount(Decimal("3")) == Decimal("3")

    def test_not_a_number(self):
        assert parse_amount("abc") is None
        assert parse_amount("NaN") is None
        assert parse_amount("Infinity") is None


class TestValidateTransaction:
    def test_cleaned(self):
        cleaned = validate_transaction("  Makan siang ", "45000", "expense", "", "")

        assert cleaned == {
            "title": "Makan siang",
            "amount": Decimal("45000"),
            "type": "expense",
            "category": None,
            "notes": None,
        }

    def test_collects_every_field(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_transaction("", "-5", "transfer", "Makanan", "x" * 501)

        assert set(exc_info.value.errors) == {"title", "amount", "type", "notes"}

    def test_zero_amount(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_transaction("Kopi", "0", "expense")

        assert exc_info.value.errors == {"amount": "Amount must be greater than 0"}

    def test_category_must_match_type(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_transaction("Gaji", "100", "expense", "Gaji")

        assert "category" in exc_info.value.errors

    def test_title_length(self):
        validate_transaction("x" * 100, "1", "income")

        with pytest.raises(ValidationError):
            validate_transaction("x" * 101, "1", "income")


class TestValidateRecurring:
    def test_parses_iso_date(self):
        cleaned = validate_recurring("Netflix", "186000", "expense", "monthly", "2025-01-31")

        assert cleaned["next_run_date"] == date(2025, 1, 31)
        assert cleaned["frequency"] == "monthly"

    def test_invalid_frequency_and_date(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_recurring("Netflix", "186000", "expense", "yearly", "31/01/2025")

        assert set(exc_info.value.errors) == {"frequency", "next_run_date"}


class TestValidateBudget:
    def test_valid(self):
        cleaned = validate_budget("Makanan", "500000", 3, 2025)

        assert cleaned["amount"] == Decimal("500000")

    def test_income_category_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_budget("Gaji", "500000", 3, 2025)

        assert "category" in exc_info.value.errors

    def test_month_range(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_budget("Makanan", "0", 13, 2025)

        assert set(exc_info.value.errors) == {"amount", "month"}
