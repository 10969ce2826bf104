from decimal import Decimal

import pytest

from errors import OwnershipError, ValidationError
from tests.helpers import OTHER_OWNER, OWNER


class TestBudgetService:
    """Tests for BudgetService."""

    def test_save_creates_budget(self, services):
        budget = services.budgets.save(OWNER, "Makanan", "500000", 3, 2025)

        assert budget.id
        assert budget.category == "Makanan"
        assert budget.amount == Decimal("500000")
        assert (budget.month, budget.year) == (3, 2025)

    def test_save_existing_key_updates_in_place(self, services):
        first = services.budgets.save(OWNER, "Makanan", 500000, 3, 2025)
        second = services.budgets.save(OWNER, "Makanan", 750000, 3, 2025)

        budgets = services.budgets.find_for_month(OWNER, 3, 2025)

        assert len(budgets) == 1
        assert second.id == first.id
        assert budgets[0].amount == Decimal("750000")

    def test_same_category_other_month_or_owner_is_separate(self, services):
        services.budgets.save(OWNER, "Makanan", 500000, 3, 2025)
        services.budgets.save(OWNER, "Makanan", 400000, 4, 2025)
        services.budgets.save(OTHER_OWNER, "Makanan", 100000, 3, 2025)

        assert services.budgets.find(OWNER, "Makanan", 3, 2025).amount == Decimal("500000")
        assert services.budgets.find(OWNER, "Makanan", 4, 2025).amount == Decimal("400000")
        assert len(services.budgets.find_by_owner(OWNER)) == 2

    def test_find_for_month_ordered_by_category(self, services):
        services.budgets.save(OWNER, "Transport", 100000, 3, 2025)
        services.budgets.save(OWNER, "Belanja", 200000, 3, 2025)
        services.budgets.save(OWNER, "Makanan", 300000, 3, 2025)

        categories = [b.category for b in services.budgets.find_for_month(OWNER, 3, 2025)]

        assert categories == ["Belanja", "Makanan", "Transport"]

    @pytest.mark.parametrize("amount", [0, -1, "abc"])
    def test_save_rejects_bad_amount(self, services, amount):
        with pytest.raises(ValidationError) as exc_info:
            services.budgets.save(OWNER, "Makanan", amount, 3, 2025)

        assert "amount" in exc_info.value.errors
        assert services.budgets.find_by_owner(OWNER) == []

    def test_save_rejects_bad_month_and_category(self, services):
        with pytest.raises(ValidationError) as exc_info:
            services.budgets.save(OWNER, "Gaji", 1000, 13, 2025)

        assert set(exc_info.value.errors) == {"category", "month"}

    def test_delete(self, services):
        budget = services.budgets.save(OWNER, "Makanan", 500000, 3, 2025)

        assert services.budgets.delete(OWNER, budget.id) is True
        assert services.budgets.find(OWNER, "Makanan", 3, 2025) is None
        assert services.budgets.delete(OWNER, budget.id) is False

    def test_delete_other_owner_is_rejected(self, services):
        budget = services.budgets.save(OTHER_OWNER, "Makanan", 500000, 3, 2025)

        with pytest.raises(OwnershipError):
            services.budgets.delete(OWNER, budget.id)

        assert services.budgets.find(OTHER_OWNER, "Makanan", 3, 2025) is not None
