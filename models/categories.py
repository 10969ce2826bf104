"""Fixed enumerations shared by transactions, budgets and recurring definitions."""

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)

DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
FREQUENCIES = (DAILY, WEEKLY, MONTHLY)

# Bucket for expenses recorded without a category
DEFAULT_CATEGORY = "Lainnya"

CATEGORIES = {
    INCOME: ("Gaji", "Freelance", "Bonus", "Investasi", DEFAULT_CATEGORY),
    EXPENSE: ("Makanan", "Transport", "Belanja", "Hiburan", "Tagihan", DEFAULT_CATEGORY),
}

# Budgets only make sense for spending
BUDGET_CATEGORIES = CATEGORIES[EXPENSE]

ALL_CATEGORIES = tuple(sorted(set(CATEGORIES[INCOME]) | set(CATEGORIES[EXPENSE])))

AUTO_GENERATED_MARKER = "Auto-generated"


def categories_for(transaction_type: str) -> tuple:
    """Get the categories offered for a transaction type."""
    return CATEGORIES.get(transaction_type, ())
