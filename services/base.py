"""Services container shared by the CLI, the recurring trigger and tests."""

from config import Config
from db.manager import DatabaseManager


class Services:
    """Holds one instance of each ledger service over a shared database.

    Args:
        config: Application configuration object. ``config.owner_id`` is the
            identity the CLI acts as.
        db_manager: Database manager to use instead of one built from
            ``config`` (tests pass one over a scratch database).
    """

    def __init__(self, config: Config, db_manager=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Imported here so service modules can import models without a cycle
        from services.transactions import TransactionService
        from services.budgets import BudgetService
        from services.recurring_transactions import RecurringTransactionService

        self.transactions = TransactionService(self.db_manager, config.timezone)
        self.budgets = BudgetService(self.db_manager)
        self.recurring = RecurringTransactionService(self.db_manager)

    @property
    def owner_id(self) -> str:
        """The acting user ID, empty when none is configured."""
        return self.config.owner_id
