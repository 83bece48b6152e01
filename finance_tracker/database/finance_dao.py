from finance_tracker.database.db_manager import DatabaseManager
from finance_tracker.models.finance_state import FinanceState
from finance_tracker.services.errors import StorageError
from finance_tracker.utils.constants import FINANCE_DATA_KEY
from finance_tracker.utils.logging_setup import get_logger

logger = get_logger(__name__)


class FinanceDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def load(self) -> FinanceState:
        """Return the stored finance data, or a fresh default state (first run,
        unreadable or malformed record)."""
        try:
            data = self._db.get_record(FINANCE_DATA_KEY)
        except StorageError as exc:
            logger.error("Error loading finance data: %s", exc)
            return FinanceState.default()
        if data is None:
            return FinanceState.default()
        try:
            return FinanceState.from_dict(data)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Malformed finance data, using defaults: %s", exc)
            return FinanceState.default()

    def save(self, state: FinanceState) -> bool:
        try:
            self._db.set_record(FINANCE_DATA_KEY, state.to_dict())
        except StorageError as exc:
            logger.error("Error saving finance data: %s", exc)
            return False
        return True
