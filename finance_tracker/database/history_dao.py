from finance_tracker.database.db_manager import DatabaseManager
from finance_tracker.models.finance_state import FinanceState
from finance_tracker.services.errors import StorageError
from finance_tracker.utils.constants import UNDO_STACK_KEY, REDO_STACK_KEY
from finance_tracker.utils.logging_setup import get_logger

logger = get_logger(__name__)


class HistoryDAO:
    """Undo and redo stacks, each persisted as a list of full snapshots
    (oldest first)."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def get_undo_stack(self) -> list[FinanceState]:
        return self._load(UNDO_STACK_KEY)

    def get_redo_stack(self) -> list[FinanceState]:
        return self._load(REDO_STACK_KEY)

    def set_undo_stack(self, stack: list[FinanceState]) -> bool:
        return self._save(UNDO_STACK_KEY, stack)

    def set_redo_stack(self, stack: list[FinanceState]) -> bool:
        return self._save(REDO_STACK_KEY, stack)

    def _load(self, key: str) -> list[FinanceState]:
        try:
            raw = self._db.get_record(key, [])
        except StorageError as exc:
            logger.error("Error loading history stack %s: %s", key, exc)
            return []
        if not isinstance(raw, list):
            logger.warning("History stack %s is not a list, ignoring it", key)
            return []
        try:
            return [FinanceState.from_dict(s) for s in raw]
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Malformed snapshot in %s, dropping stack: %s", key, exc)
            return []

    def _save(self, key: str, stack: list[FinanceState]) -> bool:
        try:
            self._db.set_record(key, [s.to_dict() for s in stack])
        except StorageError as exc:
            logger.error("Error saving history stack %s: %s", key, exc)
            return False
        return True
