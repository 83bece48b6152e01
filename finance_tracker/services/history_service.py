from finance_tracker.database.finance_dao import FinanceDAO
from finance_tracker.database.history_dao import HistoryDAO
from finance_tracker.models.finance_state import FinanceState
from finance_tracker.utils.constants import MAX_HISTORY_SIZE
from finance_tracker.utils.logging_setup import get_logger

logger = get_logger(__name__)


class HistoryService:
    """Snapshot-based undo/redo.

    Both stacks hold full copies of the finance data, are persisted after
    every change and are capped at ``max_size`` entries (oldest dropped
    first).
    """

    def __init__(self, history_dao: HistoryDAO, finance_dao: FinanceDAO, max_size: int = MAX_HISTORY_SIZE):
        self._dao = history_dao
        self._finance_dao = finance_dao
        self._max_size = max_size

    def record_mutation(self, previous: FinanceState):
        """Push the pre-mutation state and invalidate the redo future."""
        undo_stack = self._dao.get_undo_stack()
        undo_stack.append(previous.copy())
        self._dao.set_undo_stack(self._trim(undo_stack))
        self._dao.set_redo_stack([])

    def undo(self, current: FinanceState | None = None) -> FinanceState | None:
        """Restore and return the most recent snapshot; None when there is none.

        ``current`` (default: the persisted state) goes onto the redo stack.
        """
        undo_stack = self._dao.get_undo_stack()
        if not undo_stack:
            return None
        previous = undo_stack.pop()
        redo_stack = self._dao.get_redo_stack()
        redo_stack.append(current.copy() if current is not None else self._finance_dao.load())

        self._dao.set_undo_stack(undo_stack)
        self._dao.set_redo_stack(self._trim(redo_stack))
        self._finance_dao.save(previous)
        logger.info("Undo: %d snapshot(s) left", len(undo_stack))
        return previous

    def redo(self, current: FinanceState | None = None) -> FinanceState | None:
        redo_stack = self._dao.get_redo_stack()
        if not redo_stack:
            return None
        following = redo_stack.pop()
        undo_stack = self._dao.get_undo_stack()
        undo_stack.append(current.copy() if current is not None else self._finance_dao.load())

        self._dao.set_undo_stack(self._trim(undo_stack))
        self._dao.set_redo_stack(redo_stack)
        self._finance_dao.save(following)
        logger.info("Redo: %d snapshot(s) left", len(redo_stack))
        return following

    def can_undo(self) -> bool:
        return bool(self._dao.get_undo_stack())

    def can_redo(self) -> bool:
        return bool(self._dao.get_redo_stack())

    def depth(self) -> tuple[int, int]:
        """(undo depth, redo depth)"""
        return len(self._dao.get_undo_stack()), len(self._dao.get_redo_stack())

    def clear(self):
        self._dao.set_undo_stack([])
        self._dao.set_redo_stack([])

    def _trim(self, stack: list[FinanceState]) -> list[FinanceState]:
        if len(stack) > self._max_size:
            return stack[len(stack) - self._max_size:]
        return stack
