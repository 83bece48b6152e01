import threading
from typing import Callable, Optional

from finance_tracker.database.db_manager import DatabaseManager
from finance_tracker.database.finance_dao import FinanceDAO
from finance_tracker.database.preferences_dao import PreferencesDAO
from finance_tracker.models.category import Category
from finance_tracker.models.finance_state import FinanceState
from finance_tracker.models.preferences import UserPreferences
from finance_tracker.models.transaction import Transaction
from finance_tracker.services.errors import StorageError, ValidationError
from finance_tracker.services.history_service import HistoryService
from finance_tracker.utils.constants import THEME_MODES
from finance_tracker.utils.date_helpers import DATE_FORMAT_OPTIONS
from finance_tracker.utils.logging_setup import get_logger

logger = get_logger(__name__)

Mutation = Callable[[FinanceState], Optional[FinanceState]]


class FinanceStore:
    """Owns the live finance state and preferences.

    Every change goes through ``mutate`` (or undo/redo), which runs the whole
    read -> compute -> record history -> persist sequence under one lock.
    Readers get deep copies.
    """

    def __init__(
        self,
        db: DatabaseManager,
        finance_dao: FinanceDAO,
        preferences_dao: PreferencesDAO,
        history: HistoryService,
    ):
        self._db = db
        self._finance_dao = finance_dao
        self._prefs_dao = preferences_dao
        self._history = history
        self._lock = threading.RLock()
        self._state = finance_dao.load()
        self._preferences = preferences_dao.load()

    # ── Read-only views ───────────────────────────────────────────────────────

    @property
    def state(self) -> FinanceState:
        with self._lock:
            return self._state.copy()

    @property
    def transactions(self) -> list[Transaction]:
        return self.state.transactions

    @property
    def categories(self) -> list[Category]:
        return self.state.categories

    @property
    def preferences(self) -> UserPreferences:
        with self._lock:
            return UserPreferences(**vars(self._preferences))

    def get_category_by_id(self, category_id: str) -> Category | None:
        return self.state.get_category(category_id)

    def get_transactions_by_category(self, category_id: str) -> list[Transaction]:
        return [t for t in self.transactions if t.category_id == category_id]

    # ── Mutations ─────────────────────────────────────────────────────────────

    def mutate(self, fn: Mutation) -> FinanceState:
        """Apply fn to a copy of the current state and commit its result.

        fn returns the new state, or None to leave everything untouched (no
        history entry is recorded then). Exceptions from fn propagate and
        leave the state unchanged.
        """
        with self._lock:
            new_state = fn(self._state.copy())
            if new_state is None:
                return self._state.copy()
            self._history.record_mutation(self._state)
            self._finance_dao.save(new_state)
            self._state = new_state.copy()
            return new_state

    def replace_state(self, new_state: FinanceState) -> FinanceState:
        return self.mutate(lambda _current: new_state.copy())

    def undo(self) -> FinanceState | None:
        with self._lock:
            previous = self._history.undo(self._state)
            if previous is not None:
                self._state = previous.copy()
            return previous

    def redo(self) -> FinanceState | None:
        with self._lock:
            following = self._history.redo(self._state)
            if following is not None:
                self._state = following.copy()
            return following

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo()

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo()

    @property
    def history_depth(self) -> tuple[int, int]:
        return self._history.depth()

    def reset(self):
        """Wipe every stored record and return to first-run defaults."""
        with self._lock:
            try:
                self._db.clear()
            except StorageError as exc:
                logger.error("Error clearing stored data: %s", exc)
                self._history.clear()
            self._state = FinanceState.default()
            self._preferences = UserPreferences()
            logger.info("All finance data reset to defaults")

    # ── Preferences (not part of undo/redo) ───────────────────────────────────

    def update_preferences(self, **changes) -> UserPreferences:
        unknown = set(changes) - set(UserPreferences.field_names())
        if unknown:
            raise ValidationError(f"Unknown preference(s): {', '.join(sorted(unknown))}")
        if "theme_mode" in changes and changes["theme_mode"] not in THEME_MODES:
            raise ValidationError(f"Invalid theme mode: {changes['theme_mode']}")
        if "date_format" in changes and changes["date_format"] not in DATE_FORMAT_OPTIONS:
            raise ValidationError(f"Invalid date format: {changes['date_format']}")
        for flag in ("notifications", "auto_categorization"):
            if flag in changes and not isinstance(changes[flag], bool):
                raise ValidationError(f"{flag} must be true or false, got {changes[flag]!r}")
        if "currency" in changes:
            code = str(changes["currency"]).strip().upper()
            if len(code) != 3 or not code.isalpha():
                raise ValidationError(f"Invalid currency code: {changes['currency']}")
            changes["currency"] = code
        with self._lock:
            updated = UserPreferences(**{**vars(self._preferences), **changes})
            self._prefs_dao.save(updated)
            self._preferences = updated
            return UserPreferences(**vars(updated))
