from finance_tracker.database.db_manager import DatabaseManager
from finance_tracker.models.preferences import UserPreferences
from finance_tracker.services.errors import StorageError
from finance_tracker.utils.constants import USER_PREFS_KEY
from finance_tracker.utils.logging_setup import get_logger

logger = get_logger(__name__)


class PreferencesDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def load(self) -> UserPreferences:
        try:
            data = self._db.get_record(USER_PREFS_KEY)
        except StorageError as exc:
            logger.error("Error loading user preferences: %s", exc)
            return UserPreferences()
        if not isinstance(data, dict):
            return UserPreferences()
        return UserPreferences.from_dict(data)

    def save(self, prefs: UserPreferences) -> bool:
        try:
            self._db.set_record(USER_PREFS_KEY, prefs.to_dict())
        except StorageError as exc:
            logger.error("Error saving user preferences: %s", exc)
            return False
        return True
