import pytest

from finance_tracker.database.db_manager import DatabaseManager
from finance_tracker.database.finance_dao import FinanceDAO
from finance_tracker.database.history_dao import HistoryDAO
from finance_tracker.database.preferences_dao import PreferencesDAO
from finance_tracker.models.finance_state import FinanceState
from finance_tracker.models.preferences import UserPreferences
from finance_tracker.services.errors import StorageError, ValidationError
from finance_tracker.utils.constants import FINANCE_DATA_KEY, UNDO_STACK_KEY, USER_PREFS_KEY


def _write_raw(db: DatabaseManager, key: str, raw: str):
    conn = db.get_connection()
    conn.execute("INSERT OR REPLACE INTO kv_store(key, value) VALUES (?, ?)", (key, raw))
    conn.commit()


def test_records_round_trip(db):
    db.set_record("k", {"a": [1, 2]})
    assert db.get_record("k") == {"a": [1, 2]}
    assert db.has_record("k")
    db.delete_record("k")
    assert db.get_record("k", "default") == "default"


def test_corrupt_record_raises_storage_error(db):
    _write_raw(db, "k", "{oops")
    with pytest.raises(StorageError):
        db.get_record("k")


def test_missing_finance_data_gives_defaults(db):
    state = FinanceDAO(db).load()
    assert state == FinanceState.default()
    # each load returns an independent copy
    state.categories.clear()
    assert len(FinanceDAO(db).load().categories) == 12


def test_corrupt_finance_data_falls_back_to_defaults(db, caplog):
    _write_raw(db, FINANCE_DATA_KEY, "not json at all")

    with caplog.at_level("ERROR", logger="finance_tracker"):
        state = FinanceDAO(db).load()

    assert state == FinanceState.default()
    assert "Error loading finance data" in caplog.text


def test_malformed_finance_data_falls_back_to_defaults(db):
    db.set_record(FINANCE_DATA_KEY, {"transactions": []})
    assert FinanceDAO(db).load() == FinanceState.default()


def test_corrupt_history_stack_is_treated_as_empty(db):
    _write_raw(db, UNDO_STACK_KEY, "[[")
    assert HistoryDAO(db).get_undo_stack() == []


def test_write_failure_is_logged_not_raised(caplog):
    db = DatabaseManager.open(":memory:")
    db.get_connection().execute("DROP TABLE kv_store")

    with caplog.at_level("ERROR", logger="finance_tracker"):
        assert FinanceDAO(db).save(FinanceState.default()) is False

    assert "Error saving finance data" in caplog.text
    db.close()


def test_preferences_merge_over_defaults(db):
    db.set_record(USER_PREFS_KEY, {"currency": "EUR", "unknownKey": 1})

    prefs = PreferencesDAO(db).load()

    assert prefs.currency == "EUR"
    assert prefs.theme_mode == "system"
    assert prefs.date_format == "MM/dd/yyyy"
    assert prefs.notifications is True
    assert prefs.auto_categorization is True


def test_stored_non_boolean_flags_fall_back_to_defaults(db):
    db.set_record(USER_PREFS_KEY, {"notifications": "false", "autoCategorization": False})

    prefs = PreferencesDAO(db).load()

    assert prefs.notifications is True
    assert prefs.auto_categorization is False


def test_preferences_round_trip(db):
    dao = PreferencesDAO(db)
    dao.save(UserPreferences(theme_mode="dark", currency="GBP", notifications=False))

    assert dao.load() == UserPreferences(theme_mode="dark", currency="GBP", notifications=False)
    assert db.get_record(USER_PREFS_KEY)["themeMode"] == "dark"


def test_update_preferences_validates_and_is_not_undoable(services):
    prefs = services.store.update_preferences(currency="eur", theme_mode="dark")

    assert prefs.currency == "EUR"
    assert PreferencesDAO(services.db).load().theme_mode == "dark"
    assert not services.store.can_undo

    for bad in (
        {"currency": "EURO"},
        {"theme_mode": "neon"},
        {"date_format": "%d"},
        {"colour": "x"},
        {"notifications": "false"},
        {"auto_categorization": 0},
    ):
        with pytest.raises(ValidationError):
            services.store.update_preferences(**bad)


def test_reset_restores_defaults(services):
    services.transactions.add(5, "Coffee", "expense", "2024-01-01", category_id="food")
    services.store.update_preferences(currency="JPY")

    services.store.reset()

    assert services.store.state == FinanceState.default()
    assert services.store.preferences == UserPreferences()
    assert not services.store.can_undo
    assert services.db.get_record(FINANCE_DATA_KEY) is None


def test_file_database_persists_between_connections(tmp_path):
    path = str(tmp_path / "finance.db")
    db = DatabaseManager.open(path)
    db.set_record("k", [1])
    db.close()

    reopened = DatabaseManager.open(path)
    assert reopened.get_record("k") == [1]
    reopened.close()
