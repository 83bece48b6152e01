import json
import sqlite3
from typing import Any

from finance_tracker.services.errors import StorageError
from finance_tracker.utils.constants import DB_FILE
from finance_tracker.utils.logging_setup import get_logger

logger = get_logger(__name__)

_MISSING = object()


class DatabaseManager:
    """Key-value record store on top of a single sqlite table.

    Each record is a JSON document addressed by a string key.
    """

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            except sqlite3.Error as exc:
                raise StorageError(f"Cannot open database {self.db_path}: {exc}") from exc
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def initialize(self):
        """Create schema."""
        conn = self.get_connection()
        try:
            self._create_schema(conn)
            conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot initialize database: {exc}") from exc

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key        TEXT PRIMARY KEY,
                value      TEXT NOT NULL,
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            );
        """)

    def get_record(self, key: str, default: Any = None) -> Any:
        """Return the decoded record stored under key, or default when absent."""
        try:
            row = self.get_connection().execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot read record '{key}': {exc}") from exc
        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except ValueError as exc:
            raise StorageError(f"Corrupt record '{key}': {exc}") from exc

    def set_record(self, key: str, value: Any):
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Cannot encode record '{key}': {exc}") from exc
        conn = self.get_connection()
        try:
            conn.execute(
                """INSERT INTO kv_store(key, value) VALUES (?, ?)
                   ON CONFLICT(key)
                   DO UPDATE SET value = excluded.value, updated_at = datetime('now')""",
                (key, payload),
            )
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageError(f"Cannot write record '{key}': {exc}") from exc

    def has_record(self, key: str) -> bool:
        return self.get_record(key, _MISSING) is not _MISSING

    def delete_record(self, key: str):
        conn = self.get_connection()
        try:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot delete record '{key}': {exc}") from exc

    def clear(self):
        """Remove every record (the 'reset all data' action)."""
        conn = self.get_connection()
        try:
            conn.execute("DELETE FROM kv_store")
            conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot clear database: {exc}") from exc
        logger.info("Cleared all records in %s", self.db_path)

    @staticmethod
    def open(db_path: str | None = None) -> "DatabaseManager":
        """Startup factory: open the database file and make sure the schema exists."""
        db = DatabaseManager(db_path)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
