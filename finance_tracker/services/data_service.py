"""Export and import the finance data as JSON, and export it as CSV."""
import csv
import io
import json
import os
from dataclasses import dataclass
from datetime import date

from finance_tracker.models.finance_state import FinanceState
from finance_tracker.services.errors import ErrorKind, ImportValidationError
from finance_tracker.services.finance_store import FinanceStore
from finance_tracker.utils.constants import CSV_HEADERS
from finance_tracker.utils.currency import format_amount
from finance_tracker.utils.date_helpers import format_date, today
from finance_tracker.utils.logging_setup import get_logger

logger = get_logger(__name__)


@dataclass
class ImportResult:
    success: bool
    error_kind: ErrorKind | None = None
    message: str = ""
    transactions: int = 0
    categories: int = 0


class DataService:
    def __init__(self, store: FinanceStore):
        self._store = store

    # ── Export ────────────────────────────────────────────────────────────────

    def export_json(self) -> str:
        """Pretty-printed finance record, re-importable as is."""
        return json.dumps(self._store.state.to_dict(), indent=2)

    def export_csv(self) -> str:
        state = self._store.state
        names = {c.id: c.name for c in state.categories}
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        for t in state.transactions:
            recurring = ""
            if t.recurring is not None:
                recurring = t.recurring.frequency
                if t.recurring.end_date:
                    recurring += f";{t.recurring.end_date}"
            writer.writerow([
                t.id,
                t.date,
                t.type,
                names.get(t.category_id, t.category_id),
                t.description,
                format_amount(t.amount),
                ";".join(t.tags),
                recurring,
                t.receipt_url or "",
            ])
        return buf.getvalue().rstrip("\n")

    def backup(self, folder: str, on_date: date | None = None) -> tuple[str, str]:
        """Write JSON and CSV backups into folder; returns both paths."""
        stamp = format_date(on_date or today())
        os.makedirs(folder, exist_ok=True)
        json_path = os.path.join(folder, f"finance-tracker-backup-{stamp}.json")
        csv_path = os.path.join(folder, f"finance-tracker-backup-{stamp}.csv")
        with open(json_path, "w", encoding="utf-8") as f:
            f.write(self.export_json())
        with open(csv_path, "w", encoding="utf-8", newline="") as f:
            f.write(self.export_csv())
        logger.info("Backup written to %s and %s", json_path, csv_path)
        return json_path, csv_path

    # ── Import ────────────────────────────────────────────────────────────────

    def import_json(self, text: str) -> ImportResult:
        """Replace the finance data with a previously exported JSON document.

        Malformed input leaves the stored data untouched and is reported in
        the result rather than raised.
        """
        try:
            state = self.parse(text)
        except ImportValidationError as exc:
            logger.warning("Error importing data: %s", exc)
            return ImportResult(success=False, error_kind=exc.kind, message=str(exc))

        self._store.replace_state(state)
        logger.info(
            "Imported %d transaction(s) and %d category record(s)",
            len(state.transactions), len(state.categories),
        )
        return ImportResult(
            success=True,
            transactions=len(state.transactions),
            categories=len(state.categories),
        )

    def import_file(self, path: str) -> ImportResult:
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as exc:
            logger.warning("Cannot read import file %s: %s", path, exc)
            return ImportResult(success=False, error_kind=ErrorKind.IMPORT_VALIDATION, message=str(exc))
        return self.import_json(text)

    @staticmethod
    def parse(text: str) -> FinanceState:
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as exc:
            raise ImportValidationError(f"Invalid JSON: {exc}") from exc
        try:
            return FinanceState.from_dict(data)
        except KeyError as exc:
            raise ImportValidationError(f"Invalid data format: {exc.args[0] if exc.args else exc}") from exc
        except (TypeError, ValueError) as exc:
            raise ImportValidationError(f"Invalid data format: {exc}") from exc
