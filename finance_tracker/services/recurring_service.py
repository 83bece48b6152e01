import copy
import threading
from datetime import date, datetime, timedelta
from typing import Iterable

from finance_tracker.models.finance_state import FinanceState
from finance_tracker.models.transaction import Transaction
from finance_tracker.services.errors import FinanceError
from finance_tracker.utils.constants import RECURRING_CHECK_INTERVAL, UPCOMING_REMINDER_DAYS
from finance_tracker.utils.date_helpers import add_months, add_years, format_date, parse_date, today
from finance_tracker.utils.logging_setup import get_logger

logger = get_logger(__name__)


def elapsed_periods(frequency: str, last: date, current: date) -> int:
    """Whole periods between last and current.

    daily/weekly count calendar days; monthly and yearly compare the
    calendar month/year only, ignoring the day of month.
    """
    if frequency == "daily":
        return (current - last).days
    if frequency == "weekly":
        return (current - last).days // 7
    if frequency == "monthly":
        return (current.year - last.year) * 12 + (current.month - last.month)
    if frequency == "yearly":
        return current.year - last.year
    return 0


def advance(frequency: str, last: date, periods: int) -> date:
    if frequency == "daily":
        return last + timedelta(days=periods)
    if frequency == "weekly":
        return last + timedelta(days=7 * periods)
    if frequency == "monthly":
        return add_months(last, periods)
    if frequency == "yearly":
        return add_years(last, periods)
    raise ValueError(f"Invalid frequency: {frequency}")


def instance_id(template_id: str, on_date: str) -> str:
    return f"{template_id}-{on_date}"


def is_template(tx: Transaction) -> bool:
    """A recurring transaction the user entered, as opposed to an instance
    the generator produced from one."""
    return tx.recurring is not None and tx.template_id is None


def generate_recurring_transactions(
    transactions: Iterable[Transaction], current_date: date | datetime | None = None
) -> list[Transaction]:
    """Return the new instances due as of current_date (default: today).

    At most one instance per template: when several periods have elapsed the
    instance is dated last_processed + all elapsed periods. The input is not
    modified; the caller merges the result and writes the new marker back to
    each template (see ``apply_generated``).
    """
    ref = current_date or today()
    if isinstance(ref, datetime):
        ref = ref.date()
    ref_str = format_date(ref)

    new_transactions: list[Transaction] = []

    for tx in transactions:
        if not is_template(tx):
            continue
        rec = tx.recurring
        if not rec.last_processed:
            continue
        if rec.end_date and rec.end_date < ref_str:
            continue
        last = parse_date(rec.last_processed)
        if last is None:
            logger.warning("Recurring transaction %s has invalid lastProcessed %r", tx.id, rec.last_processed)
            continue

        periods = elapsed_periods(rec.frequency, last, ref)
        if periods < 1:
            continue

        new_date = format_date(advance(rec.frequency, last, periods))
        new_tx = copy.deepcopy(tx)
        new_tx.id = instance_id(tx.id, new_date)
        new_tx.date = new_date
        new_tx.recurring.last_processed = new_date
        new_tx.template_id = tx.id
        new_transactions.append(new_tx)

    return new_transactions


def apply_generated(state: FinanceState, new_transactions: Iterable[Transaction]) -> FinanceState:
    """Copy of state with the instances appended and each template's
    last_processed moved to its instance's date."""
    updated = state.copy()
    by_id = {t.id: t for t in updated.transactions}
    for new_tx in new_transactions:
        template = by_id.get(new_tx.template_id)
        if template is not None and template.recurring is not None:
            template.recurring.last_processed = new_tx.recurring.last_processed
        if new_tx.id not in by_id:
            instance = copy.deepcopy(new_tx)
            updated.transactions.append(instance)
            by_id[instance.id] = instance
    return updated


class RecurringService:
    def __init__(self, store):
        self._store = store

    def get_templates(self) -> list[Transaction]:
        """Recurring templates, excluding the instances they generated."""
        return [t for t in self._store.transactions if is_template(t)]

    def apply_due(self, reference_date: date | None = None) -> list[Transaction]:
        """Generate and store all due instances. Returns the new transactions."""
        ref = reference_date or today()
        created: list[Transaction] = []

        def _apply(state: FinanceState) -> FinanceState | None:
            new_txs = generate_recurring_transactions(state.transactions, ref)
            if not new_txs:
                return None
            created.extend(new_txs)
            return apply_generated(state, new_txs)

        self._store.mutate(_apply)
        if created:
            logger.info("Generated %d recurring transaction(s) as of %s", len(created), ref)
        return created

    def next_due_date(self, tx: Transaction) -> date | None:
        """Date of the next instance after the template's marker, None when
        the recurrence has ended or has no marker."""
        rec = tx.recurring
        if rec is None:
            return None
        last = parse_date(rec.last_processed)
        if last is None:
            return None
        candidate = advance(rec.frequency, last, 1)
        end = parse_date(rec.end_date) if rec.end_date else None
        if end and candidate > end:
            return None
        return candidate

    def upcoming(
        self, days: int = UPCOMING_REMINDER_DAYS, reference_date: date | None = None
    ) -> list[tuple[Transaction, date]]:
        """Templates due within the next ``days`` days, soonest first."""
        ref = reference_date or today()
        horizon = ref + timedelta(days=days)
        due = []
        for tx in self.get_templates():
            d = self.next_due_date(tx)
            if d is not None and d <= horizon:
                due.append((tx, d))
        return sorted(due, key=lambda pair: pair[1])


class RecurringScheduler:
    """Runs ``RecurringService.apply_due`` on start and then every
    ``interval`` seconds on a daemon timer thread."""

    def __init__(self, service: RecurringService, interval: float = RECURRING_CHECK_INTERVAL):
        self._service = service
        self._interval = interval
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self):
        with self._lock:
            if self._running:
                return
            self._running = True
        logger.info("Recurring check scheduled every %s seconds", self._interval)
        self._tick()

    def stop(self):
        with self._lock:
            self._running = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        logger.info("Recurring check stopped")

    def _tick(self):
        try:
            self._service.apply_due()
        except FinanceError as exc:
            logger.error("Recurring check failed: %s", exc)
        except Exception:
            logger.exception("Unexpected error in recurring check")
        with self._lock:
            if not self._running:
                return
            self._timer = threading.Timer(self._interval, self._tick)
            self._timer.daemon = True
            self._timer.start()
