import uuid

from finance_tracker.models.finance_state import FinanceState
from finance_tracker.models.summary import DateRange
from finance_tracker.models.transaction import RecurringInfo, Transaction
from finance_tracker.services.aggregation import filter_by_date_range
from finance_tracker.services.categorizer import Categorizer, KeywordCategorizer
from finance_tracker.services.errors import NotFoundError, ValidationError
from finance_tracker.services.finance_store import FinanceStore
from finance_tracker.utils.constants import FREQUENCIES, TRANSACTION_TYPES
from finance_tracker.utils.date_helpers import parse_date


class TransactionService:
    def __init__(self, store: FinanceStore, categorizer: Categorizer | None = None):
        self._store = store
        self._categorizer = categorizer or KeywordCategorizer()

    def get_all(self) -> list[Transaction]:
        return self._store.transactions

    def get_by_id(self, tx_id: str) -> Transaction | None:
        return self._store.state.get_transaction(tx_id)

    def get_by_category(self, category_id: str) -> list[Transaction]:
        return self._store.get_transactions_by_category(category_id)

    def search(
        self,
        query: str | None = None,
        type_filter: str | None = None,
        category_id: str | None = None,
        date_range: DateRange | None = None,
    ) -> list[Transaction]:
        """Filter by text (description, tag or category name), type, category
        and date range. Each filter is skipped when None or 'all'."""
        state = self._store.state
        txs = state.transactions
        if date_range is not None:
            txs = filter_by_date_range(txs, date_range)
        if type_filter and type_filter != "all":
            txs = [t for t in txs if t.type == type_filter]
        if category_id and category_id != "all":
            txs = [t for t in txs if t.category_id == category_id]
        if query:
            needle = query.strip().lower()
            names = {c.id: c.name.lower() for c in state.categories}
            txs = [
                t for t in txs
                if needle in t.description.lower()
                or needle in names.get(t.category_id, "")
                or any(needle in tag.lower() for tag in t.tags)
            ]
        return txs

    def recent(
        self,
        limit: int = 10,
        type_filter: str | None = None,
        category_id: str | None = None,
    ) -> list[Transaction]:
        """Newest first."""
        txs = self.search(type_filter=type_filter, category_id=category_id)
        return sorted(txs, key=lambda t: t.date, reverse=True)[:limit]

    def suggest_category(self, description: str, amount: float, type_: str) -> str | None:
        return self._categorizer.suggest(description, amount, type_, self._store.categories)

    def add(
        self,
        amount: float,
        description: str,
        type_: str,
        date: str,
        category_id: str | None = None,
        tags: list[str] | None = None,
        recurring: RecurringInfo | None = None,
        receipt_url: str | None = None,
    ) -> Transaction:
        if not category_id and self._store.preferences.auto_categorization:
            category_id = self.suggest_category(description, amount, type_)
        if recurring is not None and not recurring.last_processed:
            recurring = RecurringInfo(recurring.frequency, recurring.end_date, date)

        tx = Transaction(
            id=str(uuid.uuid4()),
            amount=float(amount),
            description=description.strip(),
            date=date,
            type=type_,
            category_id=category_id or "",
            recurring=recurring,
            receipt_url=receipt_url,
            tags=[t.strip() for t in (tags or []) if t.strip()],
        )

        def _add(state: FinanceState) -> FinanceState:
            self._validate(tx, state)
            state.transactions.append(tx)
            return state

        self._store.mutate(_add)
        return tx

    def update(self, tx: Transaction) -> Transaction:
        def _update(state: FinanceState) -> FinanceState:
            existing = state.get_transaction(tx.id)
            if existing is None:
                raise NotFoundError(f"Transaction {tx.id} does not exist.")
            if existing.type != tx.type:
                raise ValidationError("Transaction type cannot be changed.")
            self._validate(tx, state)
            state.transactions = [tx if t.id == tx.id else t for t in state.transactions]
            return state

        self._store.mutate(_update)
        return tx

    def delete(self, tx_id: str):
        def _delete(state: FinanceState) -> FinanceState:
            if state.get_transaction(tx_id) is None:
                raise NotFoundError(f"Transaction {tx_id} does not exist.")
            state.transactions = [t for t in state.transactions if t.id != tx_id]
            return state

        self._store.mutate(_delete)

    def _validate(self, tx: Transaction, state: FinanceState):
        if tx.type not in TRANSACTION_TYPES:
            raise ValidationError(f"Invalid type: {tx.type}")
        if not tx.description.strip():
            raise ValidationError("Description cannot be empty.")
        if tx.amount <= 0:
            raise ValidationError("Amount must be positive.")
        if not parse_date(tx.date):
            raise ValidationError("Invalid date format. Use YYYY-MM-DD.")
        if not tx.category_id:
            raise ValidationError("Please select a category.")
        category = state.get_category(tx.category_id)
        if category is None:
            raise ValidationError(f"Category {tx.category_id} does not exist.")
        if category.type != tx.type:
            raise ValidationError(f"Category {category.name} is not an {tx.type} category.")
        if tx.recurring is not None:
            if tx.recurring.frequency not in FREQUENCIES:
                raise ValidationError(f"Invalid frequency: {tx.recurring.frequency}")
            if tx.recurring.end_date and not parse_date(tx.recurring.end_date):
                raise ValidationError("Invalid end date. Use YYYY-MM-DD.")
