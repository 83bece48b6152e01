from finance_tracker.models.summary import Anomaly, DateRange, MonthSummary, YearSummary
from finance_tracker.services import aggregation
from finance_tracker.services.anomalies import detect_anomalies
from finance_tracker.services.category_service import UNKNOWN_CATEGORY
from finance_tracker.services.finance_store import FinanceStore
from finance_tracker.utils.date_helpers import today, year_range


class ReportService:
    def __init__(self, store: FinanceStore):
        self._store = store

    def month_summary(self, month: int | None = None, year: int | None = None) -> MonthSummary:
        """Summary for a 0-based month (default: the current month)."""
        ref = today()
        m = ref.month - 1 if month is None else month
        y = ref.year if year is None else year
        return aggregation.month_summary(self._store.state, m, y)

    def year_summary(self, year: int | None = None) -> YearSummary:
        return aggregation.year_summary(self._store.state, year or today().year)

    def category_breakdown(
        self, type_: str = "expense", date_range: DateRange | None = None
    ) -> list[dict]:
        """Return [{category_id, name, color, total}, ...], largest first."""
        state = self._store.state
        txs = aggregation.filter_by_type(state.transactions, type_)
        if date_range is not None:
            txs = aggregation.filter_by_date_range(txs, date_range)
        rows = []
        for cat_id, total in aggregation.category_breakdown(txs).items():
            cat = state.get_category(cat_id)
            rows.append({
                "category_id": cat_id,
                "name": cat.name if cat else UNKNOWN_CATEGORY,
                "color": cat.color if cat else "#888888",
                "total": total,
            })
        rows.sort(key=lambda r: r["total"], reverse=True)
        return rows

    def anomalies(self) -> list[Anomaly]:
        state = self._store.state
        return detect_anomalies(state.transactions, state.categories)

    def available_years(self) -> list[int]:
        return aggregation.available_years(self._store.transactions)

    def period_comparison(self, type_: str, year: int | None = None) -> dict:
        """Yearly total for ``type_`` ('income', 'expense' or 'balance')
        against the previous year."""
        y = year or today().year
        current = self._year_total(type_, y)
        previous = self._year_total(type_, y - 1)
        return {
            "year": y,
            "current": current,
            "previous": previous,
            "change_pct": aggregation.percentage_change(current, previous),
        }

    def daily_totals(self, date_range: DateRange | None = None) -> list[dict]:
        txs = self._store.transactions
        if date_range is not None:
            txs = aggregation.filter_by_date_range(txs, date_range)
        return aggregation.daily_totals(txs)

    def _year_total(self, type_: str, year: int) -> float:
        start, end = year_range(year)
        txs = aggregation.filter_by_date_range(self._store.transactions, DateRange(start, end))
        if type_ == "balance":
            return aggregation.sum_by_type(txs, "income") - aggregation.sum_by_type(txs, "expense")
        return aggregation.sum_by_type(txs, type_)
