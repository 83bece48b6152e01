"""Pure aggregation functions over transaction lists.

Nothing here touches storage; every function is deterministic on its input
and returns zero / empty results for empty input.
"""
from collections import defaultdict
from datetime import date, datetime
from typing import Iterable

from finance_tracker.models.finance_state import FinanceState
from finance_tracker.models.summary import DateRange, MonthSummary, YearSummary
from finance_tracker.models.transaction import Transaction
from finance_tracker.utils.date_helpers import month_range, parse_date, year_range


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def filter_by_date_range(
    transactions: Iterable[Transaction], date_range: DateRange
) -> list[Transaction]:
    """Transactions dated within [start, end], both ends inclusive.

    Transactions with an unparseable date never match.
    """
    bounds = DateRange(_as_date(date_range.start), _as_date(date_range.end))
    result = []
    for t in transactions:
        d = parse_date(t.date)
        if d is not None and bounds.contains(d):
            result.append(t)
    return result


def filter_by_type(transactions: Iterable[Transaction], type_: str) -> list[Transaction]:
    return [t for t in transactions if t.type == type_]


def sum_by_type(transactions: Iterable[Transaction], type_: str) -> float:
    return sum((t.amount for t in transactions if t.type == type_), 0.0)


def category_breakdown(transactions: Iterable[Transaction]) -> dict[str, float]:
    """Map category id -> summed amount. Ids need not exist as categories."""
    breakdown: dict[str, float] = defaultdict(float)
    for t in transactions:
        breakdown[t.category_id] += t.amount
    return dict(breakdown)


def month_summary(state: FinanceState, month: int, year: int) -> MonthSummary:
    """Totals for the calendar month (0-based ``month``) of ``year``."""
    start, end = month_range(month, year)
    in_month = filter_by_date_range(state.transactions, DateRange(start, end))
    total_income = sum_by_type(in_month, "income")
    total_expense = sum_by_type(in_month, "expense")
    return MonthSummary(
        month=month,
        year=year,
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
        category_summary=category_breakdown(in_month),
    )


def year_summary(state: FinanceState, year: int) -> YearSummary:
    monthly = [month_summary(state, m, year) for m in range(12)]
    total_income = sum(s.total_income for s in monthly)
    total_expense = sum(s.total_expense for s in monthly)
    start, end = year_range(year)
    in_year = filter_by_date_range(state.transactions, DateRange(start, end))
    return YearSummary(
        year=year,
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
        monthly_summaries=monthly,
        category_summary=category_breakdown(in_year),
    )


def daily_totals(transactions: Iterable[Transaction]) -> list[dict]:
    """Return [{date, income, expense}, ...] sorted by date."""
    by_day: dict[str, dict] = {}
    for t in transactions:
        row = by_day.setdefault(t.date, {"date": t.date, "income": 0.0, "expense": 0.0})
        if t.type in ("income", "expense"):
            row[t.type] += t.amount
    return [by_day[k] for k in sorted(by_day)]


def available_years(transactions: Iterable[Transaction]) -> list[int]:
    """Distinct years that have transactions, newest first."""
    years = {d.year for d in (parse_date(t.date) for t in transactions) if d}
    return sorted(years, reverse=True)


def percentage_change(current: float, previous: float) -> float | None:
    if previous == 0:
        return None
    return (current - previous) / previous * 100
