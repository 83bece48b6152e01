from datetime import date, datetime

from conftest import make_state, make_tx
from finance_tracker.models.summary import DateRange
from finance_tracker.services.aggregation import (
    available_years,
    category_breakdown,
    daily_totals,
    filter_by_date_range,
    filter_by_type,
    month_summary,
    sum_by_type,
    year_summary,
)


def _sample_state():
    return make_state(
        make_tx("t1", 100, "2024-01-05", type="income", category_id="salary"),
        make_tx("t2", 40, "2024-01-10", category_id="food"),
        make_tx("t3", 25.5, "2024-01-31", category_id="food"),
        make_tx("t4", 900, "2024-02-01", category_id="housing"),
        make_tx("t5", 2000, "2024-03-15", type="income", category_id="salary"),
        make_tx("t6", 10, "2023-12-31", category_id="food"),
    )


def test_month_summary_example_scenario():
    state = make_state(
        make_tx("a", 100, "2024-01-05", type="income", category_id="salary"),
        make_tx("b", 40, "2024-01-10", category_id="food"),
    )

    s = month_summary(state, 0, 2024)

    assert s.month == 0 and s.year == 2024
    assert s.total_income == 100
    assert s.total_expense == 40
    assert s.balance == 60
    assert s.category_summary == {"salary": 100, "food": 40}


def test_month_summary_uses_calendar_boundaries():
    s = month_summary(_sample_state(), 0, 2024)

    # 2024-01-31 is in, 2023-12-31 and 2024-02-01 are out
    assert s.total_expense == 65.5
    assert s.category_summary == {"salary": 100, "food": 65.5}


def test_empty_state_gives_zero_summary():
    s = month_summary(make_state(), 5, 2024)

    assert (s.total_income, s.total_expense, s.balance) == (0, 0, 0)
    assert s.category_summary == {}

    y = year_summary(make_state(), 2024)
    assert (y.total_income, y.total_expense, y.balance) == (0, 0, 0)
    assert y.category_summary == {}
    assert len(y.monthly_summaries) == 12


def test_year_totals_equal_sum_of_months():
    state = _sample_state()
    y = year_summary(state, 2024)

    assert y.total_income == sum(month_summary(state, m, 2024).total_income for m in range(12))
    assert y.total_expense == sum(month_summary(state, m, 2024).total_expense for m in range(12))
    assert y.balance == y.total_income - y.total_expense
    assert y.category_summary == {"salary": 2100, "food": 65.5, "housing": 900}


def test_balance_is_income_minus_expense_for_every_month():
    state = _sample_state()
    for m in range(12):
        s = month_summary(state, m, 2024)
        assert s.balance == s.total_income - s.total_expense


def test_filter_by_date_range_is_inclusive():
    txs = _sample_state().transactions
    rng = DateRange(date(2024, 1, 5), date(2024, 1, 31))

    assert [t.id for t in filter_by_date_range(txs, rng)] == ["t1", "t2", "t3"]


def test_date_range_contains_both_ends():
    rng = DateRange(date(2024, 1, 5), date(2024, 1, 31))

    assert rng.contains(date(2024, 1, 5))
    assert rng.contains(date(2024, 1, 31))
    assert not rng.contains(date(2024, 2, 1))
    assert not rng.contains(date(2024, 1, 4))


def test_filter_by_date_range_accepts_datetimes():
    txs = _sample_state().transactions
    rng = DateRange(datetime(2024, 2, 1, 0, 0), datetime(2024, 2, 1, 23, 59, 59))

    assert [t.id for t in filter_by_date_range(txs, rng)] == ["t4"]


def test_unparseable_dates_never_match_a_range():
    txs = [make_tx("bad", 5, "not-a-date")]
    assert filter_by_date_range(txs, DateRange(date(2000, 1, 1), date(2100, 1, 1))) == []


def test_filter_and_sum_by_type():
    txs = _sample_state().transactions

    assert {t.id for t in filter_by_type(txs, "income")} == {"t1", "t5"}
    assert sum_by_type(txs, "income") == 2100
    assert sum_by_type([], "expense") == 0


def test_category_breakdown_tolerates_unknown_ids():
    txs = [make_tx("x", 12, "2024-01-01", category_id="no-such-category"), make_tx("y", 3, "2024-01-02", category_id="no-such-category")]

    assert category_breakdown(txs) == {"no-such-category": 15}


def test_daily_totals_and_available_years():
    txs = _sample_state().transactions

    days = daily_totals(txs)
    assert [d["date"] for d in days] == sorted(d["date"] for d in days)
    assert days[0] == {"date": "2023-12-31", "income": 0.0, "expense": 10.0}
    assert available_years(txs) == [2024, 2023]
