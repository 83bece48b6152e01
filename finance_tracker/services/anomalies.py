from collections import defaultdict
from typing import Iterable

from finance_tracker.models.category import Category
from finance_tracker.models.summary import Anomaly
from finance_tracker.models.transaction import Transaction
from finance_tracker.utils.constants import ANOMALY_MIN_INCREASE_PCT, ANOMALY_MIN_PREVIOUS_AMOUNT
from finance_tracker.utils.date_helpers import month_key, parse_date


def monthly_expenses_by_category(
    transactions: Iterable[Transaction],
) -> dict[str, dict[str, float]]:
    """Return {'YYYY-MM': {category_id: total}} for expense transactions."""
    buckets: dict[str, dict[str, float]] = defaultdict(lambda: defaultdict(float))
    for t in transactions:
        if t.type != "expense":
            continue
        d = parse_date(t.date)
        if d is None:
            continue
        buckets[month_key(d)][t.category_id] += t.amount
    return {k: dict(v) for k, v in buckets.items()}


def detect_anomalies(
    transactions: Iterable[Transaction],
    categories: Iterable[Category] = (),
    min_previous: float = ANOMALY_MIN_PREVIOUS_AMOUNT,
    min_increase_pct: float = ANOMALY_MIN_INCREASE_PCT,
) -> list[Anomaly]:
    """Categories whose spend in the latest month with data rose by at least
    ``min_increase_pct`` over the month before it.

    Only the two most recent months present in the data are compared; a
    category whose prior amount is below ``min_previous`` is skipped.
    ``categories`` is not needed for the computation.
    """
    buckets = monthly_expenses_by_category(transactions)
    months = sorted(buckets)
    if len(months) < 2:
        return []

    current, previous = buckets[months[-1]], buckets[months[-2]]
    anomalies = []
    for category_id, amount in current.items():
        prior = previous.get(category_id, 0.0)
        if prior < min_previous:
            continue
        change = (amount - prior) / prior * 100
        if change >= min_increase_pct:
            anomalies.append(Anomaly(category_id, amount, change))
    return anomalies
