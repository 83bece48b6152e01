from datetime import date

import pytest

from finance_tracker.models.summary import DateRange
from finance_tracker.models.transaction import RecurringInfo
from finance_tracker.services.errors import ErrorKind, NotFoundError, ValidationError


def test_add_assigns_id_and_persists(services):
    tx = services.transactions.add(40, "Groceries", "expense", "2024-01-10", category_id="food", tags=["home", " "])

    assert tx.id
    assert tx.tags == ["home"]
    assert services.transactions.get_by_id(tx.id) == tx
    assert services.store.can_undo


def test_add_auto_categorizes_when_enabled(services):
    tx = services.transactions.add(15, "Uber to airport", "expense", "2024-01-10")
    assert tx.category_id == "transportation"


def test_add_without_category_fails_when_auto_categorization_is_off(services):
    services.store.update_preferences(auto_categorization=False)

    with pytest.raises(ValidationError, match="category"):
        services.transactions.add(15, "Uber to airport", "expense", "2024-01-10")
    assert services.store.transactions == []


@pytest.mark.parametrize(
    "amount, description, type_, date_, category",
    [
        (0, "Zero", "expense", "2024-01-10", "food"),
        (-5, "Negative", "expense", "2024-01-10", "food"),
        (5, "   ", "expense", "2024-01-10", "food"),
        (5, "Bad type", "transfer", "2024-01-10", "food"),
        (5, "Bad date", "expense", "10/01/2024", "food"),
        (5, "Missing category", "expense", "2024-01-10", "nope"),
        (5, "Wrong category type", "expense", "2024-01-10", "salary"),
    ],
)
def test_add_rejects_invalid_input(services, amount, description, type_, date_, category):
    with pytest.raises(ValidationError) as excinfo:
        services.transactions.add(amount, description, type_, date_, category_id=category)

    assert excinfo.value.kind is ErrorKind.VALIDATION
    assert services.store.transactions == []
    assert not services.store.can_undo


def test_recurring_template_gets_its_date_as_marker(services):
    tx = services.transactions.add(
        9.99, "Netflix", "expense", "2024-02-03", category_id="entertainment",
        recurring=RecurringInfo("monthly", end_date="2024-12-31"),
    )
    assert tx.recurring.last_processed == "2024-02-03"

    with pytest.raises(ValidationError):
        services.transactions.add(
            1, "Bad", "expense", "2024-02-03", category_id="food", recurring=RecurringInfo("hourly"),
        )


def test_update_keeps_type(services):
    tx = services.transactions.add(40, "Groceries", "expense", "2024-01-10", category_id="food")

    tx.amount = 45
    tx.description = "Groceries and snacks"
    services.transactions.update(tx)
    assert services.transactions.get_by_id(tx.id).amount == 45

    tx.type = "income"
    tx.category_id = "salary"
    with pytest.raises(ValidationError, match="type"):
        services.transactions.update(tx)
    assert services.transactions.get_by_id(tx.id).type == "expense"


def test_update_and_delete_unknown_id(services):
    tx = services.transactions.add(40, "Groceries", "expense", "2024-01-10", category_id="food")
    services.transactions.delete(tx.id)

    assert services.transactions.get_all() == []
    with pytest.raises(NotFoundError):
        services.transactions.delete(tx.id)
    with pytest.raises(NotFoundError):
        services.transactions.update(tx)


def test_search_and_recent(services):
    add = services.transactions.add
    add(3000, "Paycheck", "income", "2024-01-01", category_id="salary")
    add(40, "Weekly groceries", "expense", "2024-01-05", category_id="food", tags=["family"])
    add(60, "Concert tickets", "expense", "2024-02-10", category_id="entertainment")

    assert [t.description for t in services.transactions.search("GROCER")] == ["Weekly groceries"]
    assert [t.description for t in services.transactions.search("family")] == ["Weekly groceries"]
    assert [t.description for t in services.transactions.search("entertain")] == ["Concert tickets"]
    assert len(services.transactions.search(type_filter="expense")) == 2
    assert len(services.transactions.search(type_filter="all")) == 3
    january = DateRange(date(2024, 1, 1), date(2024, 1, 31))
    assert len(services.transactions.search(date_range=january, category_id="food")) == 1

    recent = services.transactions.recent(limit=2)
    assert [t.description for t in recent] == ["Concert tickets", "Weekly groceries"]
    assert [t.description for t in services.transactions.recent(type_filter="income")] == ["Paycheck"]
