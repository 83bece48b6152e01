import pytest

from finance_tracker.services.category_service import category_id_for
from finance_tracker.services.errors import CategoryInUseError, ErrorKind, NotFoundError, ValidationError


def test_default_categories_on_first_run(services):
    cats = services.categories.get_all()

    assert len(cats) == 12
    assert {c.id for c in services.categories.get_by_type("income")} == {
        "salary", "freelance", "gift", "other-income",
    }


def test_create_derives_id_from_name(services):
    cat = services.categories.create("  Pet  Care ", "expense", "#A1B2C3")

    assert cat.id == "pet-care"
    assert cat.name == "Pet  Care"
    assert services.categories.get_by_id("pet-care") == cat
    assert category_id_for("Side   Hustle") == "side-hustle"


@pytest.mark.parametrize(
    "name, type_, color",
    [
        ("", "expense", "#FFFFFF"),
        ("Food", "expense", "#FFFFFF"),
        ("Pets", "transfer", "#FFFFFF"),
        ("Pets", "expense", "red"),
        ("Pets", "expense", "#12345"),
    ],
)
def test_create_rejects_invalid_categories(services, name, type_, color):
    with pytest.raises(ValidationError):
        services.categories.create(name, type_, color)
    assert len(services.categories.get_all()) == 12


def test_update_category(services):
    cat = services.categories.get_by_id("food")
    cat.name = "Food & Dining"
    cat.color = "#fff"

    services.categories.update(cat)

    assert services.categories.resolve_name("food") == "Food & Dining"

    cat.name = "Housing"
    with pytest.raises(ValidationError):
        services.categories.update(cat)


def test_delete_unused_category(services):
    services.categories.delete("gift")
    assert services.categories.get_by_id("gift") is None
    with pytest.raises(NotFoundError):
        services.categories.delete("gift")


def test_delete_referenced_category_is_rejected(services):
    services.transactions.add(40, "Groceries", "expense", "2024-01-10", category_id="food")
    before = services.store.state
    undo_depth = services.store.history_depth[0]

    with pytest.raises(CategoryInUseError) as excinfo:
        services.categories.delete("food")

    assert excinfo.value.kind is ErrorKind.CATEGORY_IN_USE
    assert excinfo.value.count == 1
    assert "reassign" in str(excinfo.value)
    assert services.store.state == before
    assert services.store.history_depth[0] == undo_depth


def test_resolve_unknown_name(services):
    assert services.categories.resolve_name("ghost") == "Unknown"
