from finance_tracker.models.category import Category
from finance_tracker.models.finance_state import FinanceState
from finance_tracker.services.categorizer import KeywordCategorizer, suggest_category


def _categories():
    return FinanceState.default().categories


def test_keyword_match_is_case_insensitive():
    assert suggest_category("Monthly SALARY deposit", 3000, "income", _categories()) == "salary"
    assert suggest_category("Dinner at Luigi's", 45, "expense", _categories()) == "food"


def test_only_categories_of_the_same_type_are_considered():
    # "gift" is an income category; as an expense the text falls through
    assert suggest_category("gift for mom", 30, "expense", _categories()) == "other-expense"


def test_first_matching_category_in_list_order_wins():
    # "gas" is a keyword of both transportation and utilities
    assert suggest_category("Gas station", 50, "expense", _categories()) == "transportation"

    reordered = sorted(_categories(), key=lambda c: c.id != "utilities")
    assert suggest_category("Gas station", 50, "expense", reordered) == "utilities"


def test_fallback_to_default_category():
    assert suggest_category("zzz", 1, "income", _categories()) == "other-income"
    assert suggest_category("zzz", 1, "expense", _categories()) == "other-expense"


def test_no_suggestion_without_fallback_category():
    cats = [Category("food", "Food", "expense", "#FF5722")]
    assert suggest_category("zzz", 1, "expense", cats) is None
    assert suggest_category("lunch", 1, "income", cats) is None


def test_custom_keyword_table():
    categorizer = KeywordCategorizer(keywords={"pets": ["vet", "kibble"]})
    cats = [Category("pets", "Pets", "expense", "#123456")]

    assert categorizer.suggest("VET visit", 80, "expense", cats) == "pets"
