import re

from finance_tracker.models.category import Category
from finance_tracker.models.finance_state import FinanceState
from finance_tracker.services.errors import CategoryInUseError, NotFoundError, ValidationError
from finance_tracker.services.finance_store import FinanceStore
from finance_tracker.utils.constants import TRANSACTION_TYPES
from finance_tracker.utils.logging_setup import get_logger

logger = get_logger(__name__)

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")
UNKNOWN_CATEGORY = "Unknown"


def category_id_for(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())


class CategoryService:
    def __init__(self, store: FinanceStore):
        self._store = store

    def get_all(self) -> list[Category]:
        return self._store.categories

    def get_by_type(self, type_: str) -> list[Category]:
        return [c for c in self._store.categories if c.type == type_]

    def get_by_id(self, category_id: str) -> Category | None:
        return self._store.get_category_by_id(category_id)

    def resolve_name(self, category_id: str) -> str:
        cat = self.get_by_id(category_id)
        return cat.name if cat else UNKNOWN_CATEGORY

    def create(self, name: str, type_: str, color: str, icon: str | None = None) -> Category:
        name = name.strip()
        self._validate(name, type_, color)
        category = Category(id=category_id_for(name), name=name, type=type_, color=color, icon=icon)

        def _create(state: FinanceState) -> FinanceState:
            if any(c.name.lower() == name.lower() or c.id == category.id for c in state.categories):
                raise ValidationError(f"A category named '{name}' already exists.")
            state.categories.append(category)
            return state

        self._store.mutate(_create)
        return category

    def update(self, category: Category) -> Category:
        category.name = category.name.strip()
        self._validate(category.name, category.type, category.color)

        def _update(state: FinanceState) -> FinanceState:
            if state.get_category(category.id) is None:
                raise NotFoundError(f"Category {category.id} does not exist.")
            others = [c for c in state.categories if c.id != category.id]
            if any(c.name.lower() == category.name.lower() for c in others):
                raise ValidationError(f"A category named '{category.name}' already exists.")
            state.categories = [category if c.id == category.id else c for c in state.categories]
            return state

        self._store.mutate(_update)
        return category

    def delete(self, category_id: str):
        """Remove a category; rejected while any transaction references it."""

        def _delete(state: FinanceState) -> FinanceState:
            if state.get_category(category_id) is None:
                raise NotFoundError(f"Category {category_id} does not exist.")
            in_use = sum(1 for t in state.transactions if t.category_id == category_id)
            if in_use:
                logger.info("Refusing to delete category %s used by %d transaction(s)", category_id, in_use)
                raise CategoryInUseError(category_id, in_use)
            state.categories = [c for c in state.categories if c.id != category_id]
            return state

        self._store.mutate(_delete)

    def _validate(self, name: str, type_: str, color: str):
        if not name:
            raise ValidationError("Category name cannot be empty.")
        if type_ not in TRANSACTION_TYPES:
            raise ValidationError("Type must be income or expense.")
        if not _HEX_COLOR.match(color or ""):
            raise ValidationError(f"Invalid color: {color}. Use a hex value like #4CAF50.")
