import copy
from dataclasses import dataclass, field

from finance_tracker.models.category import Category
from finance_tracker.models.transaction import Transaction
from finance_tracker.utils.constants import DEFAULT_CATEGORIES, SCHEMA_VERSION

REQUIRED_KEYS = ("transactions", "categories", "version")


@dataclass
class FinanceState:
    """The persisted aggregate and the unit of undo/redo snapshots."""

    transactions: list[Transaction] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    version: str = SCHEMA_VERSION

    @classmethod
    def default(cls) -> "FinanceState":
        return cls(
            transactions=[],
            categories=[Category.from_dict(c) for c in DEFAULT_CATEGORIES],
            version=SCHEMA_VERSION,
        )

    def copy(self) -> "FinanceState":
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        return {
            "transactions": [t.to_dict() for t in self.transactions],
            "categories": [c.to_dict() for c in self.categories],
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FinanceState":
        """Raises KeyError/TypeError/ValueError on a malformed record."""
        if not isinstance(data, dict):
            raise TypeError("Finance data must be a JSON object")
        missing = [k for k in REQUIRED_KEYS if data.get(k) in (None, "")]
        if missing:
            raise KeyError(f"Missing finance data keys: {', '.join(missing)}")
        for key in ("transactions", "categories"):
            if not isinstance(data[key], list):
                raise ValueError(f"{key} must be a list, got {type(data[key]).__name__}")
        return cls(
            transactions=[Transaction.from_dict(t) for t in data["transactions"]],
            categories=[Category.from_dict(c) for c in data["categories"]],
            version=str(data["version"]),
        )

    def get_transaction(self, tx_id: str) -> Transaction | None:
        return next((t for t in self.transactions if t.id == tx_id), None)

    def get_category(self, category_id: str) -> Category | None:
        return next((c for c in self.categories if c.id == category_id), None)
