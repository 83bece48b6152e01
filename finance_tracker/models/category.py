from dataclasses import dataclass
from typing import Optional

from finance_tracker.utils.constants import TRANSACTION_TYPES


@dataclass
class Category:
    id: str
    name: str
    type: str               # 'income' | 'expense'
    color: str = "#888888"
    icon: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"id": self.id, "name": self.name, "type": self.type, "color": self.color}
        if self.icon:
            data["icon"] = self.icon
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Category":
        if not isinstance(data, dict):
            raise ValueError(f"Category must be an object, got {data!r}")
        cat_id = str(data["id"])
        if not isinstance(data["name"], str):
            raise ValueError(f"Category {cat_id}: name must be a string, got {data['name']!r}")
        if data["type"] not in TRANSACTION_TYPES:
            raise ValueError(f"Category {cat_id}: type must be income or expense, got {data['type']!r}")
        color = data.get("color", "#888888")
        if not isinstance(color, str):
            raise ValueError(f"Category {cat_id}: color must be a string, got {color!r}")
        return cls(
            id=cat_id,
            name=data["name"],
            type=data["type"],
            color=color,
            icon=data.get("icon"),
        )
