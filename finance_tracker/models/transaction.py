from dataclasses import dataclass, field
from typing import Optional

from finance_tracker.utils.constants import FREQUENCIES, TRANSACTION_TYPES
from finance_tracker.utils.date_helpers import is_iso_date


def _check_date(owner: str, key: str, value, optional: bool = False):
    if value is None and optional:
        return None
    if not is_iso_date(value):
        raise ValueError(f"{owner}: {key} must be a YYYY-MM-DD date, got {value!r}")
    return value


def _check_optional_str(owner: str, key: str, value):
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{owner}: {key} must be a string, got {value!r}")
    return value


@dataclass
class RecurringInfo:
    frequency: str                        # 'daily' | 'weekly' | 'monthly' | 'yearly'
    end_date: Optional[str] = None        # 'YYYY-MM-DD', None = forever
    last_processed: Optional[str] = None  # 'YYYY-MM-DD'

    def to_dict(self) -> dict:
        data = {"frequency": self.frequency}
        if self.end_date:
            data["endDate"] = self.end_date
        if self.last_processed:
            data["lastProcessed"] = self.last_processed
        return data

    @classmethod
    def from_dict(cls, data: dict, owner: str = "recurring") -> "RecurringInfo":
        if not isinstance(data, dict):
            raise ValueError(f"{owner}: recurring must be an object, got {data!r}")
        frequency = data["frequency"]
        if frequency not in FREQUENCIES:
            raise ValueError(f"{owner}: invalid frequency {frequency!r}")
        return cls(
            frequency=frequency,
            end_date=_check_date(owner, "endDate", data.get("endDate") or None, optional=True),
            last_processed=_check_date(owner, "lastProcessed", data.get("lastProcessed") or None, optional=True),
        )


@dataclass
class Transaction:
    id: str
    amount: float
    description: str
    date: str               # 'YYYY-MM-DD'
    type: str               # 'income' | 'expense'
    category_id: str
    recurring: Optional[RecurringInfo] = None
    receipt_url: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    template_id: Optional[str] = None   # set on instances produced by the recurring generator

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "amount": self.amount,
            "description": self.description,
            "date": self.date,
            "type": self.type,
            "categoryId": self.category_id,
        }
        if self.recurring is not None:
            data["recurring"] = self.recurring.to_dict()
        if self.receipt_url:
            data["receiptURL"] = self.receipt_url
        if self.tags:
            data["tags"] = list(self.tags)
        if self.template_id:
            data["templateId"] = self.template_id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        """Build from a stored or imported record.

        Raises KeyError for a missing field and ValueError for a field of the
        wrong type or out of range.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Transaction must be an object, got {data!r}")
        tx_id = str(data["id"])
        owner = f"Transaction {tx_id}"

        amount = data["amount"]
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount <= 0:
            raise ValueError(f"{owner}: amount must be a positive number, got {amount!r}")
        if data["type"] not in TRANSACTION_TYPES:
            raise ValueError(f"{owner}: type must be income or expense, got {data['type']!r}")
        description = data.get("description", "")
        if not isinstance(description, str):
            raise ValueError(f"{owner}: description must be a string, got {description!r}")
        category_id = data["categoryId"]
        if not isinstance(category_id, str):
            raise ValueError(f"{owner}: categoryId must be a string, got {category_id!r}")
        tags = data.get("tags") or []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise ValueError(f"{owner}: tags must be a list of strings, got {tags!r}")

        recurring = data.get("recurring")
        return cls(
            id=tx_id,
            amount=float(amount),
            description=description,
            date=_check_date(owner, "date", data["date"]),
            type=data["type"],
            category_id=category_id,
            recurring=RecurringInfo.from_dict(recurring, owner) if recurring else None,
            receipt_url=_check_optional_str(owner, "receiptURL", data.get("receiptURL")),
            tags=list(tags),
            template_id=_check_optional_str(owner, "templateId", data.get("templateId")),
        )
