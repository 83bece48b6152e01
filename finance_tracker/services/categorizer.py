"""Keyword heuristic mapping a transaction description to a category id.

``KeywordCategorizer`` is the default implementation of the ``Categorizer``
protocol; callers depend on the protocol so a smarter classifier can be
dropped in.
"""
from typing import Iterable, Mapping, Optional, Protocol

from finance_tracker.models.category import Category
from finance_tracker.utils.constants import CATEGORY_KEYWORDS, DEFAULT_CATEGORY_IDS


class Categorizer(Protocol):
    def suggest(
        self,
        description: str,
        amount: float,
        type_: str,
        categories: Iterable[Category],
    ) -> Optional[str]:
        ...


class KeywordCategorizer:
    def __init__(
        self,
        keywords: Mapping[str, Iterable[str]] = CATEGORY_KEYWORDS,
        fallbacks: Mapping[str, str] = DEFAULT_CATEGORY_IDS,
    ):
        self._keywords = {cat_id: tuple(k.lower() for k in kws) for cat_id, kws in keywords.items()}
        self._fallbacks = dict(fallbacks)

    def suggest(
        self,
        description: str,
        amount: float,
        type_: str,
        categories: Iterable[Category],
    ) -> Optional[str]:
        """First category of ``type_`` (in list order) with a keyword hit,
        else the type's fallback category if present, else None.

        ``amount`` is accepted for interface compatibility and not used.
        """
        candidates = [c for c in categories if c.type == type_]
        text = (description or "").lower()
        for category in candidates:
            if any(kw in text for kw in self._keywords.get(category.id, ())):
                return category.id
        fallback = self._fallbacks.get(type_)
        if any(c.id == fallback for c in candidates):
            return fallback
        return None


_default = KeywordCategorizer()


def suggest_category(
    description: str,
    amount: float,
    type_: str,
    categories: Iterable[Category],
) -> Optional[str]:
    return _default.suggest(description, amount, type_, categories)
