from dataclasses import dataclass

from finance_tracker.utils.constants import DEFAULT_PREFERENCES

_FIELD_KEYS = {
    "theme_mode": "themeMode",
    "currency": "currency",
    "date_format": "dateFormat",
    "notifications": "notifications",
    "auto_categorization": "autoCategorization",
}


@dataclass
class UserPreferences:
    theme_mode: str = DEFAULT_PREFERENCES["themeMode"]          # 'light' | 'dark' | 'system'
    currency: str = DEFAULT_PREFERENCES["currency"]             # ISO currency code
    date_format: str = DEFAULT_PREFERENCES["dateFormat"]
    notifications: bool = DEFAULT_PREFERENCES["notifications"]
    auto_categorization: bool = DEFAULT_PREFERENCES["autoCategorization"]

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for attr, key in _FIELD_KEYS.items()}

    @classmethod
    def from_dict(cls, data: dict) -> "UserPreferences":
        """Stored keys win; anything missing, or a non-boolean flag, falls back
        to the defaults."""
        merged = {**DEFAULT_PREFERENCES, **data}
        for key in ("notifications", "autoCategorization"):
            if not isinstance(merged[key], bool):
                merged[key] = DEFAULT_PREFERENCES[key]
        return cls(**{attr: merged[key] for attr, key in _FIELD_KEYS.items()})

    @staticmethod
    def field_names() -> list[str]:
        return list(_FIELD_KEYS)
