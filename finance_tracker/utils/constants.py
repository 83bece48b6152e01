APP_NAME = "Finance Tracker"
DB_FILE = "finance_tracker.db"
SCHEMA_VERSION = "1.0.0"

# Storage record keys
FINANCE_DATA_KEY = "finance-tracker-data"
USER_PREFS_KEY = "finance-tracker-prefs"
UNDO_STACK_KEY = "finance-tracker-undo"
REDO_STACK_KEY = "finance-tracker-redo"

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"
MAX_HISTORY_SIZE = 50
RECURRING_CHECK_INTERVAL = 24 * 60 * 60  # seconds
UPCOMING_REMINDER_DAYS = 7

ANOMALY_MIN_PREVIOUS_AMOUNT = 10
ANOMALY_MIN_INCREASE_PCT = 50

TRANSACTION_TYPES = ["income", "expense"]
FREQUENCIES = ["daily", "weekly", "monthly", "yearly"]
THEME_MODES = ["light", "dark", "system"]

DEFAULT_CATEGORIES = [
    {"id": "salary",         "name": "Salary",         "type": "income",  "color": "#4CAF50"},
    {"id": "freelance",      "name": "Freelance",      "type": "income",  "color": "#8BC34A"},
    {"id": "gift",           "name": "Gifts",          "type": "income",  "color": "#CDDC39"},
    {"id": "other-income",   "name": "Other Income",   "type": "income",  "color": "#FFC107"},
    {"id": "housing",        "name": "Housing",        "type": "expense", "color": "#F44336"},
    {"id": "food",           "name": "Food",           "type": "expense", "color": "#FF5722"},
    {"id": "transportation", "name": "Transportation", "type": "expense", "color": "#FF9800"},
    {"id": "utilities",      "name": "Utilities",      "type": "expense", "color": "#9C27B0"},
    {"id": "healthcare",     "name": "Healthcare",     "type": "expense", "color": "#3F51B5"},
    {"id": "entertainment",  "name": "Entertainment",  "type": "expense", "color": "#2196F3"},
    {"id": "shopping",       "name": "Shopping",       "type": "expense", "color": "#009688"},
    {"id": "other-expense",  "name": "Other Expenses", "type": "expense", "color": "#795548"},
]

DEFAULT_PREFERENCES = {
    "themeMode": "system",
    "currency": "USD",
    "dateFormat": "MM/dd/yyyy",
    "notifications": True,
    "autoCategorization": True,
}

# Fallback category per transaction type when no keyword matches
DEFAULT_CATEGORY_IDS = {
    "income": "other-income",
    "expense": "other-expense",
}

CATEGORY_KEYWORDS = {
    "salary":         ("salary", "wage", "paycheck", "pay"),
    "freelance":      ("freelance", "contract", "gig", "client"),
    "gift":           ("gift", "present", "donation"),
    "housing":        ("rent", "mortgage", "housing", "apartment", "house"),
    "food":           ("grocery", "restaurant", "food", "meal", "dinner", "lunch"),
    "transportation": ("gas", "fuel", "car", "bus", "train", "uber", "lyft", "taxi"),
    "utilities":      ("electric", "water", "gas", "internet", "phone", "utility", "bill"),
    "healthcare":     ("doctor", "hospital", "medical", "medicine", "pharmacy", "health"),
    "entertainment":  ("movie", "game", "concert", "netflix", "spotify", "subscription"),
    "shopping":       ("amazon", "walmart", "target", "shop", "store", "buy"),
}

CSV_HEADERS = [
    "id", "date", "type", "category", "description",
    "amount", "tags", "recurring", "receiptURL",
]
