from datetime import date, datetime
import calendar
from finance_tracker.utils.constants import DATE_FORMAT, MONTH_FORMAT

# ── Display date format options (preference values) ───────────────────────────

DATE_FORMAT_OPTIONS = ["MM/dd/yyyy", "dd/MM/yyyy", "yyyy-MM-dd"]

_STRFTIME_MAP = {
    "MM/dd/yyyy": "%m/%d/%Y",
    "dd/MM/yyyy": "%d/%m/%Y",
    "yyyy-MM-dd": "%Y-%m-%d",
}


def today() -> date:
    return date.today()


def today_str() -> str:
    return date.today().strftime(DATE_FORMAT)


def parse_date(date_str: str | None) -> date | None:
    """Parse an ISO date (or the date part of an ISO datetime), None on failure."""
    if not date_str:
        return None
    try:
        return date.fromisoformat(date_str[:10])
    except (TypeError, ValueError):
        return None


def is_iso_date(value) -> bool:
    """True for a strict YYYY-MM-DD string naming a real date."""
    if not isinstance(value, str) or len(value) != 10 or value[4] != "-" or value[7] != "-":
        return False
    return parse_date(value) is not None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def month_key(d: date) -> str:
    """Zero-padded 'YYYY-MM' key; sorts chronologically as a string."""
    return d.strftime(MONTH_FORMAT)


def month_range(month: int, year: int) -> tuple[date, date]:
    """Return (first_day, last_day) for a 0-based month index."""
    if not 0 <= month <= 11:
        raise ValueError(f"Invalid month index: {month}")
    last_day = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, 1), date(year, month + 1, last_day)


def year_range(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return min(day, max_day)


def add_months(d: date, n: int) -> date:
    """Add n months to date d, clamping day to month end."""
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = clamp_day_to_month(year, month, d.day)
    return d.replace(year=year, month=month, day=day)


def add_years(d: date, n: int) -> date:
    """Add n years to date d; Feb 29 becomes Feb 28 in non-leap years."""
    year = d.year + n
    return d.replace(year=year, day=clamp_day_to_month(year, d.month, d.day))


def format_display_date(date_str: str, fmt_key: str = "MM/dd/yyyy") -> str:
    """Convert a YYYY-MM-DD storage string to the user-facing display format."""
    d = parse_date(date_str)
    if d is None:
        return date_str
    return d.strftime(_STRFTIME_MAP.get(fmt_key, "%m/%d/%Y"))


def parse_display_date(display_str: str, fmt_key: str) -> date | None:
    """Parse a date in the given display format. Returns None on failure.

    Falls back to ISO 8601 parse if the display format doesn't match.
    """
    if not display_str:
        return None
    fmt = _STRFTIME_MAP.get(fmt_key, "%m/%d/%Y")
    try:
        return datetime.strptime(display_str.strip(), fmt).date()
    except ValueError:
        return parse_date(display_str.strip())
