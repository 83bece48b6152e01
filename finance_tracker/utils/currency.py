_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "CAD": "CA$",
    "AUD": "A$",
}


def format_currency(amount: float, currency: str = "USD") -> str:
    """Format a float as currency string, e.g. '$1,234.56'."""
    symbol = _SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_signed(amount: float, currency: str = "USD") -> str:
    """Format with +/- sign."""
    sign = "+" if amount >= 0 else "-"
    return sign + format_currency(abs(amount), currency)


def format_amount(amount: float) -> str:
    """Plain number for export: '100' for whole amounts, '12.5' otherwise."""
    value = float(amount)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_percentage(value: float) -> str:
    return f"{value:+.1f}%"
