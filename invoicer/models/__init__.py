import math
import re

from invoicer.constants import get_currency_symbol


def format_number(amount: float) -> str:
    """Format with two decimals and comma thousands: 1234.5 -> '1,234.50'"""
    return f"{amount:,.2f}"


def format_amount(amount: float, currency: str, show_symbol: bool = True) -> str:
    """Format an amount for display: ('USD', 1234.5) -> '$1,234.50' or '1,234.50 USD'."""
    formatted = format_number(amount)
    if show_symbol:
        return f"{get_currency_symbol(currency)}{formatted}"
    return f"{formatted} {currency}"


def parse_amount(text: str) -> float | None:
    """Parse a typed amount into a float. Returns None on invalid input.

    Accepts formats like '2850', '2850.50', '2,850.50'.
    """
    text = text.strip().replace(",", "")
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_RE = re.compile(r"^[\d\s+\-()]+$")


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def is_valid_phone(phone: str) -> bool:
    """Digits, spaces, '+', '-' and parentheses only, with at least 10 digits."""
    if not _PHONE_RE.match(phone):
        return False
    return sum(ch.isdigit() for ch in phone) >= 10
