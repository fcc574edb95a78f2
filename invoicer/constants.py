from datetime import date, datetime

INVOICE_NUMBER_PREFIX = "INV-"

# code -> (name, symbol)
SUPPORTED_CURRENCIES = {
    "USD": ("US Dollar", "$"),
    "EUR": ("Euro", "€"),
    "GBP": ("British Pound", "£"),
    "PKR": ("Pakistani Rupee", "₨"),
    "INR": ("Indian Rupee", "₹"),
    "AED": ("UAE Dirham", "د.إ"),
    "SAR": ("Saudi Riyal", "﷼"),
    "CAD": ("Canadian Dollar", "C$"),
    "AUD": ("Australian Dollar", "A$"),
    "JPY": ("Japanese Yen", "¥"),
    "CNY": ("Chinese Yuan", "¥"),
    "CHF": ("Swiss Franc", "Fr"),
    "SGD": ("Singapore Dollar", "S$"),
    "NZD": ("New Zealand Dollar", "NZ$"),
    "MXN": ("Mexican Peso", "$"),
    "BRL": ("Brazilian Real", "R$"),
}

PDF_TEMPLATES = ("classic", "modern", "minimalist")


def get_currency_symbol(code: str) -> str:
    """Return the display symbol for a currency code, or the code itself when unknown."""
    entry = SUPPORTED_CURRENCIES.get(code)
    return entry[1] if entry else code


def format_invoice_number(counter: int) -> str:
    return f"{INVOICE_NUMBER_PREFIX}{counter}"


def today_iso() -> str:
    return date.today().isoformat()


def parse_iso_date(value: str) -> date | None:
    """Parse 'YYYY-MM-DD' (or a full ISO timestamp). Returns None on invalid input."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None
