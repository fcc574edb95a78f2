from __future__ import annotations

import questionary
from pydantic import ValidationError
from rich.console import Console

from invoicer.models import parse_amount
from invoicer.models.invoice import AmountType

console = Console()

AMOUNT_TYPE_CHOICES = {
    "Percentage (%)": AmountType.PERCENTAGE,
    "Fixed amount": AmountType.FIXED,
}


def ask_number(message: str, default: str = "", positive: bool = False) -> float:
    """Prompt until the answer parses as a non-negative number (strictly positive if asked)."""
    while True:
        answer = questionary.text(message, default=default).ask()
        value = parse_amount(answer or "")
        if value is not None and (value > 0 if positive else value >= 0):
            return value
        console.print("[red]Invalid number. Try again.[/red]")


def ask_amount_type(message: str, default: AmountType | None = None) -> AmountType:
    labels = {value: label for label, value in AMOUNT_TYPE_CHOICES.items()}
    choice = questionary.select(message, choices=list(AMOUNT_TYPE_CHOICES), default=labels.get(default)).ask()
    return AMOUNT_TYPE_CHOICES.get(choice, AmountType.PERCENTAGE)


def error_message(exc: ValueError) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(err["msg"] for err in exc.errors())
    return str(exc)
