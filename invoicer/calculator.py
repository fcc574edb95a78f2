"""Invoice money/tax calculator.

Pure functions shared by the draft preview, the stored invoice record and the
PDF renderer, so all three always show the same figures.

Order of operations::

    subtotal        = sum(quantity * unit_price)              (items, in order)
    items tax       = sum(item tax on each base amount)
    discount        = subtotal * discount / 100   | discount  (percentage | fixed)
    invoice tax     = (subtotal - discount) * tax / 100 | tax
    grand total     = subtotal - discount + items tax + invoice tax

Nothing here raises. Inputs coming straight from a half-typed form (``None``,
``""``, ``"abc"``, ``nan``, negative quantities) contribute zero instead. A fixed
discount larger than the subtotal is NOT clamped and yields a negative grand
total; refusing to persist such an invoice is the service's job.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from invoicer.models import parse_amount
from invoicer.models.invoice import AmountType, Invoice, ItemTax


class InvoiceTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    subtotal: float = 0.0
    discount_amount: float = 0.0
    items_tax_amount: float = 0.0
    invoice_tax_amount: float = 0.0
    tax_amount: float = 0.0  # items_tax_amount + invoice_tax_amount
    grand_total: float = 0.0


def _finite(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        parsed = parse_amount(value)
        return parsed if parsed is not None else 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _non_negative(value: Any) -> float:
    number = _finite(value)
    return number if number > 0 else 0.0


def _is_percentage(amount_type: Any) -> bool:
    # Anything that is not explicitly a percentage is applied as a fixed amount.
    return amount_type == AmountType.PERCENTAGE


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _item_tax(item: Any) -> tuple[float, Any]:
    """Return (rate, type) of an item's tax; rate 0.0 when the item has none."""
    tax = _field(item, "tax")
    if tax is None:
        return 0.0, None
    if isinstance(tax, ItemTax):
        return _non_negative(tax.rate), tax.type
    if isinstance(tax, Mapping):
        return _non_negative(tax.get("rate")), tax.get("type")
    # flat form: {"tax": 5, "tax_type": "percentage"}
    return _non_negative(tax), _field(item, "tax_type")


def _apply_rate(base: float, value: float, amount_type: Any) -> float:
    if not value:
        return 0.0
    if _is_percentage(amount_type):
        return (base * value) / 100
    return value


def item_base_amount(item: Any) -> float:
    # Two finite factors can still overflow.
    base = _non_negative(_field(item, "quantity")) * _non_negative(_field(item, "unit_price"))
    return base if math.isfinite(base) else 0.0


def item_tax_amount(item: Any) -> float:
    rate, amount_type = _item_tax(item)
    amount = _apply_rate(item_base_amount(item), rate, amount_type)
    return amount if math.isfinite(amount) else 0.0


def item_total(item: Any) -> float:
    return item_base_amount(item) + item_tax_amount(item)


# Explicit left-to-right folds: builtin sum() compensates float error on 3.12+,
# which would make results depend on the interpreter version.


def subtotal(items: Iterable[Any]) -> float:
    total = 0.0
    for item in items:
        total += item_base_amount(item)
    return total


def items_tax_total(items: Iterable[Any]) -> float:
    total = 0.0
    for item in items:
        total += item_tax_amount(item)
    return total


def discount_amount(subtotal: Any, discount: Any, discount_type: Any) -> float:
    return _apply_rate(_finite(subtotal), _non_negative(discount), discount_type)


def invoice_tax_amount(after_discount: Any, tax: Any, tax_type: Any) -> float:
    """Invoice-level tax on the discounted base. ``after_discount`` may be negative."""
    return _apply_rate(_finite(after_discount), _non_negative(tax), tax_type)


def compute_totals(
    items: Iterable[Any] | None,
    discount: Any = 0,
    discount_type: Any = AmountType.FIXED,
    tax: Any = 0,
    tax_type: Any = AmountType.PERCENTAGE,
) -> InvoiceTotals:
    """Single entry point for every invoice total shown or stored anywhere."""
    items = list(items) if items is not None else []
    sub = subtotal(items)
    items_tax = items_tax_total(items)
    disc = discount_amount(sub, discount, discount_type)
    invoice_tax = invoice_tax_amount(sub - disc, tax, tax_type)
    total_tax = items_tax + invoice_tax
    return InvoiceTotals(
        subtotal=sub,
        discount_amount=disc,
        items_tax_amount=items_tax,
        invoice_tax_amount=invoice_tax,
        tax_amount=total_tax,
        grand_total=sub - disc + total_tax,
    )


grand_total = compute_totals


def totals_for(invoice: Invoice) -> InvoiceTotals:
    """Recompute the breakdown of an invoice record from its items and settings."""
    return compute_totals(
        invoice.items,
        invoice.discount,
        invoice.discount_type,
        invoice.tax,
        invoice.tax_type,
    )


def apply_totals(invoice: Invoice) -> Invoice:
    """Return a copy of ``invoice`` with item totals and aggregates refreshed."""
    items = [item.model_copy(update={"total": item_total(item)}) for item in invoice.items]
    totals = compute_totals(items, invoice.discount, invoice.discount_type, invoice.tax, invoice.tax_type)
    return invoice.model_copy(
        update={
            "items": items,
            "subtotal": totals.subtotal,
            "items_tax_amount": totals.items_tax_amount,
            "invoice_tax_amount": totals.invoice_tax_amount,
            "grand_total": totals.grand_total,
        }
    )


def totals_match(invoice: Invoice, tolerance: float = 1e-9) -> bool:
    """Check a stored invoice's cached figures against a fresh computation."""
    fresh = totals_for(invoice)
    pairs = [
        (invoice.subtotal, fresh.subtotal),
        (invoice.items_tax_amount, fresh.items_tax_amount),
        (invoice.invoice_tax_amount, fresh.invoice_tax_amount),
        (invoice.grand_total, fresh.grand_total),
    ]
    pairs.extend((item.total, item_total(item)) for item in invoice.items)
    return all(abs(stored - computed) <= tolerance for stored, computed in pairs)
