from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from invoicer.constants import parse_iso_date
from invoicer.models.client import Client
from invoicer.models.company import CompanyProfile


class AmountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class InvoiceStatus(str, Enum):
    DRAFT = "Draft"
    SENT = "Sent"
    PAID = "Paid"
    OVERDUE = "Overdue"
    FINAL = "Final"


class ItemTax(BaseModel):
    """Item-level tax: a rate (percentage) or an absolute amount (fixed)."""

    rate: float = Field(ge=0)
    type: AmountType = AmountType.PERCENTAGE


class InvoiceItem(BaseModel):
    id: str = ""
    product_service_name: str = Field(min_length=1)
    description: str = ""
    quantity: float = Field(gt=0)
    unit_price: float = Field(ge=0)
    tax: ItemTax | None = None
    total: float = 0.0  # base + item tax, refreshed by calculator.apply_totals
    sort_order: int = 0


class Invoice(BaseModel):
    id: str = ""
    invoice_number: str = ""
    issue_date: str = ""  # 'YYYY-MM-DD'
    due_date: str = ""  # 'YYYY-MM-DD'
    status: InvoiceStatus = InvoiceStatus.DRAFT
    currency: str = "USD"
    company_profile: CompanyProfile
    client: Client
    items: list[InvoiceItem] = []
    subtotal: float = 0.0
    discount: float = 0.0
    discount_type: AmountType = AmountType.PERCENTAGE
    tax: float = 0.0  # user-entered invoice-level rate/amount
    tax_type: AmountType = AmountType.PERCENTAGE
    items_tax_amount: float = 0.0
    invoice_tax_amount: float = 0.0
    grand_total: float = 0.0
    notes: str = ""
    terms: str = ""
    pdf_path: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def discount_amount(self) -> float:
        from invoicer.calculator import discount_amount

        return discount_amount(self.subtotal, self.discount, self.discount_type)

    @property
    def tax_amount(self) -> float:
        return self.items_tax_amount + self.invoice_tax_amount

    @property
    def is_overdue(self) -> bool:
        if self.status == InvoiceStatus.PAID:
            return False
        due = parse_iso_date(self.due_date)
        if due is None:
            return False
        return due < date.today()

    @property
    def days_until_due(self) -> int | None:
        due = parse_iso_date(self.due_date)
        if due is None:
            return None
        return (due - date.today()).days
