from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from typing import Any

from invoicer import calculator
from invoicer.calculator import InvoiceTotals
from invoicer.constants import SUPPORTED_CURRENCIES, format_invoice_number, parse_iso_date, today_iso
from invoicer.models.client import Client
from invoicer.models.company import CompanyProfile
from invoicer.models.invoice import AmountType, Invoice, InvoiceItem, InvoiceStatus
from invoicer.models.summary import ClientSummary, DashboardSummary
from invoicer.pdf.invoice import InvoicePDF
from invoicer.repositories.base import InvoiceRepository
from invoicer.settings import settings
from invoicer.storage.base import StorageBackend

logger = logging.getLogger(__name__)


def _storage_key(invoice_id: str) -> str:
    prefix = settings.storage_prefix
    if prefix:
        return f"{prefix}/{invoice_id}.pdf"
    return f"{invoice_id}.pdf"


def validate_invoice(invoice: Invoice) -> None:
    """Raise ValueError if ``invoice`` must not be persisted.

    Expects totals already applied with ``calculator.apply_totals``.
    """
    if not invoice.items:
        raise ValueError("Invoice must have at least one item")
    if not invoice.invoice_number.strip():
        raise ValueError("Invoice number is required")
    if parse_iso_date(invoice.issue_date) is None:
        raise ValueError(f"Invalid issue date: {invoice.issue_date!r}")
    if parse_iso_date(invoice.due_date) is None:
        raise ValueError(f"Invalid due date: {invoice.due_date!r}")
    if invoice.currency not in SUPPORTED_CURRENCIES:
        raise ValueError(f"Unsupported currency: {invoice.currency}")
    for name, value in (("Discount", invoice.discount), ("Tax", invoice.tax)):
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"{name} must be a non-negative number")
    if not math.isfinite(invoice.grand_total):
        raise ValueError("Invoice amounts are too large to total")
    if invoice.grand_total < 0:
        raise ValueError("Discount exceeds the invoice subtotal; grand total would be negative")


class InvoiceService:
    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        storage: StorageBackend,
        pdf_generator: InvoicePDF | None = None,
    ) -> None:
        self.invoice_repo = invoice_repo
        self.storage = storage
        self.pdf_generator = pdf_generator or InvoicePDF()

    @staticmethod
    def preview_totals(
        items: Iterable[Any],
        discount: Any,
        discount_type: Any,
        tax: Any,
        tax_type: Any,
    ) -> InvoiceTotals:
        """Live totals for a draft that is still being edited. Never raises."""
        return calculator.compute_totals(items, discount, discount_type, tax, tax_type)

    def next_invoice_number(self) -> str:
        counter = self.invoice_repo.next_invoice_counter(settings.invoice_number_start)
        return format_invoice_number(counter)

    def create_invoice(
        self,
        company: CompanyProfile,
        client: Client,
        items: list[InvoiceItem],
        *,
        issue_date: str = "",
        due_date: str = "",
        currency: str = "",
        discount: float = 0.0,
        discount_type: AmountType = AmountType.PERCENTAGE,
        tax: float = 0.0,
        tax_type: AmountType = AmountType.PERCENTAGE,
        notes: str = "",
        terms: str = "",
        invoice_number: str = "",
        status: InvoiceStatus = InvoiceStatus.DRAFT,
    ) -> Invoice:
        issue_date = issue_date or today_iso()
        invoice = Invoice(
            invoice_number=invoice_number,
            issue_date=issue_date,
            due_date=due_date or issue_date,
            status=status,
            currency=currency or settings.default_currency,
            # Snapshots: later edits to the master records must not alter this invoice.
            company_profile=company.model_copy(deep=True),
            client=client.model_copy(deep=True),
            items=[item.model_copy(update={"sort_order": i}) for i, item in enumerate(items)],
            discount=discount,
            discount_type=discount_type,
            tax=tax,
            tax_type=tax_type,
            notes=notes,
            terms=terms,
        )
        invoice = calculator.apply_totals(invoice)
        # Validate before drawing a number so a rejected draft does not burn one.
        validate_invoice(invoice.model_copy(update={"invoice_number": invoice.invoice_number or "pending"}))
        if not invoice.invoice_number:
            invoice.invoice_number = self.next_invoice_number()

        result = self.invoice_repo.create(invoice)
        logger.info(
            "Invoice created: id=%s, number=%s, client=%s, total=%.2f",
            result.id,
            result.invoice_number,
            result.client.client_name,
            result.grand_total,
        )
        return result

    def update_invoice(self, invoice: Invoice) -> Invoice:
        invoice = calculator.apply_totals(invoice)
        validate_invoice(invoice)
        result = self.invoice_repo.update(invoice)
        logger.info("Invoice updated: id=%s, total=%.2f", result.id, result.grand_total)
        return result

    def update_status(self, invoice: Invoice, status: InvoiceStatus) -> Invoice:
        if not invoice.id:
            raise ValueError("Cannot update status of an invoice without an id")
        self.invoice_repo.update_status(invoice.id, status)
        logger.info("Invoice %s status %s -> %s", invoice.id, invoice.status.value, status.value)
        invoice.status = status
        return invoice

    def duplicate_invoice(self, invoice: Invoice) -> Invoice:
        """Create a fresh Draft with the same parties, items and pricing."""
        copy = invoice.model_copy(
            update={
                "id": "",
                "invoice_number": "",
                "issue_date": today_iso(),
                "due_date": today_iso(),
                "status": InvoiceStatus.DRAFT,
                "pdf_path": None,
                "created_at": None,
                "updated_at": None,
                "items": [item.model_copy(update={"id": ""}) for item in invoice.items],
            },
            deep=True,
        )
        copy = calculator.apply_totals(copy)
        validate_invoice(copy.model_copy(update={"invoice_number": "pending"}))
        copy.invoice_number = self.next_invoice_number()
        result = self.invoice_repo.create(copy)
        logger.info("Invoice %s duplicated as %s (%s)", invoice.id, result.id, result.invoice_number)
        return result

    def delete_invoice(self, invoice_id: str) -> None:
        self.invoice_repo.delete(invoice_id)
        self.storage.delete(_storage_key(invoice_id))
        logger.info("Invoice %s deleted", invoice_id)

    def get_invoice(self, invoice_id: str) -> Invoice | None:
        result = self.invoice_repo.get_by_id(invoice_id)
        logger.debug("get_invoice id=%s found=%s", invoice_id, result is not None)
        return result

    def list_invoices(self) -> list[Invoice]:
        result = self.invoice_repo.list_all()
        logger.debug("Listed %d invoices", len(result))
        return result

    def list_by_status(self, status: InvoiceStatus) -> list[Invoice]:
        return self.invoice_repo.list_by_status(status)

    def list_by_client(self, client_id: str) -> list[Invoice]:
        return self.invoice_repo.list_by_client(client_id)

    def search_invoices(self, query: str) -> list[Invoice]:
        """Match on invoice number or client name, case-insensitively."""
        invoices = self.invoice_repo.list_all()
        needle = query.strip().lower()
        if not needle:
            return invoices
        return [
            inv
            for inv in invoices
            if needle in inv.invoice_number.lower() or needle in inv.client.client_name.lower()
        ]

    def client_summary(self, client_id: str) -> ClientSummary:
        invoices = self.invoice_repo.list_by_client(client_id)
        total_amount = sum(inv.grand_total for inv in invoices)
        paid_amount = sum(inv.grand_total for inv in invoices if inv.status == InvoiceStatus.PAID)
        return ClientSummary(
            total_invoices=len(invoices),
            total_amount=total_amount,
            paid_amount=paid_amount,
            pending_amount=total_amount - paid_amount,
        )

    def dashboard_summary(self) -> DashboardSummary:
        invoices = self.invoice_repo.list_all()
        unpaid = [inv for inv in invoices if inv.status != InvoiceStatus.PAID]
        return DashboardSummary(
            total_invoices=len(invoices),
            unpaid_count=len(unpaid),
            outstanding_amount=sum(inv.grand_total for inv in unpaid),
            overdue_count=sum(1 for inv in unpaid if inv.is_overdue),
        )

    def export_pdf(self, invoice: Invoice, template: str = "") -> str:
        """Render the invoice document, store it and return the stored path."""
        if not invoice.id:
            raise ValueError("Cannot export an invoice without an id")
        template = template or settings.pdf_template
        pdf_bytes = self.pdf_generator.generate(invoice, template=template)

        key = _storage_key(invoice.id)
        path = self.storage.save(key, pdf_bytes)
        self.invoice_repo.update_pdf_path(invoice.id, path)
        invoice.pdf_path = path
        logger.info("PDF stored at %s for invoice %s (template=%s)", key, invoice.invoice_number, template)
        return path

    def get_document_url(self, invoice: Invoice) -> str:
        if not invoice.pdf_path or not invoice.id:
            return ""
        return self.storage.get_url(_storage_key(invoice.id))
