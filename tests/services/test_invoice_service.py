from unittest.mock import MagicMock, patch

import pytest
from freezegun import freeze_time

from invoicer.models.invoice import AmountType, InvoiceItem, InvoiceStatus, ItemTax
from invoicer.services.invoice_service import InvoiceService, _storage_key, validate_invoice


def _items():
    return [
        InvoiceItem(product_service_name="Design", quantity=2, unit_price=100),
        InvoiceItem(product_service_name="Hosting", quantity=1, unit_price=50, tax=ItemTax(rate=10)),
    ]


class TestStorageKey:
    def test_with_prefix(self):
        with patch("invoicer.services.invoice_service.settings") as mock_settings:
            mock_settings.storage_prefix = "invoices"
            assert _storage_key("inv-id") == "invoices/inv-id.pdf"

    def test_without_prefix(self):
        with patch("invoicer.services.invoice_service.settings") as mock_settings:
            mock_settings.storage_prefix = ""
            assert _storage_key("inv-id") == "inv-id.pdf"


class TestValidateInvoice:
    def test_valid(self, sample_invoice):
        validate_invoice(sample_invoice())

    def test_no_items(self, sample_invoice):
        with pytest.raises(ValueError, match="at least one item"):
            validate_invoice(sample_invoice(items=[]))

    def test_missing_number(self, sample_invoice):
        with pytest.raises(ValueError, match="number is required"):
            validate_invoice(sample_invoice(invoice_number="  "))

    def test_bad_issue_date(self, sample_invoice):
        with pytest.raises(ValueError, match="Invalid issue date"):
            validate_invoice(sample_invoice(issue_date="03/01/2025"))

    def test_bad_due_date(self, sample_invoice):
        with pytest.raises(ValueError, match="Invalid due date"):
            validate_invoice(sample_invoice(due_date=""))

    def test_unsupported_currency(self, sample_invoice):
        with pytest.raises(ValueError, match="Unsupported currency"):
            validate_invoice(sample_invoice(currency="XYZ"))

    def test_negative_discount(self, sample_invoice):
        with pytest.raises(ValueError, match="Discount must be a non-negative number"):
            validate_invoice(sample_invoice(discount=-1))

    def test_nan_tax(self, sample_invoice):
        with pytest.raises(ValueError, match="Tax must be a non-negative number"):
            validate_invoice(sample_invoice(tax=float("nan")))

    def test_negative_grand_total(self, sample_invoice):
        with pytest.raises(ValueError, match="grand total would be negative"):
            validate_invoice(sample_invoice(grand_total=-15))

    def test_infinite_grand_total(self, sample_invoice):
        with pytest.raises(ValueError, match="too large to total"):
            validate_invoice(sample_invoice(grand_total=float("inf")))


class TestInvoiceService:
    def setup_method(self):
        self.mock_repo = MagicMock()
        self.mock_storage = MagicMock()
        self.mock_pdf = MagicMock()
        self.service = InvoiceService(self.mock_repo, self.mock_storage, self.mock_pdf)
        self.mock_repo.create.side_effect = lambda inv: inv.model_copy(update={"id": "inv-1"})
        self.mock_repo.update.side_effect = lambda inv: inv
        self.mock_repo.next_invoice_counter.return_value = 1001

    def test_preview_totals(self):
        totals = InvoiceService.preview_totals(_items(), 10, AmountType.PERCENTAGE, 5, AmountType.PERCENTAGE)
        assert totals.subtotal == 250
        assert totals.discount_amount == 25
        assert totals.items_tax_amount == 5
        assert totals.invoice_tax_amount == 11.25
        assert totals.grand_total == 241.25

    def test_preview_totals_never_raises(self):
        totals = InvoiceService.preview_totals([{"quantity": "", "unit_price": "1"}], "x", None, None, "?")
        assert totals.grand_total == 0

    def test_next_invoice_number(self):
        with patch("invoicer.services.invoice_service.settings") as mock_settings:
            mock_settings.invoice_number_start = 1000
            assert self.service.next_invoice_number() == "INV-1001"
        self.mock_repo.next_invoice_counter.assert_called_once_with(1000)

    @freeze_time("2025-05-01")
    def test_create_invoice(self, sample_company, sample_client):
        result = self.service.create_invoice(
            sample_company(),
            sample_client(),
            _items(),
            discount=10,
            discount_type=AmountType.PERCENTAGE,
            tax=5,
            tax_type=AmountType.PERCENTAGE,
            currency="EUR",
        )

        self.mock_repo.create.assert_called_once()
        assert result.id == "inv-1"
        assert result.invoice_number == "INV-1001"
        assert result.issue_date == "2025-05-01"
        assert result.due_date == "2025-05-01"
        assert result.currency == "EUR"
        assert result.status == InvoiceStatus.DRAFT
        assert result.subtotal == 250
        assert result.items_tax_amount == 5
        assert result.invoice_tax_amount == 11.25
        assert result.grand_total == 241.25
        assert [item.total for item in result.items] == [200, 55]
        assert [item.sort_order for item in result.items] == [0, 1]

    def test_create_invoice_uses_default_currency(self, sample_company, sample_client):
        with patch("invoicer.services.invoice_service.settings") as mock_settings:
            mock_settings.default_currency = "GBP"
            mock_settings.invoice_number_start = 1000
            result = self.service.create_invoice(sample_company(), sample_client(), _items())
        assert result.currency == "GBP"

    def test_create_invoice_keeps_given_number(self, sample_company, sample_client):
        result = self.service.create_invoice(
            sample_company(), sample_client(), _items(), invoice_number="CUSTOM-7"
        )
        assert result.invoice_number == "CUSTOM-7"
        self.mock_repo.next_invoice_counter.assert_not_called()

    def test_create_invoice_snapshots_are_copies(self, sample_company, sample_client):
        company = sample_company()
        client = sample_client()
        result = self.service.create_invoice(company, client, _items())
        client.client_name = "Renamed"
        assert result.client.client_name == "Globex Corp"
        assert result.client is not client
        assert result.company_profile is not company

    def test_create_invoice_rejects_negative_total_without_burning_number(self, sample_company, sample_client):
        with pytest.raises(ValueError, match="grand total would be negative"):
            self.service.create_invoice(
                sample_company(),
                sample_client(),
                [InvoiceItem(product_service_name="Tiny", quantity=1, unit_price=5)],
                discount=20,
                discount_type=AmountType.FIXED,
            )
        self.mock_repo.next_invoice_counter.assert_not_called()
        self.mock_repo.create.assert_not_called()

    def test_create_invoice_rejects_empty_items(self, sample_company, sample_client):
        with pytest.raises(ValueError, match="at least one item"):
            self.service.create_invoice(sample_company(), sample_client(), [])
        self.mock_repo.create.assert_not_called()

    def test_update_invoice_recomputes(self, sample_invoice):
        invoice = sample_invoice(id="inv-1", discount=0, grand_total=0)
        result = self.service.update_invoice(invoice)
        self.mock_repo.update.assert_called_once()
        assert result.grand_total == 1100 + 10 + 55

    def test_update_invoice_rejects_invalid(self, sample_invoice):
        with pytest.raises(ValueError):
            self.service.update_invoice(sample_invoice(id="inv-1", discount=5000, discount_type=AmountType.FIXED))
        self.mock_repo.update.assert_not_called()

    def test_update_invoice_rejects_overflowing_total(self, sample_invoice):
        huge = [
            InvoiceItem(product_service_name="A", quantity=1, unit_price=1e308),
            InvoiceItem(product_service_name="B", quantity=1, unit_price=1e308),
        ]
        with pytest.raises(ValueError, match="too large to total"):
            self.service.update_invoice(sample_invoice(id="inv-1", items=huge, discount=0))
        self.mock_repo.update.assert_not_called()

    def test_update_status(self, sample_invoice):
        invoice = sample_invoice(id="inv-1")
        result = self.service.update_status(invoice, InvoiceStatus.PAID)
        self.mock_repo.update_status.assert_called_once_with("inv-1", InvoiceStatus.PAID)
        assert result.status == InvoiceStatus.PAID

    def test_update_status_without_id(self, sample_invoice):
        with pytest.raises(ValueError):
            self.service.update_status(sample_invoice(), InvoiceStatus.PAID)

    @freeze_time("2025-06-10")
    def test_duplicate_invoice(self, sample_invoice):
        original = sample_invoice(id="orig", status=InvoiceStatus.PAID, pdf_path="/x.pdf")
        original.items[0].id = "item-1"
        result = self.service.duplicate_invoice(original)

        created = self.mock_repo.create.call_args[0][0]
        assert created.id == ""
        assert created.pdf_path is None
        assert all(item.id == "" for item in created.items)
        assert result.invoice_number == "INV-1001"
        assert result.status == InvoiceStatus.DRAFT
        assert result.issue_date == "2025-06-10"
        assert result.grand_total == original.grand_total
        assert original.items[0].id == "item-1"

    def test_delete_invoice(self):
        with patch("invoicer.services.invoice_service.settings") as mock_settings:
            mock_settings.storage_prefix = "invoices"
            self.service.delete_invoice("inv-1")
        self.mock_repo.delete.assert_called_once_with("inv-1")
        self.mock_storage.delete.assert_called_once_with("invoices/inv-1.pdf")

    def test_get_invoice(self):
        self.mock_repo.get_by_id.return_value = None
        assert self.service.get_invoice("x") is None
        self.mock_repo.get_by_id.assert_called_once_with("x")

    def test_list_by_status(self):
        self.mock_repo.list_by_status.return_value = []
        self.service.list_by_status(InvoiceStatus.SENT)
        self.mock_repo.list_by_status.assert_called_once_with(InvoiceStatus.SENT)

    def test_list_by_client(self):
        self.mock_repo.list_by_client.return_value = []
        self.service.list_by_client("c1")
        self.mock_repo.list_by_client.assert_called_once_with("c1")

    def test_search_invoices(self, sample_invoice, sample_client):
        a = sample_invoice(invoice_number="INV-1001")
        b = sample_invoice(invoice_number="INV-2002", client=sample_client(client_name="Initech"))
        self.mock_repo.list_all.return_value = [a, b]
        assert self.service.search_invoices("") == [a, b]
        assert self.service.search_invoices("2002") == [b]
        assert self.service.search_invoices("globex") == [a]
        assert self.service.search_invoices("nothing") == []

    def test_client_summary(self, sample_invoice):
        self.mock_repo.list_by_client.return_value = [
            sample_invoice(grand_total=100, status=InvoiceStatus.PAID),
            sample_invoice(grand_total=50, status=InvoiceStatus.SENT),
        ]
        summary = self.service.client_summary("c1")
        assert summary.total_invoices == 2
        assert summary.total_amount == 150
        assert summary.paid_amount == 100
        assert summary.pending_amount == 50

    @freeze_time("2025-04-15")
    def test_dashboard_summary(self, sample_invoice):
        self.mock_repo.list_all.return_value = [
            sample_invoice(grand_total=100, status=InvoiceStatus.PAID, due_date="2025-01-01"),
            sample_invoice(grand_total=50, status=InvoiceStatus.SENT, due_date="2025-03-31"),
            sample_invoice(grand_total=25, status=InvoiceStatus.DRAFT, due_date="2025-05-01"),
        ]
        summary = self.service.dashboard_summary()
        assert summary.total_invoices == 3
        assert summary.unpaid_count == 2
        assert summary.outstanding_amount == 75
        assert summary.overdue_count == 1

    def test_export_pdf(self, sample_invoice):
        self.mock_pdf.generate.return_value = b"%PDF-fake"
        self.mock_storage.save.return_value = "/stored/inv-1.pdf"
        invoice = sample_invoice(id="inv-1")

        with patch("invoicer.services.invoice_service.settings") as mock_settings:
            mock_settings.storage_prefix = "invoices"
            mock_settings.pdf_template = "modern"
            path = self.service.export_pdf(invoice)

        assert path == "/stored/inv-1.pdf"
        self.mock_pdf.generate.assert_called_once_with(invoice, template="modern")
        self.mock_storage.save.assert_called_once_with("invoices/inv-1.pdf", b"%PDF-fake")
        self.mock_repo.update_pdf_path.assert_called_once_with("inv-1", "/stored/inv-1.pdf")
        assert invoice.pdf_path == "/stored/inv-1.pdf"

    def test_export_pdf_explicit_template(self, sample_invoice):
        self.mock_pdf.generate.return_value = b"%PDF-fake"
        invoice = sample_invoice(id="inv-1")
        self.service.export_pdf(invoice, template="minimalist")
        assert self.mock_pdf.generate.call_args.kwargs["template"] == "minimalist"

    def test_export_pdf_without_id(self, sample_invoice):
        with pytest.raises(ValueError):
            self.service.export_pdf(sample_invoice())

    def test_get_document_url(self, sample_invoice):
        self.mock_storage.get_url.return_value = "/stored/inv-1.pdf"
        assert self.service.get_document_url(sample_invoice(id="inv-1", pdf_path="/stored/inv-1.pdf")) == (
            "/stored/inv-1.pdf"
        )

    def test_get_document_url_not_exported(self, sample_invoice):
        assert self.service.get_document_url(sample_invoice(id="inv-1")) == ""

    def test_default_pdf_generator(self):
        from invoicer.pdf.invoice import InvoicePDF

        service = InvoiceService(self.mock_repo, self.mock_storage)
        assert isinstance(service.pdf_generator, InvoicePDF)
