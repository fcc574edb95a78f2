from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from ulid import ULID

from invoicer.models.client import Client
from invoicer.models.company import CompanyProfile
from invoicer.models.invoice import AmountType, Invoice, InvoiceItem, InvoiceStatus, ItemTax
from invoicer.repositories.base import (
    ClientRepository,
    CompanyProfileRepository,
    InvoiceRepository,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SQLAlchemyCompanyProfileRepository(CompanyProfileRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, profile: CompanyProfile) -> CompanyProfile:
        profile_id = str(ULID())
        now = _now()
        self.conn.execute(
            text(
                "INSERT INTO company_profiles (id, company_name, business_address, phone_number, "
                "email, website, logo_path, created_at, updated_at) "
                "VALUES (:id, :company_name, :business_address, :phone_number, "
                ":email, :website, :logo_path, :created_at, :updated_at)"
            ),
            {
                "id": profile_id,
                "company_name": profile.company_name,
                "business_address": profile.business_address,
                "phone_number": profile.phone_number,
                "email": profile.email,
                "website": profile.website,
                "logo_path": profile.logo_path,
                "created_at": now,
                "updated_at": now,
            },
        )
        self.conn.commit()
        result = self.get_by_id(profile_id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve company profile after create (id={profile_id})")
        return result

    @staticmethod
    def _build_profile(row: RowMapping) -> CompanyProfile:
        return CompanyProfile(
            id=row["id"],
            company_name=row["company_name"],
            business_address=row["business_address"],
            phone_number=row["phone_number"],
            email=row["email"],
            website=row["website"],
            logo_path=row["logo_path"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get_by_id(self, profile_id: str) -> CompanyProfile | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM company_profiles WHERE id = :id"),
                {"id": profile_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._build_profile(row)

    def list_all(self) -> list[CompanyProfile]:
        rows = (
            self.conn.execute(text("SELECT * FROM company_profiles ORDER BY created_at DESC, id DESC"))
            .mappings()
            .fetchall()
        )
        return [self._build_profile(row) for row in rows]

    def update(self, profile: CompanyProfile) -> CompanyProfile:
        if not profile.id:
            raise ValueError("Cannot update company profile without an id")
        self.conn.execute(
            text(
                "UPDATE company_profiles SET company_name = :company_name, "
                "business_address = :business_address, phone_number = :phone_number, "
                "email = :email, website = :website, logo_path = :logo_path, "
                "updated_at = :updated_at WHERE id = :id"
            ),
            {
                "company_name": profile.company_name,
                "business_address": profile.business_address,
                "phone_number": profile.phone_number,
                "email": profile.email,
                "website": profile.website,
                "logo_path": profile.logo_path,
                "updated_at": _now(),
                "id": profile.id,
            },
        )
        self.conn.commit()
        result = self.get_by_id(profile.id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve company profile after update (id={profile.id})")
        return result

    def delete(self, profile_id: str) -> None:
        self.conn.execute(text("DELETE FROM company_profiles WHERE id = :id"), {"id": profile_id})
        self.conn.commit()


class SQLAlchemyClientRepository(ClientRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, client: Client) -> Client:
        client_id = str(ULID())
        now = _now()
        self.conn.execute(
            text(
                "INSERT INTO clients (id, client_name, client_address, contact_number, email, "
                "created_at, updated_at) "
                "VALUES (:id, :client_name, :client_address, :contact_number, :email, "
                ":created_at, :updated_at)"
            ),
            {
                "id": client_id,
                "client_name": client.client_name,
                "client_address": client.client_address,
                "contact_number": client.contact_number,
                "email": client.email,
                "created_at": now,
                "updated_at": now,
            },
        )
        self.conn.commit()
        result = self.get_by_id(client_id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve client after create (id={client_id})")
        return result

    @staticmethod
    def _build_client(row: RowMapping) -> Client:
        return Client(
            id=row["id"],
            client_name=row["client_name"],
            client_address=row["client_address"],
            contact_number=row["contact_number"],
            email=row["email"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get_by_id(self, client_id: str) -> Client | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM clients WHERE id = :id"),
                {"id": client_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._build_client(row)

    def list_all(self) -> list[Client]:
        rows = self.conn.execute(text("SELECT * FROM clients ORDER BY client_name")).mappings().fetchall()
        return [self._build_client(row) for row in rows]

    def search(self, query: str) -> list[Client]:
        rows = (
            self.conn.execute(
                text(
                    "SELECT * FROM clients WHERE LOWER(client_name) LIKE :lower "
                    "OR LOWER(email) LIKE :lower OR contact_number LIKE :raw "
                    "ORDER BY client_name"
                ),
                {"lower": f"%{query.lower()}%", "raw": f"%{query}%"},
            )
            .mappings()
            .fetchall()
        )
        return [self._build_client(row) for row in rows]

    def update(self, client: Client) -> Client:
        if not client.id:
            raise ValueError("Cannot update client without an id")
        self.conn.execute(
            text(
                "UPDATE clients SET client_name = :client_name, client_address = :client_address, "
                "contact_number = :contact_number, email = :email, updated_at = :updated_at "
                "WHERE id = :id"
            ),
            {
                "client_name": client.client_name,
                "client_address": client.client_address,
                "contact_number": client.contact_number,
                "email": client.email,
                "updated_at": _now(),
                "id": client.id,
            },
        )
        self.conn.commit()
        result = self.get_by_id(client.id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve client after update (id={client.id})")
        return result

    def delete(self, client_id: str) -> None:
        self.conn.execute(text("DELETE FROM clients WHERE id = :id"), {"id": client_id})
        self.conn.commit()


class SQLAlchemyInvoiceRepository(InvoiceRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def _insert_items(self, invoice_id: str, items: list[InvoiceItem]) -> None:
        for i, item in enumerate(items):
            self.conn.execute(
                text(
                    "INSERT INTO invoice_items (id, invoice_id, product_service_name, description, "
                    "quantity, unit_price, tax_rate, tax_type, total, sort_order) "
                    "VALUES (:id, :invoice_id, :product_service_name, :description, "
                    ":quantity, :unit_price, :tax_rate, :tax_type, :total, :sort_order)"
                ),
                {
                    "id": item.id or str(ULID()),
                    "invoice_id": invoice_id,
                    "product_service_name": item.product_service_name,
                    "description": item.description,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "tax_rate": item.tax.rate if item.tax else None,
                    "tax_type": item.tax.type.value if item.tax else None,
                    "total": item.total,
                    "sort_order": i,
                },
            )

    def create(self, invoice: Invoice) -> Invoice:
        invoice_id = str(ULID())
        now = _now()
        self.conn.execute(
            text(
                "INSERT INTO invoices (id, invoice_number, issue_date, due_date, status, currency, "
                "client_id, company_snapshot, client_snapshot, subtotal, discount, discount_type, "
                "tax, tax_type, items_tax_amount, invoice_tax_amount, grand_total, notes, terms, "
                "pdf_path, created_at, updated_at) "
                "VALUES (:id, :invoice_number, :issue_date, :due_date, :status, :currency, "
                ":client_id, :company_snapshot, :client_snapshot, :subtotal, :discount, :discount_type, "
                ":tax, :tax_type, :items_tax_amount, :invoice_tax_amount, :grand_total, :notes, :terms, "
                ":pdf_path, :created_at, :updated_at)"
            ),
            {
                "id": invoice_id,
                **self._invoice_params(invoice),
                "pdf_path": invoice.pdf_path,
                "created_at": now,
                "updated_at": now,
            },
        )
        self._insert_items(invoice_id, invoice.items)
        self.conn.commit()
        result = self.get_by_id(invoice_id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve invoice after create (id={invoice_id})")
        return result

    @staticmethod
    def _invoice_params(invoice: Invoice) -> dict:
        return {
            "invoice_number": invoice.invoice_number,
            "issue_date": invoice.issue_date,
            "due_date": invoice.due_date,
            "status": invoice.status.value,
            "currency": invoice.currency,
            "client_id": invoice.client.id,
            "company_snapshot": invoice.company_profile.model_dump_json(),
            "client_snapshot": invoice.client.model_dump_json(),
            "subtotal": invoice.subtotal,
            "discount": invoice.discount,
            "discount_type": invoice.discount_type.value,
            "tax": invoice.tax,
            "tax_type": invoice.tax_type.value,
            "items_tax_amount": invoice.items_tax_amount,
            "invoice_tax_amount": invoice.invoice_tax_amount,
            "grand_total": invoice.grand_total,
            "notes": invoice.notes,
            "terms": invoice.terms,
        }

    @staticmethod
    def _build_item(item_row: RowMapping) -> InvoiceItem:
        tax = None
        if item_row["tax_rate"] is not None:
            tax = ItemTax(rate=item_row["tax_rate"], type=AmountType(item_row["tax_type"]))
        return InvoiceItem(
            id=item_row["id"],
            product_service_name=item_row["product_service_name"],
            description=item_row["description"],
            quantity=item_row["quantity"],
            unit_price=item_row["unit_price"],
            tax=tax,
            total=item_row["total"],
            sort_order=item_row["sort_order"],
        )

    @classmethod
    def _build_invoice(cls, row: RowMapping, item_rows: list[RowMapping]) -> Invoice:
        return Invoice(
            id=row["id"],
            invoice_number=row["invoice_number"],
            issue_date=row["issue_date"],
            due_date=row["due_date"],
            status=InvoiceStatus(row["status"]),
            currency=row["currency"],
            company_profile=CompanyProfile.model_validate_json(row["company_snapshot"]),
            client=Client.model_validate_json(row["client_snapshot"]),
            items=[cls._build_item(item_row) for item_row in item_rows],
            subtotal=row["subtotal"],
            discount=row["discount"],
            discount_type=AmountType(row["discount_type"]),
            tax=row["tax"],
            tax_type=AmountType(row["tax_type"]),
            items_tax_amount=row["items_tax_amount"],
            invoice_tax_amount=row["invoice_tax_amount"],
            grand_total=row["grand_total"],
            notes=row["notes"],
            terms=row["terms"],
            pdf_path=row["pdf_path"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _build_invoices_from_rows(self, rows: list[RowMapping]) -> list[Invoice]:
        if not rows:
            return []
        invoice_ids = [row["id"] for row in rows]
        placeholders = ", ".join(f":id{i}" for i in range(len(invoice_ids)))
        params = {f"id{i}": iid for i, iid in enumerate(invoice_ids)}
        all_items = (
            self.conn.execute(
                text(f"SELECT * FROM invoice_items WHERE invoice_id IN ({placeholders}) ORDER BY sort_order"),
                params,
            )
            .mappings()
            .fetchall()
        )
        items_by_invoice: dict[str, list[RowMapping]] = {}
        for item_row in all_items:
            items_by_invoice.setdefault(item_row["invoice_id"], []).append(item_row)
        return [self._build_invoice(row, items_by_invoice.get(row["id"], [])) for row in rows]

    def get_by_id(self, invoice_id: str) -> Invoice | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM invoices WHERE id = :id"),
                {"id": invoice_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        items = (
            self.conn.execute(
                text("SELECT * FROM invoice_items WHERE invoice_id = :invoice_id ORDER BY sort_order"),
                {"invoice_id": invoice_id},
            )
            .mappings()
            .fetchall()
        )
        return self._build_invoice(row, list(items))

    def list_all(self) -> list[Invoice]:
        rows = (
            self.conn.execute(text("SELECT * FROM invoices ORDER BY issue_date DESC, created_at DESC"))
            .mappings()
            .fetchall()
        )
        return self._build_invoices_from_rows(list(rows))

    def list_by_status(self, status: InvoiceStatus) -> list[Invoice]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM invoices WHERE status = :status ORDER BY issue_date DESC, created_at DESC"),
                {"status": status.value},
            )
            .mappings()
            .fetchall()
        )
        return self._build_invoices_from_rows(list(rows))

    def list_by_client(self, client_id: str) -> list[Invoice]:
        rows = (
            self.conn.execute(
                text(
                    "SELECT * FROM invoices WHERE client_id = :client_id "
                    "ORDER BY issue_date DESC, created_at DESC"
                ),
                {"client_id": client_id},
            )
            .mappings()
            .fetchall()
        )
        return self._build_invoices_from_rows(list(rows))

    def update(self, invoice: Invoice) -> Invoice:
        if not invoice.id:
            raise ValueError("Cannot update invoice without an id")
        self.conn.execute(
            text(
                "UPDATE invoices SET invoice_number = :invoice_number, issue_date = :issue_date, "
                "due_date = :due_date, status = :status, currency = :currency, client_id = :client_id, "
                "company_snapshot = :company_snapshot, client_snapshot = :client_snapshot, "
                "subtotal = :subtotal, discount = :discount, discount_type = :discount_type, "
                "tax = :tax, tax_type = :tax_type, items_tax_amount = :items_tax_amount, "
                "invoice_tax_amount = :invoice_tax_amount, grand_total = :grand_total, "
                "notes = :notes, terms = :terms, updated_at = :updated_at WHERE id = :id"
            ),
            {**self._invoice_params(invoice), "updated_at": _now(), "id": invoice.id},
        )
        self.conn.execute(
            text("DELETE FROM invoice_items WHERE invoice_id = :invoice_id"),
            {"invoice_id": invoice.id},
        )
        self._insert_items(invoice.id, invoice.items)
        self.conn.commit()
        result = self.get_by_id(invoice.id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve invoice after update (id={invoice.id})")
        return result

    def update_status(self, invoice_id: str, status: InvoiceStatus) -> None:
        self.conn.execute(
            text("UPDATE invoices SET status = :status, updated_at = :updated_at WHERE id = :id"),
            {"status": status.value, "updated_at": _now(), "id": invoice_id},
        )
        self.conn.commit()

    def update_pdf_path(self, invoice_id: str, pdf_path: str) -> None:
        self.conn.execute(
            text("UPDATE invoices SET pdf_path = :pdf_path WHERE id = :id"),
            {"pdf_path": pdf_path, "id": invoice_id},
        )
        self.conn.commit()

    def delete(self, invoice_id: str) -> None:
        self.conn.execute(
            text("DELETE FROM invoice_items WHERE invoice_id = :invoice_id"),
            {"invoice_id": invoice_id},
        )
        self.conn.execute(text("DELETE FROM invoices WHERE id = :id"), {"id": invoice_id})
        self.conn.commit()

    def next_invoice_counter(self, start: int) -> int:
        row = self.conn.execute(text("SELECT value FROM invoice_counter WHERE id = 1")).mappings().fetchone()
        if row is None:
            value = start + 1
            self.conn.execute(
                text("INSERT INTO invoice_counter (id, value) VALUES (1, :value)"),
                {"value": value},
            )
        else:
            value = row["value"] + 1
            self.conn.execute(
                text("UPDATE invoice_counter SET value = :value WHERE id = 1"),
                {"value": value},
            )
        self.conn.commit()
        return value
