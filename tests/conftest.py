"""Root conftest: in-memory SQLite engine and fixtures for the full schema."""

from __future__ import annotations

import pytest
from sqlalchemy import Connection, create_engine, event, text
from sqlalchemy.engine import Engine

from invoicer.models.client import Client
from invoicer.models.company import CompanyProfile
from invoicer.models.invoice import AmountType, Invoice, InvoiceItem, ItemTax

# Matches Alembic head: 3f1c9a7d2b10 (initial schema)
SCHEMA_DDL = """
CREATE TABLE company_profiles (
    id VARCHAR(26) PRIMARY KEY,
    company_name TEXT NOT NULL,
    business_address TEXT NOT NULL,
    phone_number TEXT NOT NULL,
    email TEXT NOT NULL,
    website TEXT NOT NULL DEFAULT '',
    logo_path TEXT NOT NULL DEFAULT '',
    created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE clients (
    id VARCHAR(26) PRIMARY KEY,
    client_name TEXT NOT NULL,
    client_address TEXT NOT NULL,
    contact_number TEXT NOT NULL,
    email TEXT NOT NULL,
    created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE invoices (
    id VARCHAR(26) PRIMARY KEY,
    invoice_number VARCHAR(50) NOT NULL,
    issue_date VARCHAR(10) NOT NULL,
    due_date VARCHAR(10) NOT NULL,
    status VARCHAR(10) NOT NULL DEFAULT 'Draft',
    currency VARCHAR(3) NOT NULL,
    client_id VARCHAR(26) NOT NULL,
    company_snapshot TEXT NOT NULL,
    client_snapshot TEXT NOT NULL,
    subtotal DOUBLE NOT NULL DEFAULT 0,
    discount DOUBLE NOT NULL DEFAULT 0,
    discount_type VARCHAR(10) NOT NULL,
    tax DOUBLE NOT NULL DEFAULT 0,
    tax_type VARCHAR(10) NOT NULL,
    items_tax_amount DOUBLE NOT NULL DEFAULT 0,
    invoice_tax_amount DOUBLE NOT NULL DEFAULT 0,
    grand_total DOUBLE NOT NULL DEFAULT 0,
    notes TEXT NOT NULL DEFAULT '',
    terms TEXT NOT NULL DEFAULT '',
    pdf_path TEXT,
    created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX ix_invoices_client_id ON invoices (client_id);
CREATE INDEX ix_invoices_status ON invoices (status);

CREATE TABLE invoice_items (
    id VARCHAR(26) PRIMARY KEY,
    invoice_id VARCHAR(26) NOT NULL REFERENCES invoices(id) ON DELETE CASCADE,
    product_service_name TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    quantity DOUBLE NOT NULL,
    unit_price DOUBLE NOT NULL,
    tax_rate DOUBLE,
    tax_type VARCHAR(10),
    total DOUBLE NOT NULL DEFAULT 0,
    sort_order INTEGER NOT NULL DEFAULT 0,
    CONSTRAINT ck_invoice_items_tax_pair CHECK ((tax_rate IS NULL) = (tax_type IS NULL))
);

CREATE INDEX ix_invoice_items_invoice_id ON invoice_items (invoice_id);

CREATE TABLE invoice_counter (
    id INTEGER PRIMARY KEY,
    value INTEGER NOT NULL
)
"""


@pytest.fixture()
def db_engine() -> Engine:
    engine = create_engine("sqlite:///:memory:")

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    return engine


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()
    yield conn
    conn.close()


def _sample_company(**overrides) -> CompanyProfile:
    defaults = dict(
        company_name="Acme Studio",
        business_address="12 Market Street, Springfield",
        phone_number="+1 (555) 010-2030",
        email="billing@acme.test",
        website="https://acme.test",
    )
    defaults.update(overrides)
    return CompanyProfile(**defaults)


def _sample_client(**overrides) -> Client:
    defaults = dict(
        id="01HCLIENT0000000000000000",
        client_name="Globex Corp",
        client_address="500 Oak Avenue, Shelbyville",
        contact_number="555-123-4567",
        email="ap@globex.test",
    )
    defaults.update(overrides)
    return Client(**defaults)


def _sample_invoice(**overrides) -> Invoice:
    defaults = dict(
        invoice_number="INV-1001",
        issue_date="2025-03-01",
        due_date="2025-03-31",
        currency="USD",
        company_profile=_sample_company(),
        client=_sample_client(),
        items=[
            InvoiceItem(
                product_service_name="Website design",
                description="Landing page",
                quantity=1,
                unit_price=1000,
                total=1000,
                sort_order=0,
            ),
            InvoiceItem(
                product_service_name="Hosting",
                quantity=2,
                unit_price=50,
                tax=ItemTax(rate=10, type=AmountType.PERCENTAGE),
                total=110,
                sort_order=1,
            ),
        ],
        subtotal=1100,
        discount=10,
        discount_type=AmountType.PERCENTAGE,
        tax=5,
        tax_type=AmountType.PERCENTAGE,
        items_tax_amount=10,
        invoice_tax_amount=49.5,
        grand_total=1049.5,
        notes="Thanks!",
        terms="Net 30",
    )
    defaults.update(overrides)
    return Invoice(**defaults)


@pytest.fixture()
def sample_company():
    return _sample_company


@pytest.fixture()
def sample_client():
    return _sample_client


@pytest.fixture()
def sample_invoice():
    return _sample_invoice
