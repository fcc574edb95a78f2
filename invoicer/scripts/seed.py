"""Seed the database with demo data for local development.

Usage:
    python -m invoicer.scripts.seed
"""

from __future__ import annotations

import random
from datetime import date, timedelta

from faker import Faker
from rich.console import Console
from rich.table import Table
from sqlalchemy import Connection, text

from invoicer.db import initialize_db, open_connection
from invoicer.logging import configure_logging, reconfigure
from invoicer.models import format_amount
from invoicer.models.company import CompanyProfile
from invoicer.models.invoice import AmountType, InvoiceItem, InvoiceStatus, ItemTax
from invoicer.repositories.factory import (
    get_client_repository,
    get_company_profile_repository,
    get_invoice_repository,
)
from invoicer.services.client_service import ClientService
from invoicer.services.company_service import CompanyService
from invoicer.services.invoice_service import InvoiceService
from invoicer.storage.factory import get_storage

console = Console()
fake = Faker("en_US")

NUM_CLIENTS = 8
INVOICES_PER_CLIENT = (1, 4)

TABLES_TO_CLEAR = [
    "invoice_items",
    "invoices",
    "invoice_counter",
    "clients",
    "company_profiles",
]

# (name, description, unit_price, item tax or None)
CATALOG = [
    ("Website design", "Landing page and two inner pages", 1800.0, None),
    ("Hosting", "12 months, shared plan", 240.0, ItemTax(rate=8, type=AmountType.PERCENTAGE)),
    ("Consulting", "Hourly rate", 120.0, None),
    ("Logo package", "Three concepts, two revisions", 650.0, ItemTax(rate=25, type=AmountType.FIXED)),
    ("SEO audit", "", 400.0, None),
    ("Maintenance", "Monthly retainer", 300.0, ItemTax(rate=5, type=AmountType.PERCENTAGE)),
    ("Copywriting", "Per page", 90.0, None),
]

NOTES = [
    "",
    "",
    "Payment by bank transfer.",
    "Thank you for the quick turnaround.",
    "",
    "Includes the change requests from last week.",
]


def _phone() -> str:
    return fake.numerify("+1 (###) ###-####")


def _clear_all(conn: Connection) -> None:
    console.print("\n[yellow]Clearing all tables...[/yellow]")
    for table in TABLES_TO_CLEAR:
        conn.execute(text(f"DELETE FROM {table}"))  # noqa: S608
        console.print(f"  Cleared [dim]{table}[/dim]")
    conn.commit()
    console.print("[green]All tables cleared.[/green]\n")


def _create_company(company_service: CompanyService) -> CompanyProfile:
    console.print("[cyan]Creating company profile...[/cyan]")
    company = company_service.save_profile(
        CompanyProfile(
            company_name=fake.company(),
            business_address=fake.address().replace("\n", ", "),
            phone_number=_phone(),
            email=fake.company_email(),
            website=fake.url(),
        )
    )
    console.print(f"  Company: {company.company_name} (id={company.id})\n")
    return company


def _random_items() -> list[InvoiceItem]:
    picks = random.sample(CATALOG, k=random.randint(1, 4))
    return [
        InvoiceItem(
            product_service_name=name,
            description=description,
            quantity=random.choice([1, 1, 2, 3, 5, 10]),
            unit_price=price,
            tax=tax,
        )
        for name, description, price, tax in picks
    ]


def main() -> None:
    configure_logging()
    initialize_db()
    reconfigure()
    with open_connection() as conn:
        _clear_all(conn)

        company_service = CompanyService(get_company_profile_repository(conn))
        client_service = ClientService(get_client_repository(conn))
        invoice_service = InvoiceService(get_invoice_repository(conn), get_storage())

        company = _create_company(company_service)

        console.print("[cyan]Creating clients and invoices...[/cyan]")
        table = Table(title="Seeded invoices")
        table.add_column("Number", style="bold")
        table.add_column("Client")
        table.add_column("Status")
        table.add_column("Total", justify="right")

        for _ in range(NUM_CLIENTS):
            client = client_service.create_client(
                fake.name(),
                fake.address().replace("\n", ", "),
                _phone(),
                fake.email(),
            )
            for _ in range(random.randint(*INVOICES_PER_CLIENT)):
                issued = date.today() - timedelta(days=random.randint(0, 90))
                discount_type = random.choice([AmountType.PERCENTAGE, AmountType.FIXED])
                invoice = invoice_service.create_invoice(
                    company,
                    client,
                    _random_items(),
                    issue_date=issued.isoformat(),
                    due_date=(issued + timedelta(days=30)).isoformat(),
                    discount=random.choice([0, 0, 5, 10]),
                    discount_type=discount_type,
                    tax=random.choice([0, 7.5, 10]),
                    tax_type=AmountType.PERCENTAGE,
                    notes=random.choice(NOTES),
                    status=random.choice(list(InvoiceStatus)),
                )
                table.add_row(
                    invoice.invoice_number,
                    client.client_name,
                    invoice.status.value,
                    format_amount(invoice.grand_total, invoice.currency),
                )

        console.print()
        console.print(table)
        console.print("\n[bold green]Seed complete.[/bold green]")


if __name__ == "__main__":
    main()
