from __future__ import annotations

import questionary
from rich.console import Console
from sqlalchemy import Connection

from invoicer.cli.client_menu import list_clients_menu
from invoicer.cli.company_menu import company_profile_menu
from invoicer.cli.invoice_menu import create_invoice_menu, list_invoices_menu
from invoicer.models import format_amount
from invoicer.repositories.factory import (
    get_client_repository,
    get_company_profile_repository,
    get_invoice_repository,
)
from invoicer.services.client_service import ClientService
from invoicer.services.company_service import CompanyService
from invoicer.services.invoice_service import InvoiceService
from invoicer.settings import settings
from invoicer.storage.factory import get_storage

console = Console()


def _build_services(conn: Connection) -> tuple[CompanyService, ClientService, InvoiceService]:
    return (
        CompanyService(get_company_profile_repository(conn)),
        ClientService(get_client_repository(conn)),
        InvoiceService(get_invoice_repository(conn), get_storage()),
    )


def _print_dashboard(invoice_service: InvoiceService) -> None:
    summary = invoice_service.dashboard_summary()
    console.print(
        f"Invoices: {summary.total_invoices} | Unpaid: {summary.unpaid_count} | "
        f"Outstanding: {format_amount(summary.outstanding_amount, settings.default_currency)} | "
        f"Overdue: [red]{summary.overdue_count}[/red]"
    )


def main_menu(conn: Connection) -> None:
    company_service, client_service, invoice_service = _build_services(conn)

    console.print()
    console.print("[bold]Invoice Generator[/bold]", style="cyan")
    console.print()

    while True:
        _print_dashboard(invoice_service)
        choice = questionary.select(
            "Main Menu",
            choices=[
                "List Invoices",
                "New Invoice",
                "Clients",
                "Company Profile",
                "Exit",
            ],
        ).ask()

        if choice is None or choice == "Exit":
            console.print("[bold]Goodbye![/bold]")
            break
        elif choice == "List Invoices":
            list_invoices_menu(invoice_service)
        elif choice == "New Invoice":
            create_invoice_menu(company_service, client_service, invoice_service)
        elif choice == "Clients":
            list_clients_menu(client_service, invoice_service)
        elif choice == "Company Profile":
            company_profile_menu(company_service)
