from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from invoicer.cli.prompts import error_message
from invoicer.models import format_amount
from invoicer.models.client import Client
from invoicer.services.client_service import ClientService
from invoicer.services.invoice_service import InvoiceService
from invoicer.settings import settings

console = Console()


def _ask_client_fields(current: Client | None = None) -> dict[str, str]:
    return {
        "client_name": questionary.text("Client name:", default=current.client_name if current else "").ask() or "",
        "client_address": questionary.text("Address:", default=current.client_address if current else "").ask()
        or "",
        "contact_number": questionary.text("Contact number:", default=current.contact_number if current else "").ask()
        or "",
        "email": questionary.text("Email:", default=current.email if current else "").ask() or "",
    }


def create_client_menu(client_service: ClientService) -> Client | None:
    console.print()
    console.print("[bold]New Client[/bold]", style="cyan")
    fields = _ask_client_fields()
    try:
        client = client_service.create_client(**fields)
    except ValueError as exc:
        console.print(f"[red]Client not saved: {error_message(exc)}[/red]")
        return None
    console.print(f"[green]Client {client.client_name} saved.[/green]")
    return client


def list_clients_menu(client_service: ClientService, invoice_service: InvoiceService) -> None:
    query = ""
    while True:
        clients = client_service.search_clients(query)

        if clients:
            table = Table(title="Clients")
            table.add_column("Name", style="bold")
            table.add_column("Email")
            table.add_column("Contact")
            for c in clients:
                table.add_row(c.client_name, c.email, c.contact_number)
            console.print()
            console.print(table)
            console.print()
        else:
            console.print("[yellow]No clients found.[/yellow]")

        client_choices = {f"{c.client_name} <{c.email}>": c for c in clients}
        choice = questionary.select(
            "Clients",
            choices=["Add client", "Search"] + list(client_choices) + ["Back"],
        ).ask()

        if choice is None or choice == "Back":
            return
        elif choice == "Add client":
            create_client_menu(client_service)
        elif choice == "Search":
            query = questionary.text("Search (name, email or phone):").ask() or ""
        else:
            _client_detail_menu(client_choices[choice], client_service, invoice_service)


def _client_detail_menu(client: Client, client_service: ClientService, invoice_service: InvoiceService) -> None:
    while True:
        summary = invoice_service.client_summary(client.id)
        currency = settings.default_currency
        console.print()
        console.print(f"[bold]{client.client_name}[/bold]")
        console.print(f"  {client.client_address}")
        console.print(f"  {client.contact_number} | {client.email}")
        console.print(
            f"  Invoices: {summary.total_invoices} | "
            f"Billed: {format_amount(summary.total_amount, currency)} | "
            f"Paid: {format_amount(summary.paid_amount, currency)} | "
            f"Pending: {format_amount(summary.pending_amount, currency)}"
        )
        console.print()

        choice = questionary.select("Action:", choices=["Edit", "Delete", "Back"]).ask()

        if choice is None or choice == "Back":
            return
        elif choice == "Edit":
            updated = client.model_copy(update=_ask_client_fields(client))
            try:
                client = client_service.update_client(updated)
            except ValueError as exc:
                console.print(f"[red]Client not updated: {error_message(exc)}[/red]")
                continue
            console.print("[green]Client updated.[/green]")
        elif choice == "Delete":
            confirm = questionary.confirm(
                f"Delete {client.client_name}? Existing invoices keep their copy.",
                default=False,
            ).ask()
            if confirm:
                client_service.delete_client(client.id)
                console.print("[green]Client deleted.[/green]")
                return
