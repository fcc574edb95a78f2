from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from invoicer.calculator import InvoiceTotals
from invoicer.cli.prompts import ask_amount_type, ask_number
from invoicer.constants import PDF_TEMPLATES, SUPPORTED_CURRENCIES
from invoicer.models import format_amount
from invoicer.models.invoice import AmountType, Invoice, InvoiceItem, InvoiceStatus, ItemTax
from invoicer.pdf.invoice import breakdown_rows
from invoicer.services.client_service import ClientService
from invoicer.services.company_service import CompanyService
from invoicer.services.invoice_service import InvoiceService
from invoicer.settings import settings

console = Console()

STATUS_STYLES = {
    InvoiceStatus.PAID: "green",
    InvoiceStatus.SENT: "cyan",
    InvoiceStatus.OVERDUE: "red",
    InvoiceStatus.FINAL: "magenta",
    InvoiceStatus.DRAFT: "dim",
}


def _print_preview(totals: InvoiceTotals, currency: str) -> None:
    console.print(
        f"  [dim]Subtotal {format_amount(totals.subtotal, currency)} | "
        f"Discount -{format_amount(totals.discount_amount, currency)} | "
        f"Tax {format_amount(totals.tax_amount, currency)} |[/dim] "
        f"[bold]Total {format_amount(totals.grand_total, currency)}[/bold]"
    )


def _ask_item(current: InvoiceItem | None = None) -> InvoiceItem | None:
    name = questionary.text("  Product/service:", default=current.product_service_name if current else "").ask()
    if not name:
        return None
    description = questionary.text(
        "  Description (optional):", default=current.description if current else ""
    ).ask() or ""
    quantity = ask_number("  Quantity:", default=f"{current.quantity:g}" if current else "1", positive=True)
    unit_price = ask_number("  Unit price (ex: 150.00):", default=f"{current.unit_price:g}" if current else "")

    current_tax = current.tax if current else None
    tax = None
    if questionary.confirm("  Add item tax?", default=current_tax is not None).ask():
        tax_type = ask_amount_type("  Item tax type:", default=current_tax.type if current_tax else None)
        rate = ask_number("  Item tax (rate or amount):", default=f"{current_tax.rate:g}" if current_tax else "")
        if rate > 0:
            tax = ItemTax(rate=rate, type=tax_type)

    return InvoiceItem(
        id=current.id if current else "",
        product_service_name=name,
        description=description,
        quantity=quantity,
        unit_price=unit_price,
        tax=tax,
    )


def _pick_item(message: str, items: list[InvoiceItem], currency: str) -> int | None:
    labels = [
        f"{i + 1}. {item.product_service_name} ({item.quantity:g} x {format_amount(item.unit_price, currency)})"
        for i, item in enumerate(items)
    ]
    choice = questionary.select(message, choices=labels + ["Back"]).ask()
    if choice is None or choice == "Back":
        return None
    return labels.index(choice)


def _edit_items(
    items: list[InvoiceItem],
    invoice_service: InvoiceService,
    currency: str,
    invoice: Invoice | None = None,
) -> list[InvoiceItem]:
    """Add, edit and remove line items, previewing totals after each change.

    When editing a stored ``invoice`` the preview includes its discount and tax.
    """
    if invoice is None:
        pricing = (0, AmountType.FIXED, 0, AmountType.FIXED)
    else:
        pricing = (invoice.discount, invoice.discount_type, invoice.tax, invoice.tax_type)
    items = list(items)
    while True:
        choices = ["Add item"]
        if items:
            choices += ["Edit item", "Remove item"]
        choices.append("Done")
        action = questionary.select("Items:", choices=choices).ask()
        if action is None or action == "Done":
            break

        if action == "Add item":
            item = _ask_item()
            if item is None:
                continue
            items.append(item)
            console.print(f"  [green]Item added: {item.product_service_name}[/green]")
        elif action == "Edit item":
            index = _pick_item("Item to edit:", items, currency)
            if index is None:
                continue
            item = _ask_item(items[index])
            if item is None:
                continue
            items[index] = item
            console.print(f"  [green]Item updated: {item.product_service_name}[/green]")
        elif action == "Remove item":
            index = _pick_item("Item to remove:", items, currency)
            if index is None:
                continue
            removed = items.pop(index)
            console.print(f"  [yellow]Item removed: {removed.product_service_name}[/yellow]")

        _print_preview(invoice_service.preview_totals(items, *pricing), currency)

    return [item.model_copy(update={"sort_order": i}) for i, item in enumerate(items)]


def create_invoice_menu(
    company_service: CompanyService,
    client_service: ClientService,
    invoice_service: InvoiceService,
) -> None:
    console.print()
    console.print("[bold]New Invoice[/bold]", style="cyan")

    company = company_service.get_profile()
    if company is None:
        console.print("[yellow]Set up your company profile first.[/yellow]")
        return

    clients = client_service.list_clients()
    if not clients:
        console.print("[yellow]Add a client first.[/yellow]")
        return

    client_choices = {f"{c.client_name} <{c.email}>": c for c in clients}
    choice = questionary.select("Client:", choices=list(client_choices) + ["Cancel"]).ask()
    if choice is None or choice == "Cancel":
        return
    client = client_choices[choice]

    currency = questionary.select(
        "Currency:",
        choices=list(SUPPORTED_CURRENCIES),
        default=settings.default_currency,
    ).ask() or settings.default_currency

    console.print()
    console.print("Add the invoice items:")
    items = _edit_items([], invoice_service, currency)

    if not items:
        console.print("[yellow]No items added. Invoice not created.[/yellow]")
        return

    discount_type = ask_amount_type("Discount type:")
    discount = ask_number("Discount:", default="0")
    tax_type = ask_amount_type("Invoice tax type:")
    tax = ask_number("Invoice tax:", default="0")
    _print_preview(invoice_service.preview_totals(items, discount, discount_type, tax, tax_type), currency)

    due_date = questionary.text("Due date (YYYY-MM-DD, empty for today):").ask() or ""
    notes = questionary.text("Notes (optional):").ask() or ""
    terms = questionary.text("Terms (optional):").ask() or ""

    try:
        invoice = invoice_service.create_invoice(
            company,
            client,
            items,
            due_date=due_date,
            currency=currency,
            discount=discount,
            discount_type=discount_type,
            tax=tax,
            tax_type=tax_type,
            notes=notes,
            terms=terms,
        )
    except ValueError as exc:
        console.print(f"[red]Invoice not saved: {exc}[/red]")
        return

    console.print()
    console.print(f"[green bold]Invoice {invoice.invoice_number} saved![/green bold]")
    _show_invoice_detail(invoice, invoice_service)


def _show_invoice_detail(invoice: Invoice, invoice_service: InvoiceService) -> None:
    currency = invoice.currency
    table = Table(title=f"{invoice.invoice_number} - {invoice.client.client_name}")
    table.add_column("Item")
    table.add_column("Qty", justify="right")
    table.add_column("Unit price", justify="right")
    table.add_column("Tax", justify="right")
    table.add_column("Total", justify="right")

    for item in invoice.items:
        if item.tax is None:
            tax_label = "-"
        elif item.tax.type == AmountType.PERCENTAGE:
            tax_label = f"{item.tax.rate:g}%"
        else:
            tax_label = format_amount(item.tax.rate, currency)
        table.add_row(
            item.product_service_name,
            f"{item.quantity:g}",
            format_amount(item.unit_price, currency),
            tax_label,
            format_amount(item.total, currency),
        )

    console.print(table)
    for label, amount in breakdown_rows(invoice):
        sign = "-" if amount < 0 else ""
        console.print(f"  [bold]{label}:[/bold] {sign}{format_amount(abs(amount), currency)}")

    style = STATUS_STYLES.get(invoice.status, "")
    console.print(f"  Status: [{style}]{invoice.status.value}[/{style}]")
    console.print(f"  Issued: {invoice.issue_date}  Due: {invoice.due_date}")
    days = invoice.days_until_due
    if invoice.status != InvoiceStatus.PAID and days is not None:
        if days < 0:
            console.print(f"  [red]Past due by {-days} day(s)[/red]")
        elif days == 0:
            console.print("  [yellow]Due today[/yellow]")
        else:
            console.print(f"  Due in {days} day(s)")
    if invoice.notes:
        console.print(f"  Notes: {invoice.notes}")
    url = invoice_service.get_document_url(invoice)
    if url:
        console.print(f"  PDF: {url}")


def list_invoices_menu(invoice_service: InvoiceService) -> None:
    query = questionary.text("Search (number or client, empty for all):").ask() or ""
    invoices = invoice_service.search_invoices(query)

    if not invoices:
        console.print("[yellow]No invoices found.[/yellow]")
        return

    table = Table(title="Invoices")
    table.add_column("Number", style="bold")
    table.add_column("Client")
    table.add_column("Issued")
    table.add_column("Due")
    table.add_column("Status", justify="center")
    table.add_column("Total", justify="right")

    for inv in invoices:
        style = STATUS_STYLES.get(inv.status, "")
        table.add_row(
            inv.invoice_number,
            inv.client.client_name,
            inv.issue_date,
            inv.due_date,
            f"[{style}]{inv.status.value}[/{style}]",
            format_amount(inv.grand_total, inv.currency),
        )

    console.print()
    console.print(table)
    console.print()

    invoice_choices = {f"{inv.invoice_number} - {inv.client.client_name}": inv for inv in invoices}
    choice = questionary.select("Select an invoice:", choices=list(invoice_choices) + ["Back"]).ask()
    if choice is None or choice == "Back":
        return

    _invoice_detail_menu(invoice_choices[choice], invoice_service)


def _edit_invoice(invoice: Invoice, invoice_service: InvoiceService) -> Invoice:
    items = _edit_items(invoice.items, invoice_service, invoice.currency, invoice)
    if not items:
        console.print("[yellow]An invoice needs at least one item. Nothing changed.[/yellow]")
        return invoice

    currency = questionary.select(
        "Currency:",
        choices=list(SUPPORTED_CURRENCIES),
        default=invoice.currency,
    ).ask() or invoice.currency
    due_date = questionary.text("Due date (YYYY-MM-DD):", default=invoice.due_date).ask() or invoice.due_date
    notes = questionary.text("Notes:", default=invoice.notes).ask()
    terms = questionary.text("Terms:", default=invoice.terms).ask()

    updated = invoice.model_copy(
        update={
            "items": items,
            "currency": currency,
            "due_date": due_date,
            "notes": invoice.notes if notes is None else notes,
            "terms": invoice.terms if terms is None else terms,
        }
    )
    try:
        invoice = invoice_service.update_invoice(updated)
    except ValueError as exc:
        console.print(f"[red]Invoice not updated: {exc}[/red]")
        return invoice
    console.print("[green]Invoice updated.[/green]")
    return invoice


def _edit_pricing(invoice: Invoice, invoice_service: InvoiceService) -> Invoice:
    discount_type = ask_amount_type("Discount type:", default=invoice.discount_type)
    discount = ask_number("Discount:", default=f"{invoice.discount:g}")
    tax_type = ask_amount_type("Invoice tax type:", default=invoice.tax_type)
    tax = ask_number("Invoice tax:", default=f"{invoice.tax:g}")
    updated = invoice.model_copy(
        update={"discount": discount, "discount_type": discount_type, "tax": tax, "tax_type": tax_type}
    )
    try:
        invoice = invoice_service.update_invoice(updated)
    except ValueError as exc:
        console.print(f"[red]Invoice not updated: {exc}[/red]")
        return invoice
    console.print("[green]Invoice updated.[/green]")
    return invoice


def _invoice_detail_menu(invoice: Invoice, invoice_service: InvoiceService) -> None:
    while True:
        console.print()
        _show_invoice_detail(invoice, invoice_service)
        console.print()

        choice = questionary.select(
            "Action:",
            choices=[
                "Change status",
                "Edit invoice",
                "Edit discount and tax",
                "Export PDF",
                "Duplicate",
                "Delete",
                "Back",
            ],
        ).ask()

        if choice is None or choice == "Back":
            return
        elif choice == "Change status":
            status_str = questionary.select(
                "New status:",
                choices=[s.value for s in InvoiceStatus],
            ).ask()
            if status_str:
                invoice = invoice_service.update_status(invoice, InvoiceStatus(status_str))
                console.print(f"[green]Status set to {status_str}.[/green]")
        elif choice == "Edit invoice":
            invoice = _edit_invoice(invoice, invoice_service)
        elif choice == "Edit discount and tax":
            invoice = _edit_pricing(invoice, invoice_service)
        elif choice == "Export PDF":
            template = questionary.select(
                "Template:",
                choices=list(PDF_TEMPLATES),
                default=settings.pdf_template,
            ).ask() or settings.pdf_template
            path = invoice_service.export_pdf(invoice, template=template)
            console.print(f"[green]PDF saved to {path}[/green]")
        elif choice == "Duplicate":
            try:
                copy = invoice_service.duplicate_invoice(invoice)
            except ValueError as exc:
                console.print(f"[red]Could not duplicate: {exc}[/red]")
                continue
            console.print(f"[green]Created {copy.invoice_number} as a draft copy.[/green]")
        elif choice == "Delete":
            confirm = questionary.confirm(f"Delete invoice {invoice.invoice_number}?", default=False).ask()
            if confirm:
                invoice_service.delete_invoice(invoice.id)
                console.print("[green]Invoice deleted.[/green]")
                return
