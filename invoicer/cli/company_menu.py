from __future__ import annotations

import questionary
from rich.console import Console

from invoicer.cli.prompts import error_message
from invoicer.models.company import CompanyProfile
from invoicer.services.company_service import CompanyService

console = Console()


def company_profile_menu(company_service: CompanyService) -> None:
    profile = company_service.get_profile()

    console.print()
    if profile is None:
        console.print("[bold]Company Profile[/bold] [dim](not set up yet)[/dim]", style="cyan")
    else:
        console.print(f"[bold]{profile.company_name}[/bold]", style="cyan")
        console.print(f"  {profile.business_address}")
        console.print(f"  {profile.phone_number} | {profile.email}")
        if profile.website:
            console.print(f"  {profile.website}")
        if profile.logo_path:
            console.print(f"  Logo: {profile.logo_path}")
        console.print()
        if not questionary.confirm("Edit profile?", default=False).ask():
            return

    def ask(message: str, field: str) -> str:
        default = getattr(profile, field) if profile else ""
        return (questionary.text(message, default=default).ask() or "").strip()

    fields = {
        "company_name": ask("Company name:", "company_name"),
        "business_address": ask("Business address:", "business_address"),
        "phone_number": ask("Phone number:", "phone_number"),
        "email": ask("Email:", "email"),
        "website": ask("Website (optional):", "website"),
        "logo_path": ask("Logo image path (optional):", "logo_path"),
    }

    try:
        if profile is None:
            candidate = CompanyProfile(**fields)
        else:
            candidate = profile.model_copy(update=fields)
        saved = company_service.save_profile(candidate)
    except ValueError as exc:
        console.print(f"[red]Profile not saved: {error_message(exc)}[/red]")
        return

    console.print(f"[green]Company profile {saved.company_name} saved.[/green]")
