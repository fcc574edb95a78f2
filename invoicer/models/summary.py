from __future__ import annotations

from pydantic import BaseModel


class ClientSummary(BaseModel):
    total_invoices: int = 0
    total_amount: float = 0.0
    paid_amount: float = 0.0
    pending_amount: float = 0.0


class DashboardSummary(BaseModel):
    total_invoices: int = 0
    unpaid_count: int = 0
    outstanding_amount: float = 0.0  # grand totals of every invoice not yet Paid
    overdue_count: int = 0
