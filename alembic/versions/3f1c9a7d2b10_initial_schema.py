"""initial schema

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-01
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "3f1c9a7d2b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "company_profiles",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("company_name", sa.Text, nullable=False),
        sa.Column("business_address", sa.Text, nullable=False),
        sa.Column("phone_number", sa.Text, nullable=False),
        sa.Column("email", sa.Text, nullable=False),
        sa.Column("website", sa.Text, nullable=False, server_default=""),
        sa.Column("logo_path", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )

    op.create_table(
        "clients",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("client_name", sa.Text, nullable=False),
        sa.Column("client_address", sa.Text, nullable=False),
        sa.Column("contact_number", sa.Text, nullable=False),
        sa.Column("email", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )

    op.create_table(
        "invoices",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("invoice_number", sa.String(50), nullable=False),
        sa.Column("issue_date", sa.String(10), nullable=False),
        sa.Column("due_date", sa.String(10), nullable=False),
        sa.Column("status", sa.String(10), nullable=False, server_default="Draft"),
        sa.Column("currency", sa.String(3), nullable=False),
        # Snapshot of the client at creation time; no FK so deleting a client keeps history.
        sa.Column("client_id", sa.String(26), nullable=False),
        sa.Column("company_snapshot", sa.Text, nullable=False),
        sa.Column("client_snapshot", sa.Text, nullable=False),
        sa.Column("subtotal", sa.Double, nullable=False, server_default="0"),
        sa.Column("discount", sa.Double, nullable=False, server_default="0"),
        sa.Column("discount_type", sa.String(10), nullable=False),
        sa.Column("tax", sa.Double, nullable=False, server_default="0"),
        sa.Column("tax_type", sa.String(10), nullable=False),
        sa.Column("items_tax_amount", sa.Double, nullable=False, server_default="0"),
        sa.Column("invoice_tax_amount", sa.Double, nullable=False, server_default="0"),
        sa.Column("grand_total", sa.Double, nullable=False, server_default="0"),
        sa.Column("notes", sa.Text, nullable=False, server_default=""),
        sa.Column("terms", sa.Text, nullable=False, server_default=""),
        sa.Column("pdf_path", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )
    op.create_index("ix_invoices_client_id", "invoices", ["client_id"])
    op.create_index("ix_invoices_status", "invoices", ["status"])

    op.create_table(
        "invoice_items",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "invoice_id",
            sa.String(26),
            sa.ForeignKey("invoices.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("product_service_name", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("quantity", sa.Double, nullable=False),
        sa.Column("unit_price", sa.Double, nullable=False),
        sa.Column("tax_rate", sa.Double, nullable=True),
        sa.Column("tax_type", sa.String(10), nullable=True),
        sa.Column("total", sa.Double, nullable=False, server_default="0"),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.CheckConstraint("(tax_rate IS NULL) = (tax_type IS NULL)", name="ck_invoice_items_tax_pair"),
    )
    op.create_index("ix_invoice_items_invoice_id", "invoice_items", ["invoice_id"])

    op.create_table(
        "invoice_counter",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("value", sa.Integer, nullable=False),
    )


def downgrade() -> None:
    op.drop_table("invoice_counter")
    op.drop_index("ix_invoice_items_invoice_id", table_name="invoice_items")
    op.drop_table("invoice_items")
    op.drop_index("ix_invoices_status", table_name="invoices")
    op.drop_index("ix_invoices_client_id", table_name="invoices")
    op.drop_table("invoices")
    op.drop_table("clients")
    op.drop_table("company_profiles")
