from __future__ import annotations

import logging
from pathlib import Path

from fpdf import FPDF

from invoicer import calculator
from invoicer.constants import PDF_TEMPLATES
from invoicer.models import format_amount
from invoicer.models.invoice import AmountType, Invoice

logger = logging.getLogger(__name__)

FONT = "Helvetica"

TEMPLATE_COLORS: dict[str, dict[str, tuple[int, int, int]]] = {
    "classic": {
        "primary": (79, 70, 229),
        "text": (51, 51, 51),
        "secondary": (102, 102, 102),
        "background": (249, 250, 251),
        "header_text": (255, 255, 255),
    },
    "modern": {
        "primary": (5, 150, 105),
        "text": (17, 17, 17),
        "secondary": (75, 85, 99),
        "background": (236, 253, 245),
        "header_text": (255, 255, 255),
    },
    "minimalist": {
        "primary": (0, 0, 0),
        "text": (0, 0, 0),
        "secondary": (68, 68, 68),
        "background": (255, 255, 255),
        "header_text": (0, 0, 0),
    },
}


def _latin1(value: str) -> str:
    # Core PDF fonts only cover latin-1.
    return value.encode("latin-1", "replace").decode("latin-1")


def _rate_label(value: float, amount_type: AmountType) -> str:
    if amount_type == AmountType.PERCENTAGE and value:
        return f" ({value:g}%)"
    return ""


def breakdown_rows(invoice: Invoice) -> list[tuple[str, float]]:
    """Summary rows printed under the items table, recomputed with the calculator.

    Signed amounts: every row but the last adds up to the last (the stored grand total).
    """
    totals = calculator.totals_for(invoice)
    if not calculator.totals_match(invoice):
        logger.warning(
            "Stored totals for invoice %s differ from recomputed figures (stored=%s computed=%s)",
            invoice.invoice_number,
            invoice.grand_total,
            totals.grand_total,
        )
    rows = [("Subtotal", totals.subtotal)]
    if totals.discount_amount:
        rows.append((f"Discount{_rate_label(invoice.discount, invoice.discount_type)}", -totals.discount_amount))
    if totals.tax_amount:
        rows.append((f"Tax{_rate_label(invoice.tax, invoice.tax_type)}", totals.tax_amount))
    rows.append(("TOTAL", invoice.grand_total))
    return rows


class InvoicePDF:
    def generate(self, invoice: Invoice, template: str = "classic") -> bytes:
        if template not in PDF_TEMPLATES:
            raise ValueError(f"Unknown invoice template: {template}")
        self._colors = TEMPLATE_COLORS[template]
        self._template = template
        self._currency = invoice.currency

        pdf = FPDF()
        pdf.add_page()
        pdf.set_auto_page_break(auto=True, margin=20)
        page_w = pdf.w - pdf.l_margin - pdf.r_margin

        self._draw_header(pdf, page_w, invoice)
        self._draw_meta(pdf, page_w, invoice)
        self._draw_table(pdf, page_w, invoice)
        self._draw_totals(pdf, page_w, breakdown_rows(invoice))

        if invoice.notes:
            self._draw_text_section(pdf, page_w, "Notes:", invoice.notes)
        if invoice.terms:
            self._draw_text_section(pdf, page_w, "Terms & Conditions:", invoice.terms)

        self._draw_footer(pdf, page_w)

        output = bytes(pdf.output())
        logger.debug(
            "PDF generated: invoice=%s template=%s items=%d size=%d bytes",
            invoice.invoice_number,
            template,
            len(invoice.items),
            len(output),
        )
        return output

    def _money(self, amount: float) -> str:
        return format_amount(amount, self._currency, show_symbol=False)

    def _draw_header(self, pdf: FPDF, page_w: float, invoice: Invoice) -> None:
        c = self._colors
        company = invoice.company_profile
        x = pdf.l_margin
        y = pdf.get_y()

        logo = Path(company.logo_path) if company.logo_path else None
        if logo is not None and logo.is_file():
            pdf.image(str(logo), x=x, y=y, h=20)
            pdf.set_y(y + 22)

        pdf.set_font(FONT, "B", 16)
        pdf.set_text_color(*c["text"])
        pdf.cell(page_w / 2, 8, _latin1(company.company_name))
        pdf.set_font(FONT, "B", 24)
        pdf.set_text_color(*c["primary"])
        pdf.cell(page_w / 2, 8, "INVOICE", align="R", new_x="LMARGIN", new_y="NEXT")

        pdf.set_font(FONT, "", 9)
        pdf.set_text_color(*c["secondary"])
        details = [company.business_address, company.phone_number, company.email, company.website]
        for line in details:
            if line:
                pdf.cell(0, 5, _latin1(line), new_x="LMARGIN", new_y="NEXT")

        pdf.ln(3)
        pdf.set_draw_color(*c["primary"])
        pdf.set_line_width(0.8)
        y = pdf.get_y()
        pdf.line(x, y, x + page_w, y)
        pdf.ln(8)

    def _draw_meta(self, pdf: FPDF, page_w: float, invoice: Invoice) -> None:
        c = self._colors
        client = invoice.client
        col_w = page_w / 2
        top = pdf.get_y()

        pdf.set_font(FONT, "B", 8)
        pdf.set_text_color(*c["secondary"])
        pdf.cell(col_w, 5, "BILL TO", new_x="LMARGIN", new_y="NEXT")
        pdf.set_font(FONT, "B", 11)
        pdf.set_text_color(*c["text"])
        pdf.cell(col_w, 6, _latin1(client.client_name), new_x="LMARGIN", new_y="NEXT")
        pdf.set_font(FONT, "", 9)
        for line in (client.client_address, client.contact_number, client.email):
            pdf.cell(col_w, 5, _latin1(line), new_x="LMARGIN", new_y="NEXT")
        left_bottom = pdf.get_y()

        details = [
            ("Invoice #", invoice.invoice_number),
            ("Issue date", invoice.issue_date),
            ("Due date", invoice.due_date),
            ("Status", invoice.status.value),
        ]
        pdf.set_xy(pdf.l_margin + col_w, top)
        pdf.set_font(FONT, "B", 8)
        pdf.set_text_color(*c["secondary"])
        pdf.cell(col_w, 5, "INVOICE DETAILS", align="R", new_x="LEFT", new_y="NEXT")
        pdf.set_text_color(*c["text"])
        for label, value in details:
            pdf.set_font(FONT, "", 9)
            pdf.cell(col_w, 5, _latin1(f"{label}: {value}"), align="R", new_x="LEFT", new_y="NEXT")

        pdf.set_y(max(left_bottom, pdf.get_y()) + 8)

    def _draw_table(self, pdf: FPDF, page_w: float, invoice: Invoice) -> None:
        c = self._colors
        show_tax = any(item.tax is not None and item.tax.rate > 0 for item in invoice.items)
        if show_tax:
            widths = [0.37, 0.10, 0.18, 0.15, 0.20]
            headers = ["Item", "Qty", "Unit price", "Tax", "Total"]
        else:
            widths = [0.45, 0.12, 0.20, 0.23]
            headers = ["Item", "Qty", "Unit price", "Total"]
        cols = [page_w * w for w in widths]
        line_h = 9

        if self._template == "minimalist":
            pdf.set_fill_color(255, 255, 255)
        else:
            pdf.set_fill_color(*c["primary"])
        pdf.set_text_color(*c["header_text"])
        pdf.set_font(FONT, "B", 9)
        for i, (w, header) in enumerate(zip(cols, headers)):
            last = i == len(cols) - 1
            pdf.cell(
                w,
                line_h,
                f" {header.upper()}",
                fill=True,
                align="L" if i == 0 else "R",
                new_x="LMARGIN" if last else "RIGHT",
                new_y="NEXT" if last else "TOP",
            )
        if self._template == "minimalist":
            y = pdf.get_y()
            pdf.set_draw_color(0, 0, 0)
            pdf.set_line_width(0.6)
            pdf.line(pdf.l_margin, y, pdf.l_margin + page_w, y)

        pdf.set_text_color(*c["text"])
        pdf.set_font(FONT, "", 9)
        for row_index, item in enumerate(invoice.items):
            pdf.set_fill_color(*(c["background"] if row_index % 2 else (255, 255, 255)))
            name = item.product_service_name
            if item.description:
                name = f"{name} - {item.description}"
            cells = [_latin1(f" {name}"), f"{item.quantity:g}", self._money(item.unit_price)]
            if show_tax:
                if item.tax is None or not item.tax.rate:
                    cells.append("-")
                elif item.tax.type == AmountType.PERCENTAGE:
                    cells.append(f"{item.tax.rate:g}%")
                else:
                    cells.append(self._money(item.tax.rate))
            cells.append(self._money(calculator.item_total(item)))

            for i, (w, value) in enumerate(zip(cols, cells)):
                last = i == len(cols) - 1
                pdf.cell(
                    w,
                    line_h,
                    value,
                    fill=True,
                    align="L" if i == 0 else "R",
                    new_x="LMARGIN" if last else "RIGHT",
                    new_y="NEXT" if last else "TOP",
                )

        pdf.set_draw_color(*c["secondary"])
        pdf.set_line_width(0.2)
        y = pdf.get_y()
        pdf.line(pdf.l_margin, y, pdf.l_margin + page_w, y)
        pdf.ln(6)

    def _draw_totals(self, pdf: FPDF, page_w: float, rows: list[tuple[str, float]]) -> None:
        c = self._colors
        box_w = 90
        label_w = 50
        x = pdf.l_margin + page_w - box_w

        for label, amount in rows[:-1]:
            pdf.set_x(x)
            pdf.set_font(FONT, "B", 9)
            pdf.set_text_color(*c["text"])
            pdf.cell(label_w, 7, f"{label}:")
            pdf.set_font(FONT, "", 9)
            value = self._money(amount) if amount >= 0 else f"-{self._money(-amount)}"
            pdf.cell(box_w - label_w, 7, value, align="R", new_x="LMARGIN", new_y="NEXT")

        label, amount = rows[-1]
        pdf.set_x(x)
        if self._template == "minimalist":
            y = pdf.get_y()
            pdf.set_draw_color(0, 0, 0)
            pdf.set_line_width(0.6)
            pdf.line(x, y, x + box_w, y)
            pdf.set_fill_color(255, 255, 255)
            pdf.set_text_color(0, 0, 0)
        else:
            pdf.set_fill_color(*c["primary"])
            pdf.set_text_color(*c["header_text"])
        pdf.set_font(FONT, "B", 11)
        pdf.cell(label_w, 10, f" {label}:", fill=True)
        pdf.cell(box_w - label_w, 10, f"{self._money(amount)} ", fill=True, align="R", new_x="LMARGIN", new_y="NEXT")
        pdf.ln(8)

    def _draw_text_section(self, pdf: FPDF, page_w: float, title: str, body: str) -> None:
        c = self._colors
        pdf.set_font(FONT, "B", 10)
        pdf.set_text_color(*c["text"])
        pdf.cell(0, 6, title, new_x="LMARGIN", new_y="NEXT")
        pdf.set_font(FONT, "", 9)
        pdf.set_text_color(*c["secondary"])
        pdf.multi_cell(page_w, 5, _latin1(body), new_x="LMARGIN", new_y="NEXT")
        pdf.ln(4)

    def _draw_footer(self, pdf: FPDF, page_w: float) -> None:
        c = self._colors
        pdf.set_y(-30)
        pdf.set_draw_color(*c["secondary"])
        pdf.set_line_width(0.3)
        y = pdf.get_y()
        pdf.line(pdf.l_margin, y, pdf.l_margin + page_w, y)
        pdf.ln(4)
        pdf.set_font(FONT, "", 8)
        pdf.set_text_color(*c["secondary"])
        pdf.cell(0, 5, "Thank you for your business!", align="C", new_x="LMARGIN", new_y="NEXT")
