"""ReportLab PDF Generation Service Implementation

Draws invoices on a single A4 page with the ReportLab canvas, following the
positions computed by plan_invoice_layout.
"""

import logging
import os
from io import BytesIO
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from src.app.errors import RenderError
from src.app.services.pdf_service import PdfService
from src.domain.invoice import Invoice
from .invoice_layout import (
    LOGO_SIZE,
    TABLE_ROW_H,
    TITLE_FONT_SIZE,
    TOTALS_LABEL_WIDTH,
    TOTALS_WIDTH,
    InvoiceLayout,
    clip_text,
    format_money,
    format_quantity,
    plan_invoice_layout,
)

logger = logging.getLogger(__name__)

PRIMARY_BLUE = colors.HexColor("#4F6EF7")
TEXT_BLACK = colors.HexColor("#111827")
TEXT_SECONDARY = colors.HexColor("#6B7280")
BORDER_COLOR = colors.HexColor("#E5E7EB")

UPLOADS_URL_PREFIX = "/uploads/"
DEFAULT_PAYMENT_NOTE = "Please pay within 15 days of receiving this invoice."


class ReportLabPdfService(PdfService):
    """
    ReportLab implementation of PdfService

    Layout rules:
    - one page, never more; the table shows at most max_rows rows
    - text is clipped to its column, never wrapped
    - numeric columns are right-aligned, quantity is centered
    """

    def __init__(
        self,
        max_rows: int = 10,
        uploads_dir: Optional[str] = None,
        logo_path: Optional[str] = None,
    ):
        """
        Initialize the renderer

        Args:
            max_rows: Cap on visible line-item rows
            uploads_dir: Directory that /uploads/... logo URLs resolve into
            logo_path: Fallback logo image used when the invoice has none
        """
        self.max_rows = max_rows
        self.uploads_dir = uploads_dir
        self.logo_path = logo_path

    @classmethod
    def from_config(cls, config) -> "ReportLabPdfService":
        return cls(
            max_rows=int(config.PDF_MAX_ROWS),
            uploads_dir=config.UPLOADS_DIR,
            logo_path=config.LOGO_PATH,
        )

    def render_invoice(self, invoice: Invoice) -> bytes:
        try:
            return self._render(invoice)
        except Exception as e:
            logger.exception(f"Failed to generate invoice PDF for {invoice.id}")
            raise RenderError("Failed to generate invoice PDF", reason=str(e)) from e

    def _render(self, invoice: Invoice) -> bytes:
        logo = self._load_logo(invoice.footer.logo_url)
        layout = plan_invoice_layout(invoice, max_rows=self.max_rows, has_logo=logo is not None)

        buffer = BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4)
        pdf.setTitle(f"Invoice {invoice.display_number}")
        pdf.setAuthor(invoice.footer.business_name or "")

        self._draw_header(pdf, invoice, layout, logo)
        self._draw_billed_to(pdf, invoice, layout)
        self._draw_meta(pdf, layout)
        self._draw_table(pdf, invoice, layout)
        self._draw_totals(pdf, invoice, layout)
        self._draw_note_and_footer(pdf, invoice, layout)

        pdf.showPage()
        pdf.save()
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes

    def _resolve_logo_path(self, logo_url: str) -> Optional[str]:
        if logo_url and logo_url.startswith(UPLOADS_URL_PREFIX) and self.uploads_dir:
            uploads_root = os.path.realpath(self.uploads_dir)
            candidate = os.path.realpath(
                os.path.join(uploads_root, logo_url[len(UPLOADS_URL_PREFIX):])
            )
            if candidate.startswith(uploads_root + os.sep) and os.path.isfile(candidate):
                return candidate
        if self.logo_path and os.path.isfile(self.logo_path):
            return self.logo_path
        return None

    def _load_logo(self, logo_url: str) -> Optional[ImageReader]:
        path = self._resolve_logo_path(logo_url)
        if path is None:
            return None
        try:
            logo = ImageReader(path)
            logo.getSize()
            return logo
        except Exception:
            logger.warning(f"Ignoring unreadable logo image {path}")
            return None

    @staticmethod
    def _text(
        pdf: canvas.Canvas,
        layout: InvoiceLayout,
        text: str,
        x: float,
        top: float,
        width: float,
        font: str = "Helvetica",
        size: float = 9,
        color=TEXT_BLACK,
        align: str = "left",
    ) -> None:
        """Draw one clipped line whose top edge sits at `top` points from the page top"""
        text = clip_text(text, font, size, width)
        if not text:
            return
        baseline = layout.page_height - top - size
        pdf.setFont(font, size)
        pdf.setFillColor(color)
        if align == "right":
            pdf.drawRightString(x + width, baseline, text)
        elif align == "center":
            pdf.drawCentredString(x + width / 2, baseline, text)
        else:
            pdf.drawString(x, baseline, text)

    def _draw_header(
        self,
        pdf: canvas.Canvas,
        invoice: Invoice,
        layout: InvoiceLayout,
        logo: Optional[ImageReader],
    ) -> None:
        half = layout.content_width / 2
        self._text(pdf, layout, "INVOICE", layout.content_x, layout.title_top, half,
                   font="Helvetica-Bold", size=TITLE_FONT_SIZE)

        right_x = layout.content_x + half
        if logo is not None and layout.logo_top is not None:
            pdf.drawImage(
                logo,
                right_x + half - LOGO_SIZE,
                layout.page_height - layout.logo_top - LOGO_SIZE,
                width=LOGO_SIZE,
                height=LOGO_SIZE,
                preserveAspectRatio=True,
                anchor="ne",
                mask="auto",
            )

        footer = invoice.footer
        top = layout.business_top
        self._text(pdf, layout, footer.business_name, right_x, top, half,
                   font="Helvetica-Bold", size=12, color=PRIMARY_BLUE, align="right")
        top += 18
        for line in (footer.address, footer.city):
            if line:
                self._text(pdf, layout, line, right_x, top, half,
                           color=TEXT_SECONDARY, align="right")
                top += 14

    def _draw_billed_to(self, pdf: canvas.Canvas, invoice: Invoice, layout: InvoiceLayout) -> None:
        half = layout.content_width / 2
        top = layout.billed_to_top
        self._text(pdf, layout, "Billed to", layout.content_x, top, half, color=TEXT_SECONDARY)
        top += 14
        self._text(pdf, layout, invoice.client_info.name, layout.content_x, top, half,
                   font="Helvetica-Bold", size=11)
        top += 16
        for line in layout.client_lines:
            self._text(pdf, layout, line, layout.content_x, top, half, color=TEXT_SECONDARY)
            top += 14

    def _draw_meta(self, pdf: canvas.Canvas, layout: InvoiceLayout) -> None:
        half = layout.content_width / 2
        top = layout.meta_top
        for label, value in layout.meta_rows:
            self._text(pdf, layout, label, layout.content_x, top, half, color=TEXT_SECONDARY)
            top += 12
            self._text(pdf, layout, value, layout.content_x, top, half,
                       font="Helvetica-Bold", size=10)
            top += 20

    def _draw_table(self, pdf: canvas.Canvas, invoice: Invoice, layout: InvoiceLayout) -> None:
        cols = layout.columns
        x0 = layout.content_x
        x1 = layout.content_x + layout.content_width

        pdf.setLineWidth(1)
        pdf.setStrokeColor(BORDER_COLOR)
        pdf.roundRect(
            x0,
            layout.page_height - layout.table_bottom,
            layout.content_width,
            layout.table_height,
            6,
            stroke=1,
            fill=0,
        )

        header = dict(font="Helvetica-Bold", size=9, color=TEXT_SECONDARY)
        self._text(pdf, layout, "Services", cols.services_x + 12, layout.header_top,
                   cols.services_w - 24, **header)
        self._text(pdf, layout, "Qty", cols.qty_x, layout.header_top, cols.qty_w,
                   align="center", **header)
        self._text(pdf, layout, "Rate", cols.rate_x, layout.header_top, cols.rate_w - 8,
                   align="right", **header)
        self._text(pdf, layout, "Line total", cols.total_x, layout.header_top, cols.total_w - 8,
                   align="right", **header)

        rule_y = layout.page_height - layout.rule_top
        pdf.line(x0, rule_y, x1, rule_y)

        currency = invoice.currency
        for line, top in zip(layout.rows, layout.row_tops):
            self._text(pdf, layout, line.name, cols.services_x + 12, top, cols.services_w - 24)
            self._text(pdf, layout, format_quantity(line.quantity), cols.qty_x, top, cols.qty_w,
                       color=TEXT_SECONDARY, align="center")
            self._text(pdf, layout, format_money(line.rate, currency), cols.rate_x, top,
                       cols.rate_w - 8, align="right")
            self._text(pdf, layout, format_money(line.amount, currency), cols.total_x, top,
                       cols.total_w - 8, align="right")

            row_bottom = layout.page_height - (top + TABLE_ROW_H)
            pdf.setStrokeColor(BORDER_COLOR)
            pdf.line(x0, row_bottom, x1, row_bottom)

    def _draw_totals(self, pdf: canvas.Canvas, invoice: Invoice, layout: InvoiceLayout) -> None:
        value_width = TOTALS_WIDTH - TOTALS_LABEL_WIDTH
        for (label, amount, emphasized), top in zip(layout.totals_rows, layout.totals_row_tops):
            font = "Helvetica-Bold" if emphasized else "Helvetica"
            color = PRIMARY_BLUE if emphasized else TEXT_BLACK
            self._text(pdf, layout, label, layout.totals_x, top, TOTALS_LABEL_WIDTH,
                       font=font, size=10, color=color)
            self._text(pdf, layout, format_money(amount, invoice.currency),
                       layout.totals_x + TOTALS_LABEL_WIDTH, top, value_width,
                       font=font, size=10, color=color, align="right")

    def _draw_note_and_footer(
        self, pdf: canvas.Canvas, invoice: Invoice, layout: InvoiceLayout
    ) -> None:
        footer = invoice.footer
        self._text(pdf, layout, footer.terms or DEFAULT_PAYMENT_NOTE, layout.content_x,
                   layout.note_top, layout.content_width, font="Helvetica-Oblique",
                   color=TEXT_SECONDARY, align="center")

        third = layout.content_width / 3
        contact = (
            (footer.website, "left"),
            (footer.phone, "center"),
            (footer.email, "right"),
        )
        for index, (value, align) in enumerate(contact):
            if value:
                self._text(pdf, layout, value, layout.content_x + index * third,
                           layout.footer_top, third, size=8, color=TEXT_SECONDARY, align=align)
