"""Single-page invoice layout.

Computes where every block of the invoice page goes before anything is
drawn. Positions are measured in points from the top edge of the page. The
table height comes from the capped row count, so the totals, payment note
and footer always land above the bottom margin.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.pdfbase.pdfmetrics import stringWidth

from src.domain.invoice import Invoice, ServiceLine
from src.domain.invoice_math import round2

MARGIN_TOP = 48
MARGIN_LEFT = 48
MARGIN_RIGHT = 48
MARGIN_BOTTOM = 64

TITLE_FONT_SIZE = 26
BILLED_TO_OFFSET = 64
LABEL_LINE_H = 14
NAME_LINE_H = 16
META_GAP = 12
META_LABEL_H = 12
META_VALUE_H = 20

LOGO_SIZE = 72
LOGO_GAP = 8
BUSINESS_NAME_H = 18
BUSINESS_LINE_H = 14

TABLE_GAP = 16
TABLE_HEADER_H = 24
TABLE_ROW_H = 22
TABLE_PADDING = 8
# Fractions of the content width: services, qty, rate, line total
COLUMN_FRACTIONS = (0.5, 0.1, 0.2, 0.2)

TOTALS_GAP = 24
TOTALS_ROW_H = 18
TOTALS_DUE_EXTRA = 4
TOTALS_WIDTH = 220
TOTALS_LABEL_WIDTH = 120
TOTALS_TEXT_H = 12

NOTE_GAP = 20
NOTE_H = 10
FOOTER_OFFSET = 20
FOOTER_H = 8

DUE_DAYS = 15
DISPLAY_DATE_FORMAT = "%d %b %Y"
_PARSE_DATE_FORMATS = ("%Y-%m-%d", "%d %b %Y", "%d %B %Y", "%b %d, %Y", "%B %d, %Y", "%d/%m/%Y")
ELLIPSIS = "..."


def clip_text(text: str, font_name: str, font_size: float, width: float) -> str:
    """Clip text to a single line of the given width, ending with an ellipsis"""
    text = " ".join((text or "").split())
    if stringWidth(text, font_name, font_size) <= width:
        return text
    ellipsis_width = stringWidth(ELLIPSIS, font_name, font_size)
    if ellipsis_width > width:
        return ""
    while text and stringWidth(text, font_name, font_size) + ellipsis_width > width:
        text = text[:-1]
    return text.rstrip() + ELLIPSIS


def format_money(value: Decimal, currency: str) -> str:
    amount = f"{round2(value):,.2f}"
    return f"{currency} {amount}" if currency else amount


def format_quantity(value: Decimal) -> str:
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_percent(value: Decimal) -> str:
    return format_quantity(value)


def parse_display_date(value: str) -> Optional[date]:
    value = (value or "").strip()
    if not value:
        return None
    for fmt in _PARSE_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def resolve_dates(invoice: Invoice) -> Tuple[str, str]:
    """
    Display strings for the invoice date and due date

    An empty invoice date shows the creation date. An empty due date is the
    invoice date plus 15 days, or the creation date plus 15 days when the
    invoice date is not a recognizable date.
    """
    created = invoice.created_at.date()
    invoice_date = invoice.invoice_date or created.strftime(DISPLAY_DATE_FORMAT)
    if invoice.due_date:
        return invoice_date, invoice.due_date

    base = parse_display_date(invoice.invoice_date) or created
    due = base + timedelta(days=DUE_DAYS)
    return invoice_date, due.strftime(DISPLAY_DATE_FORMAT)


@dataclass(frozen=True)
class TableColumns:
    services_x: float
    services_w: float
    qty_x: float
    qty_w: float
    rate_x: float
    rate_w: float
    total_x: float
    total_w: float


@dataclass(frozen=True)
class InvoiceLayout:
    """Vertical positions (points from the top edge) of every page block"""

    page_width: float
    page_height: float
    content_x: float
    content_width: float

    title_top: float
    logo_top: Optional[float]
    business_top: float
    business_bottom: float

    billed_to_top: float
    client_lines: List[str]
    meta_top: float
    meta_rows: List[Tuple[str, str]]
    meta_bottom: float

    table_top: float
    table_height: float
    header_top: float
    rule_top: float
    columns: TableColumns
    rows: List[ServiceLine]
    row_tops: List[float]
    hidden_rows: int
    max_rows: int

    totals_x: float
    totals_top: float
    totals_rows: List[Tuple[str, Decimal, bool]]
    totals_row_tops: List[float]
    totals_bottom: float

    note_top: float
    footer_top: float
    bottom_limit: float

    @property
    def table_bottom(self) -> float:
        return self.table_top + self.table_height

    def fits_on_page(self) -> bool:
        return (
            self.table_bottom <= self.totals_top
            and self.totals_bottom <= self.note_top
            and self.note_top + NOTE_H <= self.footer_top
            and self.footer_top + FOOTER_H <= self.bottom_limit
        )


def _table_height(row_count: int) -> float:
    body = max(1, row_count) * TABLE_ROW_H + TABLE_PADDING
    return TABLE_HEADER_H + body + TABLE_PADDING


def _totals_rows(invoice: Invoice) -> List[Tuple[str, Decimal, bool]]:
    summary = invoice.summary
    rows = [
        ("Subtotal", summary.subtotal, False),
        (f"Tax ({format_percent(summary.tax_percent)}%)", summary.tax_amount, False),
    ]
    if summary.discount > 0:
        rows.append(("Discount", -summary.discount, False))
    rows.append(("Total due", summary.total, True))
    return rows


def _totals_offsets(rows: List[Tuple[str, Decimal, bool]]) -> List[float]:
    offsets = []
    for index, (_, _, emphasized) in enumerate(rows):
        offset = index * TOTALS_ROW_H
        if emphasized:
            offset += TOTALS_DUE_EXTRA
        offsets.append(offset)
    return offsets


def plan_invoice_layout(
    invoice: Invoice,
    max_rows: int = 10,
    has_logo: bool = False,
    page_size: Tuple[float, float] = A4,
) -> InvoiceLayout:
    """
    Lay out an invoice on one page

    Args:
        invoice: Invoice to lay out
        max_rows: Configured cap on visible table rows
        has_logo: Whether a logo image will be drawn in the business block
        page_size: (width, height) in points

    Returns:
        InvoiceLayout; rows beyond the cap (or beyond what physically fits)
        are left out of the table only
    """
    page_width, page_height = page_size
    content_x = MARGIN_LEFT
    content_width = page_width - MARGIN_LEFT - MARGIN_RIGHT
    footer_top = page_height - MARGIN_BOTTOM - FOOTER_OFFSET

    # Left column: title, billed-to, metadata
    title_top = MARGIN_TOP
    cursor = title_top + BILLED_TO_OFFSET
    billed_to_top = cursor
    cursor += LABEL_LINE_H + NAME_LINE_H
    client = invoice.client_info
    client_lines = [text for text in (client.address, client.city) if text]
    cursor += LABEL_LINE_H * len(client_lines)

    cursor += META_GAP
    meta_top = cursor
    invoice_date, due_date = resolve_dates(invoice)
    number = invoice.display_number
    meta_rows = [
        ("Invoice #", number or "-"),
        ("Invoice date", invoice_date or "-"),
        ("Reference", invoice.reference or number or "-"),
        ("Due date", due_date or "-"),
    ]
    meta_bottom = meta_top + len(meta_rows) * (META_LABEL_H + META_VALUE_H)

    # Right column: optional logo, business identity
    right_cursor = MARGIN_TOP
    logo_top = None
    if has_logo:
        logo_top = right_cursor
        right_cursor += LOGO_SIZE + LOGO_GAP
    business_top = right_cursor
    right_cursor += BUSINESS_NAME_H
    footer = invoice.footer
    right_cursor += BUSINESS_LINE_H * len([t for t in (footer.address, footer.city) if t])
    business_bottom = right_cursor

    # Table
    table_top = max(meta_bottom, business_bottom) + TABLE_GAP
    header_top = table_top + 10
    rule_top = header_top + TABLE_HEADER_H - 6

    totals_rows = _totals_rows(invoice)
    totals_offsets = _totals_offsets(totals_rows)
    totals_height = totals_offsets[-1] + TOTALS_TEXT_H

    reserved_below_table = TOTALS_GAP + totals_height + NOTE_GAP + NOTE_H
    available = footer_top - table_top - reserved_below_table - TABLE_HEADER_H - 2 * TABLE_PADDING
    rows_that_fit = max(1, int(available // TABLE_ROW_H))
    cap = max(1, min(int(max_rows), rows_that_fit))

    rows = list(invoice.lines[:cap])
    hidden_rows = len(invoice.lines) - len(rows)
    row_tops = [rule_top + 4 + index * TABLE_ROW_H for index in range(len(rows))]
    table_height = _table_height(len(rows))

    widths = [content_width * fraction for fraction in COLUMN_FRACTIONS]
    columns = TableColumns(
        services_x=content_x,
        services_w=widths[0],
        qty_x=content_x + widths[0],
        qty_w=widths[1],
        rate_x=content_x + widths[0] + widths[1],
        rate_w=widths[2],
        total_x=content_x + widths[0] + widths[1] + widths[2],
        total_w=widths[3],
    )

    # Totals, note, footer
    totals_top = table_top + table_height + TOTALS_GAP
    totals_row_tops = [totals_top + offset for offset in totals_offsets]
    totals_bottom = totals_top + totals_height
    note_top = totals_bottom + NOTE_GAP

    return InvoiceLayout(
        page_width=page_width,
        page_height=page_height,
        content_x=content_x,
        content_width=content_width,
        title_top=title_top,
        logo_top=logo_top,
        business_top=business_top,
        business_bottom=business_bottom,
        billed_to_top=billed_to_top,
        client_lines=client_lines,
        meta_top=meta_top,
        meta_rows=meta_rows,
        meta_bottom=meta_bottom,
        table_top=table_top,
        table_height=table_height,
        header_top=header_top,
        rule_top=rule_top,
        columns=columns,
        rows=rows,
        row_tops=row_tops,
        hidden_rows=hidden_rows,
        max_rows=cap,
        totals_x=content_x + content_width - TOTALS_WIDTH,
        totals_top=totals_top,
        totals_rows=totals_rows,
        totals_row_tops=totals_row_tops,
        totals_bottom=totals_bottom,
        note_top=note_top,
        footer_top=footer_top,
        bottom_limit=page_height - MARGIN_BOTTOM,
    )
