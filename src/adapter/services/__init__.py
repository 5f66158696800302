from .pdf_service import ReportLabPdfService
from .invoice_layout import InvoiceLayout, plan_invoice_layout

__all__ = [
    "ReportLabPdfService",
    "InvoiceLayout",
    "plan_invoice_layout",
]
