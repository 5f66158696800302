"""Invoice use cases"""
from .create_invoice import CreateInvoice
from .list_invoices import ListInvoices
from .get_invoice import GetInvoice
from .patch_invoice import PatchInvoice
from .delete_invoice import DeleteInvoice
from .render_invoice import RenderInvoice
from .invoice_service import InvoiceService
from .migrate_snapshot import migrate, legacy_to_invoice
from .validation import validate_create, validate_patch
from .dtos import (
    CreateInvoiceCommandDTO,
    PatchInvoiceCommandDTO,
    InvoiceCreatedResponseDTO,
    SuccessResponseDTO,
    RenderedInvoiceDTO,
)

__all__ = [
    "CreateInvoice",
    "ListInvoices",
    "GetInvoice",
    "PatchInvoice",
    "DeleteInvoice",
    "RenderInvoice",
    "InvoiceService",
    "migrate",
    "legacy_to_invoice",
    "validate_create",
    "validate_patch",
    "CreateInvoiceCommandDTO",
    "PatchInvoiceCommandDTO",
    "InvoiceCreatedResponseDTO",
    "SuccessResponseDTO",
    "RenderedInvoiceDTO",
]
