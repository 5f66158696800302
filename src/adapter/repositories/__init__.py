from .sqlite_invoice_repository import SqliteInvoiceRepository
from .rest_invoice_repository import RestInvoiceRepository
from .factory import create_invoice_repository

__all__ = [
    "SqliteInvoiceRepository",
    "RestInvoiceRepository",
    "create_invoice_repository",
]
