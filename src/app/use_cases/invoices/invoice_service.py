"""Invoice Service

Single entry point composing the invoice use cases over one store and one
renderer. Routes depend on this class only.
"""

from typing import Any, List

from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.pdf_service import PdfService
from src.domain.business_profile import BusinessProfile
from src.domain.invoice import Invoice
from .create_invoice import CreateInvoice
from .delete_invoice import DeleteInvoice
from .dtos import RenderedInvoiceDTO
from .get_invoice import GetInvoice
from .list_invoices import ListInvoices
from .patch_invoice import PatchInvoice
from .render_invoice import RenderInvoice


class InvoiceService:
    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        pdf_service: PdfService,
        business_profile: BusinessProfile,
    ):
        self.invoice_repo = invoice_repo
        self.pdf_service = pdf_service
        self.business_profile = business_profile

    async def create(self, payload: Any) -> str:
        return await CreateInvoice(self.invoice_repo, self.business_profile).execute(payload)

    async def list(self) -> List[Invoice]:
        return await ListInvoices(self.invoice_repo).execute()

    async def get(self, invoice_id: str) -> Invoice:
        return await GetInvoice(self.invoice_repo).execute(invoice_id)

    async def patch(self, invoice_id: str, payload: Any) -> bool:
        return await PatchInvoice(self.invoice_repo).execute(invoice_id, payload)

    async def delete(self, invoice_id: str) -> bool:
        return await DeleteInvoice(self.invoice_repo).execute(invoice_id)

    async def render(self, invoice_id: str) -> RenderedInvoiceDTO:
        return await RenderInvoice(self.invoice_repo, self.pdf_service).execute(invoice_id)
