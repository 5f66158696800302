"""RenderInvoice Use Case

Produces the downloadable single-page PDF of a stored invoice.
"""

import asyncio

from src.app.errors import NotFoundError
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.pdf_service import PdfService
from .dtos import RenderedInvoiceDTO


class RenderInvoice:
    """
    Use Case: Render invoice PDF

    Business Rules:
    1. Invoice must exist
    2. The document shows the summary stored at creation
    3. Rendering runs off the event loop

    Flow:
    1. Retrieve invoice by ID
    2. Render PDF in a worker thread
    3. Return bytes with download metadata
    """

    def __init__(self, invoice_repo: InvoiceRepository, pdf_service: PdfService):
        self.invoice_repo = invoice_repo
        self.pdf_service = pdf_service

    async def execute(self, invoice_id: str) -> RenderedInvoiceDTO:
        """
        Execute invoice rendering

        Args:
            invoice_id: Invoice ID

        Returns:
            RenderedInvoiceDTO with PDF content

        Raises:
            NotFoundError: If no invoice has this id
            RenderError: If the PDF could not be produced
            StoreError: If the store read fails
        """
        # Step 1: Retrieve invoice
        invoice = await self.invoice_repo.get_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError(invoice_id)

        # Step 2: Render
        content = await asyncio.to_thread(self.pdf_service.render_invoice, invoice)

        # Step 3: Build response
        return RenderedInvoiceDTO(
            invoice_id=invoice.id,
            content=content,
            filename=f"{invoice.id}.pdf",
        )
