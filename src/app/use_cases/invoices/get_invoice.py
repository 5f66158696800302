"""GetInvoice Use Case"""

from src.app.errors import NotFoundError
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import Invoice


class GetInvoice:
    """
    Use Case: Retrieve one invoice

    Business Rules:
    1. Invoice must exist
    """

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self, invoice_id: str) -> Invoice:
        """
        Execute invoice retrieval

        Raises:
            NotFoundError: If no invoice has this id
            StoreError: If the store read fails
        """
        invoice = await self.invoice_repo.get_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError(invoice_id)
        return invoice
