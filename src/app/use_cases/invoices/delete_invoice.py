"""DeleteInvoice Use Case"""

import logging

from src.app.errors import NotFoundError
from src.app.repositories.invoice_repository import InvoiceRepository

logger = logging.getLogger(__name__)


class DeleteInvoice:
    """
    Use Case: Delete an invoice permanently

    Business Rules:
    1. Deletion is unconditional, whatever the payment status
    2. Deleting an unknown id is NotFoundError
    """

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self, invoice_id: str) -> bool:
        deleted = await self.invoice_repo.delete(invoice_id)
        if not deleted:
            raise NotFoundError(invoice_id)

        logger.info(f"Deleted invoice {invoice_id}")
        return True
