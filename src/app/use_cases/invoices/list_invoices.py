"""ListInvoices Use Case"""

from typing import List

from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import Invoice


class ListInvoices:
    """Use Case: List every stored invoice, oldest first"""

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self) -> List[Invoice]:
        return await self.invoice_repo.list()
