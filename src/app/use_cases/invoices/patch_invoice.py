"""PatchInvoice Use Case

Changes the mutable fields of an existing invoice.
"""

import logging
from typing import Any

from src.app.errors import NotFoundError
from src.app.repositories.invoice_repository import InvoiceRepository
from .validation import validate_patch

logger = logging.getLogger(__name__)


class PatchInvoice:
    """
    Use Case: Patch an invoice

    Business Rules:
    1. Only status, payment_status, payment_method and notes may change
    2. A status change is written to both status and payment_status
    3. Lines, summary, id and created_at are never touched

    Flow:
    1. Validate patch payload
    2. Merge into the stored document (store re-derives listing columns)
    """

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self, invoice_id: str, payload: Any) -> bool:
        """
        Execute invoice patch

        Args:
            invoice_id: Invoice ID
            payload: Decoded JSON patch request

        Returns:
            True once the patch is stored

        Raises:
            ValidationError: If the payload is rejected
            NotFoundError: If no invoice has this id
            StoreError: If the store write fails
        """
        command = validate_patch(payload)
        patch_fields = command.to_patch_fields()

        updated = await self.invoice_repo.update(invoice_id, patch_fields)
        if not updated:
            raise NotFoundError(invoice_id)

        logger.info(f"Patched invoice {invoice_id}: {sorted(patch_fields)}")
        return True
