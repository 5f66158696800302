"""Invoice Repository Interface

Defines the contract every invoice store backend must honour. Callers never
depend on a concrete backend.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from src.domain.invoice import Invoice


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Backends must be indistinguishable to callers:
    - returned invoices are fresh copies, never store-internal state
    - "not found" is reported through None / False
    - every other failure raises StoreError
    """

    async def initialize(self) -> None:
        """Prepare the backend (schema, connections). Called once at startup."""
        pass

    async def close(self) -> None:
        """Release backend resources. Called once at shutdown."""
        pass

    @abstractmethod
    async def insert(self, invoice: Invoice) -> None:
        """
        Persist a new invoice

        Args:
            invoice: Fully built invoice with id and created_at assigned

        Raises:
            StoreError: If the row could not be written (including duplicate id)
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def list(self) -> List[Invoice]:
        """
        Retrieve all invoices

        Returns:
            Invoices ordered by created_at ascending
        """
        pass

    @abstractmethod
    async def update(self, invoice_id: str, patch_fields: Dict[str, Any]) -> bool:
        """
        Merge patch fields into a stored invoice

        The listing columns (status, payment_status, payment_method, currency,
        total) are re-derived from the merged document. The summary changes
        only when patch_fields carries "summary".

        Args:
            invoice_id: Invoice ID
            patch_fields: JSON-ready top-level document fields

        Returns:
            True if updated, False if no such invoice
        """
        pass

    @abstractmethod
    async def delete(self, invoice_id: str) -> bool:
        """
        Delete an invoice

        Args:
            invoice_id: Invoice ID

        Returns:
            True if a row was removed, False if no such invoice
        """
        pass

    @abstractmethod
    async def is_empty(self) -> bool:
        """
        Check whether the store holds no invoices

        Returns:
            True if zero rows exist
        """
        pass
