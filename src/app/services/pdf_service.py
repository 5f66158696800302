"""PDF Generation Service Interface

Defines the contract for invoice document rendering.
"""

from abc import ABC, abstractmethod
from src.domain.invoice import Invoice


class PdfService(ABC):
    """
    Service interface for PDF generation

    Renders one stored invoice onto a single fixed-size page. Rendering
    never mutates the invoice and keeps no state between calls.
    """

    @abstractmethod
    def render_invoice(self, invoice: Invoice) -> bytes:
        """
        Render an invoice PDF

        Args:
            invoice: Invoice loaded from the store

        Returns:
            PDF document as bytes (exactly one page)

        Raises:
            RenderError: If the document could not be generated
        """
        pass
