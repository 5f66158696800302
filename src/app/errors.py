"""Application Errors

Failure taxonomy for invoice operations. Every error carries a stable code,
a caller-facing message and an internal reason that is only logged.
"""

from typing import Dict, List, Optional


class InvoiceError(Exception):
    """Base class for invoice operation failures"""

    code = "INVOICE_ERROR"

    def __init__(self, message: str, reason: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason
        if code is not None:
            self.code = code


class ValidationError(InvoiceError):
    """Malformed or out-of-range input; the caller must correct and resubmit"""

    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str = "Invalid invoice payload",
        details: Optional[List[Dict[str, str]]] = None,
    ):
        super().__init__(message, reason="Request validation failed")
        self.details = details or []


class NotFoundError(InvoiceError):
    """The operation targets an invoice id that does not exist"""

    code = "INVOICE_NOT_FOUND"

    def __init__(self, invoice_id: str):
        super().__init__(
            f"Invoice with ID {invoice_id} not found",
            reason="Invoice does not exist",
        )
        self.invoice_id = invoice_id


class StoreError(InvoiceError):
    """
    Persistence failure

    transient is True when the backend may succeed on a later attempt
    (network failure, remote 5xx). Nothing here retries.
    """

    def __init__(self, message: str, reason: Optional[str] = None, transient: bool = False):
        super().__init__(
            message,
            reason=reason,
            code="STORE_UNAVAILABLE" if transient else "STORE_FAILURE",
        )
        self.transient = transient


class RenderError(InvoiceError):
    """Document generation failed after the invoice was loaded"""

    code = "RENDER_FAILED"
