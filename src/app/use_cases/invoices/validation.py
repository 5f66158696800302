"""Invoice request validation.

Turns raw request payloads into command DTOs or raises ValidationError with
per-field details the caller can act on.
"""

from typing import Any, Dict, List

from pydantic import ValidationError as SchemaValidationError

from src.app.errors import ValidationError
from .dtos import CreateInvoiceCommandDTO, PatchInvoiceCommandDTO


def _details(error: SchemaValidationError) -> List[Dict[str, str]]:
    details = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "body"
        details.append({"field": field, "message": item["msg"]})
    return details


def validate_create(payload: Any) -> CreateInvoiceCommandDTO:
    """
    Validate an invoice creation payload

    Args:
        payload: Decoded JSON request body

    Returns:
        CreateInvoiceCommandDTO with blank lines dropped

    Raises:
        ValidationError: If the payload breaks any rule
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invoice payload must be a JSON object")
    try:
        return CreateInvoiceCommandDTO.model_validate(payload)
    except SchemaValidationError as e:
        raise ValidationError("Invalid invoice payload", details=_details(e)) from e


def validate_patch(payload: Any) -> PatchInvoiceCommandDTO:
    """
    Validate an invoice patch payload

    Only status, payment_status, payment_method and notes are accepted;
    any other key (lines, id, created_at, summary, ...) fails validation.

    Raises:
        ValidationError: If the payload breaks any rule
    """
    if not isinstance(payload, dict):
        raise ValidationError("Patch payload must be a JSON object")
    try:
        return PatchInvoiceCommandDTO.model_validate(payload)
    except SchemaValidationError as e:
        raise ValidationError("Invalid patch payload", details=_details(e)) from e
