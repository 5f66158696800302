"""Invoice API Routes

Admin-only FastAPI routes for the invoice lifecycle and PDF download.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import Response

from src.app.use_cases.invoices.dtos import InvoiceCreatedResponseDTO, SuccessResponseDTO
from src.app.use_cases.invoices.invoice_service import InvoiceService
from src.depends import get_invoice_service, require_admin

router = APIRouter(prefix="/invoices", tags=["Invoices"], dependencies=[Depends(require_admin)])

NOT_FOUND_RESPONSE = {
    "description": "Invoice not found",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "INVOICE_NOT_FOUND",
                    "message": "Invoice with ID inv_lx2k9f0a3b7c1d9e not found",
                    "details": []
                }
            }
        }
    }
}

VALIDATION_RESPONSE = {
    "description": "Validation error",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": "Invalid invoice payload",
                    "details": [{"field": "client_info.name", "message": "Field required"}]
                }
            }
        }
    }
}


@router.get("", status_code=status.HTTP_200_OK)
async def list_invoices(
    service: InvoiceService = Depends(get_invoice_service),
) -> List[Dict[str, Any]]:
    """
    List all invoices, oldest first.

    **Returns:**
    - 200: Array of full invoice documents
    """
    invoices = await service.list()
    return [invoice.to_document() for invoice in invoices]


@router.post(
    "",
    response_model=InvoiceCreatedResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={400: VALIDATION_RESPONSE},
)
async def create_invoice(
    payload: Any = Body(...),
    service: InvoiceService = Depends(get_invoice_service),
):
    """
    Create an invoice.

    subtotal, tax_amount and total are computed server-side; submitted values
    for them are ignored.

    **Example request:**
    ```json
    {
      "client_info": {"name": "Acme Co"},
      "lines": [{"name": "Video edit", "quantity": 2, "rate": 150}],
      "summary": {"tax_percent": 10}
    }
    ```

    **Returns:**
    - 201: `{"success": true, "id": "inv_..."}`
    - 400: Payload rejected
    """
    invoice_id = await service.create(payload)
    return InvoiceCreatedResponseDTO(id=invoice_id)


@router.get(
    "/{invoice_id}",
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE},
)
async def get_invoice(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
) -> Dict[str, Any]:
    invoice = await service.get(invoice_id)
    return invoice.to_document()


@router.patch(
    "/{invoice_id}",
    response_model=SuccessResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={400: VALIDATION_RESPONSE, 404: NOT_FOUND_RESPONSE},
)
async def patch_invoice(
    invoice_id: str,
    payload: Any = Body(...),
    service: InvoiceService = Depends(get_invoice_service),
):
    """
    Update status, payment_status, payment_method or notes.

    Any other field is rejected. Setting either status field sets both.
    """
    await service.patch(invoice_id, payload)
    return SuccessResponseDTO()


@router.delete(
    "/{invoice_id}",
    response_model=SuccessResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE},
)
async def delete_invoice(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
):
    await service.delete(invoice_id)
    return SuccessResponseDTO()


@router.get(
    "/{invoice_id}/pdf",
    responses={
        200: {
            "content": {"application/pdf": {}},
            "description": "PDF document"
        },
        404: NOT_FOUND_RESPONSE,
    }
)
async def download_invoice_pdf(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
):
    """
    Download the invoice as a single-page PDF file.

    **Returns:**
    - 200: PDF file as binary response
    - 404: Invoice not found
    - 500: Rendering failed
    """
    rendered = await service.render(invoice_id)

    return Response(
        content=rendered.content,
        media_type=rendered.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{rendered.filename}"'
        }
    )
