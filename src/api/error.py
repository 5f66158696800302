"""API Error Handling

Maps the application failure taxonomy onto HTTP responses. Every error body
has the same envelope:

    {"error": {"code": "...", "message": "...", "details": [...]}}
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.app.errors import (
    InvoiceError,
    NotFoundError,
    RenderError,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

GENERIC_STORE_MESSAGE = "Invoice store is unavailable"
GENERIC_RENDER_MESSAGE = "Failed to generate invoice PDF"


class ClientError(Exception):
    """Error raised from the HTTP layer with an explicit status code"""

    def __init__(self, error: InvoiceError, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code


def error_body(code: str, message: str, details=None) -> dict:
    return {"error": {"code": code, "message": message, "details": details or []}}


def status_for(error: InvoiceError) -> int:
    if isinstance(error, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, StoreError):
        if error.transient:
            return status.HTTP_503_SERVICE_UNAVAILABLE
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_response(error: InvoiceError, status_code: int) -> JSONResponse:
    if isinstance(error, StoreError):
        message = GENERIC_STORE_MESSAGE
    elif isinstance(error, RenderError):
        message = GENERIC_RENDER_MESSAGE
    else:
        message = error.message
    details = error.details if isinstance(error, ValidationError) else []
    return JSONResponse(status_code=status_code, content=error_body(error.code, message, details))


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return to_response(exc.error, exc.status_code)


async def invoice_error_handler(request: Request, exc: InvoiceError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} failed: {exc.code} {exc.message} ({exc.reason})"
        )
    return to_response(exc, status_code)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": ".".join(str(part) for part in item.get("loc", ())), "message": item.get("msg", "")}
        for item in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("VALIDATION_ERROR", "Invalid request", details),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(InvoiceError, invoice_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
