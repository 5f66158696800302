"""Data Transfer Objects for Invoice Use Cases

Strict pydantic schemas for command inputs and response outputs. Unknown
fields are rejected at every level.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.domain.invoice import PaymentStatus

MAX_LINE_ITEMS = 200

# Keeps every derived total inside the stored Numeric(18, 2) columns
MAX_AMOUNT = Decimal("9999999999.99")
MAX_QUANTITY = Decimal("1000000")


class StrictInputModel(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class ClientInfoInputDTO(StrictInputModel):
    """Billed-to party"""

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Client name (required, non-empty)"
    )
    address: str = Field(default="", max_length=240)
    city: str = Field(default="", max_length=140, description="City / region line")
    email: str = Field(default="", max_length=200)
    phone: str = Field(default="", max_length=80)


class ServiceLineInputDTO(StrictInputModel):
    """
    One submitted service line

    Lines with neither name nor description are dropped by the command;
    amount falls back to quantity * rate when omitted.
    """

    name: str = Field(default="", max_length=120)
    description: str = Field(default="", max_length=800)
    quantity: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_QUANTITY)
    rate: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_AMOUNT)
    amount: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT)

    def is_blank(self) -> bool:
        return not self.name and not self.description

    @model_validator(mode="after")
    def _check_amount(self) -> "ServiceLineInputDTO":
        if self.amount is None and self.quantity * self.rate > MAX_AMOUNT:
            raise ValueError(f"quantity * rate must not exceed {MAX_AMOUNT}")
        return self


class AdditionalChargesInputDTO(StrictInputModel):
    extra_revision: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_AMOUNT)
    express_delivery: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_AMOUNT)
    addons_amount: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_AMOUNT)
    addons_description: str = Field(default="", max_length=300)


class SummaryInputDTO(StrictInputModel):
    """
    Client-side summary

    Only tax_percent and discount are used. subtotal, tax_amount and total
    are accepted for compatibility and recomputed server-side.
    """

    subtotal: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT * MAX_LINE_ITEMS)
    tax_percent: Optional[Decimal] = Field(
        default=None,
        ge=0,
        le=100,
        description="Tax rate in percent (defaults to the configured rate)"
    )
    tax_amount: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT * MAX_LINE_ITEMS)
    discount: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_AMOUNT)
    total: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT * MAX_LINE_ITEMS)


class FooterInputDTO(StrictInputModel):
    """Business display block; empty fields are filled from configuration"""

    business_name: str = Field(default="", max_length=200)
    contact: str = Field(default="", max_length=300)
    address: str = Field(default="", max_length=240)
    city: str = Field(default="", max_length=140)
    tax_id: str = Field(default="", max_length=80)
    website: str = Field(default="", max_length=120)
    email: str = Field(default="", max_length=120)
    phone: str = Field(default="", max_length=80)
    terms: str = Field(default="", max_length=2000)
    refund_policy: str = Field(default="", max_length=2000)
    logo_url: str = Field(default="", max_length=500)


class CreateInvoiceCommandDTO(StrictInputModel):
    """
    Command DTO for creating an invoice

    Used as input to CreateInvoice use case.
    """

    client_info: ClientInfoInputDTO
    project_ref: str = Field(default="", max_length=200, description="Project label")
    invoice_number: str = Field(
        default="",
        max_length=80,
        description="Display invoice number (defaults to the invoice id)"
    )
    reference: str = Field(default="", max_length=80)
    invoice_date: str = Field(default="", max_length=80, description="Display date")
    due_date: str = Field(default="", max_length=80, description="Display date")
    lines: List[ServiceLineInputDTO] = Field(..., max_length=MAX_LINE_ITEMS)
    additional_charges: AdditionalChargesInputDTO = Field(
        default_factory=AdditionalChargesInputDTO
    )
    summary: SummaryInputDTO = Field(default_factory=SummaryInputDTO)
    currency: str = Field(default="", max_length=10)
    status: Optional[PaymentStatus] = None
    payment_status: Optional[PaymentStatus] = None
    payment_method: str = Field(default="", max_length=80)
    notes: str = Field(default="", max_length=1200)
    footer: FooterInputDTO = Field(default_factory=FooterInputDTO)

    @model_validator(mode="after")
    def _normalize(self) -> "CreateInvoiceCommandDTO":
        self.lines = [line for line in self.lines if not line.is_blank()]
        if not self.lines:
            raise ValueError("At least one service line with a name is required")
        if any(not line.name for line in self.lines):
            raise ValueError("Every service line needs a name")

        if (
            self.status is not None
            and self.payment_status is not None
            and self.status != self.payment_status
        ):
            raise ValueError("status and payment_status must match")
        return self

    @property
    def resolved_status(self) -> PaymentStatus:
        return self.status or self.payment_status or PaymentStatus.UNPAID


class PatchInvoiceCommandDTO(StrictInputModel):
    """
    Command DTO for patching an invoice

    Allow-list of the only fields that change after creation.
    """

    status: Optional[PaymentStatus] = None
    payment_status: Optional[PaymentStatus] = None
    payment_method: Optional[str] = Field(default=None, max_length=80)
    notes: Optional[str] = Field(default=None, max_length=1200)

    @model_validator(mode="after")
    def _check(self) -> "PatchInvoiceCommandDTO":
        if all(
            value is None
            for value in (self.status, self.payment_status, self.payment_method, self.notes)
        ):
            raise ValueError("Patch must set at least one field")
        if (
            self.status is not None
            and self.payment_status is not None
            and self.status != self.payment_status
        ):
            raise ValueError("status and payment_status must match")
        return self

    def to_patch_fields(self) -> Dict[str, Any]:
        """JSON-ready document fields with status and payment_status mirrored"""
        fields: Dict[str, Any] = {}
        status = self.status or self.payment_status
        if status is not None:
            fields["status"] = status.value
            fields["payment_status"] = status.value
        if self.payment_method is not None:
            fields["payment_method"] = self.payment_method
        if self.notes is not None:
            fields["notes"] = self.notes
        return fields


class InvoiceCreatedResponseDTO(BaseModel):
    success: bool = True
    id: str = Field(..., description="Identifier of the new invoice")


class SuccessResponseDTO(BaseModel):
    success: bool = True


class RenderedInvoiceDTO(BaseModel):
    """Rendered single-page document ready for download"""

    invoice_id: str
    content: bytes
    media_type: str = "application/pdf"
    filename: str
