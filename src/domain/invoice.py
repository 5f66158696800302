"""Invoice Domain Entity

The full invoice document as issued to one client. The stored document is
the source of truth; listing columns are derived from it.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List
from pydantic import BaseModel, ConfigDict, Field, field_validator


class PaymentStatus(str, Enum):
    """Invoice payment status"""
    UNPAID = "unpaid"
    PAID = "paid"
    PARTIAL = "partial"


class InvoiceDocumentModel(BaseModel):
    # Stored documents may come from older snapshots; unknown keys are dropped
    model_config = ConfigDict(extra="ignore")


class ClientInfo(InvoiceDocumentModel):
    name: str
    address: str = ""
    city: str = ""
    email: str = ""
    phone: str = ""


class ServiceLine(InvoiceDocumentModel):
    """
    One billable row

    Domain Rules:
    - amount = quantity * rate unless an explicit amount was given
    """

    name: str
    description: str = ""
    quantity: Decimal = Decimal("0")
    rate: Decimal = Decimal("0")
    amount: Decimal = Decimal("0")


class AdditionalCharges(InvoiceDocumentModel):
    extra_revision: Decimal = Decimal("0")
    express_delivery: Decimal = Decimal("0")
    addons_amount: Decimal = Decimal("0")
    addons_description: str = ""

    def numeric_total(self) -> Decimal:
        return self.extra_revision + self.express_delivery + self.addons_amount


class Summary(InvoiceDocumentModel):
    """
    Derived monetary totals

    Domain Rules:
    - subtotal = sum(line.amount) + additional charges (exact)
    - tax_amount = round2(subtotal * tax_percent / 100)
    - total = max(0, round2(subtotal + tax_amount - discount))
    """

    subtotal: Decimal = Decimal("0")
    tax_percent: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


class Footer(InvoiceDocumentModel):
    business_name: str = ""
    contact: str = ""
    address: str = ""
    city: str = ""
    tax_id: str = ""
    website: str = ""
    email: str = ""
    phone: str = ""
    terms: str = ""
    refund_policy: str = ""
    logo_url: str = ""


class Invoice(InvoiceDocumentModel):
    """
    Invoice - Billing document issued to one client

    Domain Rules:
    - id and created_at are assigned once and never change
    - status and payment_status always carry the same value
    - only status, payment_status, payment_method and notes change after creation
    """

    id: str
    created_at: datetime
    client_info: ClientInfo
    project_ref: str = ""
    invoice_number: str = ""
    reference: str = ""
    invoice_date: str = ""
    due_date: str = ""
    lines: List[ServiceLine] = Field(default_factory=list)
    additional_charges: AdditionalCharges = Field(default_factory=AdditionalCharges)
    summary: Summary = Field(default_factory=Summary)
    currency: str = ""
    status: PaymentStatus = PaymentStatus.UNPAID
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    payment_method: str = ""
    notes: str = ""
    footer: Footer = Field(default_factory=Footer)

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def display_number(self) -> str:
        return self.invoice_number or self.id

    def to_document(self) -> Dict[str, Any]:
        """Full JSON-ready document as persisted"""
        return self.model_dump(mode="json")

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Invoice":
        return cls.model_validate(document)

    def merged(self, patch_fields: Dict[str, Any]) -> "Invoice":
        """Return a new invoice with top-level patch fields applied; id and created_at are kept"""
        document = self.to_document()
        created_at = document["created_at"]
        document.update(patch_fields)
        document["id"] = self.id
        document["created_at"] = created_at
        return Invoice.from_document(document)

    def listing_columns(self) -> Dict[str, Any]:
        """Denormalized scalar columns kept beside the stored document"""
        return {
            "status": self.status.value,
            "payment_status": self.payment_status.value,
            "payment_method": self.payment_method,
            "currency": self.currency,
            "total": self.summary.total,
        }
